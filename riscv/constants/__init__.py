# Copyright (C) 2021, 2022, 2023, 2024 John Haskins Jr.

import enum

# base opcode map (inst[6:0]);
# see: https://riscv.org/wp-content/uploads/2019/12/riscv-spec-20191213.pdf (p. 129)
LOAD     = 0b000_0011
MISC_MEM = 0b000_1111
OP_IMM   = 0b001_0011
AUIPC    = 0b001_0111
STORE    = 0b010_0011
OP       = 0b011_0011
LUI      = 0b011_0111
BRANCH   = 0b110_0011
JALR     = 0b110_0111
JAL      = 0b110_1111
SYSTEM   = 0b111_0011

class RegIndexError(IndexError):
    def __init__(self, idx):
        super().__init__('No register x{}!'.format(idx))
        self.idx = idx
class CsrIndexError(IndexError):
    def __init__(self, idx):
        super().__init__('CSR number {} does not fit in 12 bits!'.format(idx))
        self.idx = idx

class Reg(enum.IntEnum):
    # Integer register convention;
    # see: https://github.com/riscv/riscv-elf-psabi-doc/blob/master/riscv-elf.md#integer-register-convention-
    ZERO = 0
    RA = 1
    SP = 2
    GP = 3
    TP = 4
    T0 = 5
    T1 = 6
    T2 = 7
    S0 = 8
    S1 = 9
    A0 = 10
    A1 = 11
    A2 = 12
    A3 = 13
    A4 = 14
    A5 = 15
    A6 = 16
    A7 = 17
    S2 = 18
    S3 = 19
    S4 = 20
    S5 = 21
    S6 = 22
    S7 = 23
    S8 = 24
    S9 = 25
    S10 = 26
    S11 = 27
    T3 = 28
    T4 = 29
    T5 = 30
    T6 = 31
    @classmethod
    def from_index(cls, idx):
        if not 0 <= idx <= 31: raise RegIndexError(idx)
        return cls(idx)
    @classmethod
    def default(cls):
        return cls.ZERO
    def __str__(self):
        return self.name.lower()

# CSR privilege; the upper four bits of the CSR number encode read/write
# accessibility (csr[11:10]) and the lowest privilege level that may access
# the register (csr[9:8])
# see: https://riscv.org/wp-content/uploads/2019/12/riscv-privileged-20191213.pdf (p. 7)
URW = 'urw'
URO = 'uro'
SRW = 'srw'
MRW = 'mrw'
MRO = 'mro'

CSRS = {
    # User Trap Setup
    0x000: ('ustatus', URW),
    0x004: ('uie', URW),
    0x005: ('utvec', URW),
    # User Trap Handling
    0x040: ('uscratch', URW),
    0x041: ('uepc', URW),
    0x042: ('ucause', URW),
    0x043: ('utval', URW),
    0x044: ('uip', URW),
    # User Floating-Point CSRs
    0x001: ('fflags', URW),
    0x002: ('frm', URW),
    0x003: ('fcsr', URW),
    # User Counter/Timers
    0xc00: ('cycle', URO),
    0xc01: ('time', URO),
    0xc02: ('instret', URO),
    **{0xc00 + x: ('hpmcounter{}'.format(x), URO) for x in range(3, 32)},
    0xc80: ('cycleh', URO),
    0xc81: ('timeh', URO),
    0xc82: ('instreth', URO),
    **{0xc80 + x: ('hpmcounter{}h'.format(x), URO) for x in range(3, 32)},
    # Supervisor Trap Setup, Trap Handling, Protection and Translation
    0x100: ('sstatus', SRW),
    0x104: ('sie', SRW),
    0x105: ('stvec', SRW),
    0x106: ('scounteren', SRW),
    0x140: ('sscratch', SRW),
    0x141: ('sepc', SRW),
    0x142: ('scause', SRW),
    0x143: ('stval', SRW),
    0x144: ('sip', SRW),
    0x180: ('satp', SRW),
    # Machine Information Registers
    0xf11: ('mvendorid', MRO),
    0xf12: ('marchid', MRO),
    0xf13: ('mimpid', MRO),
    0xf14: ('mhartid', MRO),
    # Machine Trap Setup
    0x300: ('mstatus', MRW),
    0x301: ('misa', MRW),
    0x302: ('medeleg', MRW),
    0x303: ('mideleg', MRW),
    0x304: ('mie', MRW),
    0x305: ('mtvec', MRW),
    0x306: ('mcounteren', MRW),
    # Machine Trap Handling
    0x340: ('mscratch', MRW),
    0x341: ('mepc', MRW),
    0x342: ('mcause', MRW),
    0x343: ('mtval', MRW),
    0x344: ('mip', MRW),
}

def csr_name(num):
    if not 0 <= num <= 0xfff: raise CsrIndexError(num)
    return CSRS.get(num, ('0x{:03x}'.format(num), None))[0]
def csr_privilege(num):
    if not 0 <= num <= 0xfff: raise CsrIndexError(num)
    return CSRS.get(num, (None, None))[1]
