# Copyright (C) 2021, 2022, 2023, 2024 John Haskins Jr.

import riscv.constants

from riscv.constants import Reg

class Value:
    # Base for the immutable records below. FIELDS names the attributes
    # that make up the value; equality, hashing and repr follow from it.
    FIELDS = ()
    def __init__(self, *args, **kwargs):
        assert len(args) <= len(self.FIELDS), '{}(): too many arguments ({})'.format(type(self).__name__, args)
        _values = {**dict(zip(self.FIELDS, args)), **kwargs}
        assert set(_values.keys()) <= set(self.FIELDS), '{}(): unknown fields {}'.format(type(self).__name__, set(_values.keys()) - set(self.FIELDS))
        for f in self.FIELDS:
            object.__setattr__(self, f, (_values.get(f) if f in _values.keys() else self.missing(f)))
    def missing(self, field):
        raise TypeError('{}(): missing field {}'.format(type(self).__name__, field))
    def get(self, attribute, alternative=None):
        return (getattr(self, attribute) if attribute in self.FIELDS else alternative)
    def __setattr__(self, attribute, value):
        raise AttributeError('{} is immutable'.format(type(self).__name__))
    def __delattr__(self, attribute):
        raise AttributeError('{} is immutable'.format(type(self).__name__))
    def __eq__(self, other):
        return type(self) == type(other) and all(map(lambda f: self.get(f) == other.get(f), self.FIELDS))
    def __ne__(self, other):
        return not self == other
    def __hash__(self):
        return hash((type(self).__name__,) + tuple(map(self.get, self.FIELDS)))
    def __repr__(self):
        return '{}({})'.format(type(self).__name__, ', '.join(map(lambda f: '{}={!r}'.format(f, self.get(f)), self.FIELDS)))

# Instructions have arguments that specify the data they use when executed.
# An argument is one of: a register (a0, zero, ...); a signed or unsigned
# immediate, whose signedness is fixed per instruction; a named special
# value (CSR names, fence sets); or a base register plus signed offset pair
# that forms a single address argument (0(ra), 4(sp), ...).
class Arg(Value):
    pass
class Register(Arg):
    FIELDS = ('reg',)
    def __str__(self):
        return str(self.reg)
class UnsignedImm(Arg):
    FIELDS = ('value',)
    def __str__(self):
        return '{}'.format(self.value)
class SignedImm(Arg):
    FIELDS = ('value',)
    def __str__(self):
        return '{}'.format(self.value)
class Special(Arg):
    FIELDS = ('text',)
    def __str__(self):
        return self.text
class Address(Arg):
    FIELDS = ('base', 'offset')
    def __str__(self):
        return '{}({})'.format(self.offset, self.base)

class Instruction(Value):
    """A decoded instruction.

    OPERANDS maps each operand to the decoded field it is taken from (see
    riscv.decode.fields); a subclass per mnemonic sets NAME.
    """
    NAME = None
    OPERANDS = {}
    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.FIELDS = tuple(cls.OPERANDS.keys())
    @classmethod
    def from_fields(cls, fields):
        return cls(**{k: fields.get(v) for k, v in cls.OPERANDS.items()})
    def missing(self, field):
        # an operand that is structurally absent defaults to x0 or 0
        return (Reg.default() if self.OPERANDS.get(field) in ['rd', 'rs1', 'rs2'] else 0)
    def name(self):
        return self.NAME
    def args(self):
        return []
    def __str__(self):
        return ' '.join([self.name()] + ([', '.join(map(str, self.args()))] if self.args() else []))

class Illegal(Instruction):
    # The all-zero word is defined to be an illegal instruction;
    # see: https://riscv.org/wp-content/uploads/2019/12/riscv-spec-20191213.pdf (p. 12)
    NAME = 'illegal'

class RType(Instruction):
    # funct7 rs2 rs1 funct3 rd opcode R-type
    OPERANDS = {'rd': 'rd', 'rs1': 'rs1', 'rs2': 'rs2'}
    def args(self):
        return [Register(self.rd), Register(self.rs1), Register(self.rs2)]
class Add(RType): NAME = 'add'
class Sub(RType): NAME = 'sub'
class Sll(RType): NAME = 'sll'
class Slt(RType): NAME = 'slt'
class Sltu(RType): NAME = 'sltu'
class Xor(RType): NAME = 'xor'
class Srl(RType): NAME = 'srl'
class Sra(RType): NAME = 'sra'
class Or(RType): NAME = 'or'
class And(RType): NAME = 'and'

class IType(Instruction):
    # imm[11:0] rs1 funct3 rd opcode I-type
    OPERANDS = {'rd': 'rd', 'rs1': 'rs1', 'imm': 'i_imm'}
    def args(self):
        return [Register(self.rd), Register(self.rs1), SignedImm(self.imm)]
class Addi(IType): NAME = 'addi'
class Slti(IType): NAME = 'slti'
class Sltiu(IType): NAME = 'sltiu'
class Xori(IType): NAME = 'xori'
class Ori(IType): NAME = 'ori'
class Andi(IType): NAME = 'andi'

class Shift(Instruction):
    # 0?00000 shamt rs1 funct3 rd 0010011; on RV32I, shamt[5] must be 0,
    # which the funct7 guard in the decoder enforces
    OPERANDS = {'rd': 'rd', 'rs1': 'rs1', 'shamt': 'shamt'}
    def args(self):
        return [Register(self.rd), Register(self.rs1), UnsignedImm(self.shamt)]
class Slli(Shift): NAME = 'slli'
class Srli(Shift): NAME = 'srli'
class Srai(Shift): NAME = 'srai'

class Load(Instruction):
    # imm[11:0] rs1 width rd 0000011
    OPERANDS = {'rd': 'rd', 'rs1': 'rs1', 'imm': 'i_imm'}
    def args(self):
        return [Register(self.rd), Address(self.rs1, self.imm)]
class Lb(Load): NAME = 'lb'
class Lh(Load): NAME = 'lh'
class Lw(Load): NAME = 'lw'
class Lbu(Load): NAME = 'lbu'
class Lhu(Load): NAME = 'lhu'

class Store(Instruction):
    # imm[11:5] rs2 rs1 width imm[4:0] 0100011; rs1 is the base address,
    # rs2 the value stored
    OPERANDS = {'rs1': 'rs1', 'rs2': 'rs2', 'imm': 's_imm'}
    def args(self):
        return [Register(self.rs2), Address(self.rs1, self.imm)]
class Sb(Store): NAME = 'sb'
class Sh(Store): NAME = 'sh'
class Sw(Store): NAME = 'sw'

class Branch(Instruction):
    # imm[12|10:5] rs2 rs1 funct3 imm[4:1|11] 1100011
    OPERANDS = {'rs1': 'rs1', 'rs2': 'rs2', 'imm': 'b_imm'}
    def args(self):
        return [Register(self.rs1), Register(self.rs2), SignedImm(self.imm)]
class Beq(Branch): NAME = 'beq'
class Bne(Branch): NAME = 'bne'
class Blt(Branch): NAME = 'blt'
class Bge(Branch): NAME = 'bge'
class Bltu(Branch): NAME = 'bltu'
class Bgeu(Branch): NAME = 'bgeu'

class UType(Instruction):
    # imm[31:12] rd opcode U-type; imm holds the raw upper 20 bits, not
    # shifted into place
    OPERANDS = {'rd': 'rd', 'imm': 'u_imm'}
    def args(self):
        return [Register(self.rd), UnsignedImm(self.imm)]
class Lui(UType):
    # LUI (load upper immediate) is used to build 32-bit constants and
    # uses the U-type format. LUI places the U-immediate value in the top
    # 20 bits of the destination register rd, filling in the lowest 12
    # bits with zeros.
    NAME = 'lui'
class Auipc(UType):
    # AUIPC (add upper immediate to pc) is used to build pc-relative
    # addresses and uses the U-type format. AUIPC forms a 32-bit offset
    # from the 20-bit U-immediate, filling in the lowest 12 bits with
    # zeros, adds this offset to the address of the AUIPC instruction,
    # then places the result in register rd.
    NAME = 'auipc'

class Jal(Instruction):
    # The jump and link (JAL) instruction uses the J-type format, where the
    # J-immediate encodes a signed offset in multiples of 2 bytes. The
    # offset is sign-extended and added to the address of the jump
    # instruction to form the jump target address.
    # see: https://riscv.org/wp-content/uploads/2019/12/riscv-spec-20191213.pdf (p. 20)
    NAME = 'jal'
    OPERANDS = {'rd': 'rd', 'imm': 'j_imm'}
    def args(self):
        return [Register(self.rd), SignedImm(self.imm)]
class Jalr(Instruction):
    # The indirect jump instruction JALR (jump and link register) uses
    # the I-type encoding. The target address is obtained by adding the
    # sign-extended 12-bit I-immediate to the register rs1, then setting
    # the least-significant bit of the result to zero.
    # see: https://riscv.org/wp-content/uploads/2019/12/riscv-spec-20191213.pdf (p. 21)
    NAME = 'jalr'
    OPERANDS = {'rd': 'rd', 'rs1': 'rs1', 'imm': 'i_imm'}
    def args(self):
        # jalr ra, imm(rs1) is written as just jalr imm(rs1)
        if Reg.RA == self.rd: return [Address(self.rs1, self.imm)]
        return [Register(self.rd), Address(self.rs1, self.imm)]

class Fence(Instruction):
    # fm pred succ rs1 000 rd 0001111
    # pred and succ are 4-bit sets of I/O/R/W; fm is the fence mode
    # see: https://riscv.org/wp-content/uploads/2019/12/riscv-spec-20191213.pdf (p. 26)
    NAME = 'fence'
    OPERANDS = {'rd': 'rd', 'rs1': 'rs1', 'succ': 'succ', 'pred': 'pred', 'fm': 'fm'}
    def args(self):
        return [
            Register(self.rd),
            Register(self.rs1),
            Special('succ: 0b{:b}, pred: 0b{:b}, fm: 0b{:b}'.format(self.succ, self.pred, self.fm)),
        ]
class FenceI(Instruction):
    # imm[11:0] rs1 001 rd 0001111 FENCE.I (Zifencei)
    NAME = 'fence.i'
    OPERANDS = {'rd': 'rd', 'rs1': 'rs1', 'imm': 'i_imm'}
    def args(self):
        return [Register(self.rd), Register(self.rs1), SignedImm(self.imm)]

class Environment(Instruction):
    # ECALL makes a service request to the execution environment; EBREAK
    # returns control to a debugging environment. Neither renders operands.
    OPERANDS = {'rd': 'rd', 'rs1': 'rs1'}
class Ecall(Environment): NAME = 'ecall'
class Ebreak(Environment): NAME = 'ebreak'

class Uret(Instruction): NAME = 'uret'
class Sret(Instruction): NAME = 'sret'
class Mret(Instruction): NAME = 'mret'
class Wfi(Instruction): NAME = 'wfi'

class Csr(Instruction):
    # csr rs1 funct3 rd 1110011 (Zicsr); the CSR number is zero-extended
    # see: https://riscv.org/wp-content/uploads/2019/12/riscv-spec-20191213.pdf (p. 56)
    OPERANDS = {'rd': 'rd', 'rs1': 'rs1', 'csr': 'csr'}
    def args(self):
        return [Register(self.rd), Special(riscv.constants.csr_name(self.csr)), Register(self.rs1)]
class Csrrw(Csr): NAME = 'csrrw'
class Csrrs(Csr): NAME = 'csrrs'
class Csrrc(Csr): NAME = 'csrrc'

class CsrImm(Instruction):
    # csr uimm[4:0] funct3 rd 1110011; the rs1 field holds a 5-bit
    # zero-extended immediate
    OPERANDS = {'rd': 'rd', 'uimm': 'uimm', 'csr': 'csr'}
    def args(self):
        return [Register(self.rd), Special(riscv.constants.csr_name(self.csr)), UnsignedImm(self.uimm)]
class Csrrwi(CsrImm): NAME = 'csrrwi'
class Csrrsi(CsrImm): NAME = 'csrrsi'
class Csrrci(CsrImm): NAME = 'csrrci'
