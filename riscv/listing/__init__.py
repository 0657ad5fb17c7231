# Copyright (C) 2021, 2022, 2023, 2024 John Haskins Jr.

import riscv.instruction

from riscv.constants import Reg
from riscv.instruction import Register, SignedImm, Special, Address

def pseudo(instr):
    # Display-only rewrites to the assembler pseudo-instructions;
    # see: https://riscv.org/wp-content/uploads/2019/12/riscv-spec-20191213.pdf (p. 139, 140)
    _args = instr.args()
    _name = instr.name()
    if isinstance(instr, riscv.instruction.Addi):
        if Reg.ZERO == instr.rd and Reg.ZERO == instr.rs1 and 0 == instr.imm: return 'nop', []
        if Reg.ZERO == instr.rs1: return 'li', [Register(instr.rd), SignedImm(instr.imm)]
        if 0 == instr.imm: return 'mv', [Register(instr.rd), Register(instr.rs1)]
    elif isinstance(instr, riscv.instruction.Xori) and -1 == instr.imm:
        return 'not', [Register(instr.rd), Register(instr.rs1)]
    elif isinstance(instr, riscv.instruction.Sub) and Reg.ZERO == instr.rs1:
        return 'neg', [Register(instr.rd), Register(instr.rs2)]
    elif isinstance(instr, riscv.instruction.Sltiu) and 1 == instr.imm:
        return 'seqz', [Register(instr.rd), Register(instr.rs1)]
    elif isinstance(instr, riscv.instruction.Sltu) and Reg.ZERO == instr.rs1:
        return 'snez', [Register(instr.rd), Register(instr.rs2)]
    elif isinstance(instr, (riscv.instruction.Beq, riscv.instruction.Bne)) and Reg.ZERO == instr.rs2:
        return '{}z'.format(_name), [Register(instr.rs1), SignedImm(instr.imm)]
    elif isinstance(instr, riscv.instruction.Jal):
        if Reg.ZERO == instr.rd: return 'j', [SignedImm(instr.imm)]
        if Reg.RA == instr.rd: return 'jal', [SignedImm(instr.imm)]
    elif isinstance(instr, riscv.instruction.Jalr) and Reg.ZERO == instr.rd:
        if Reg.RA == instr.rs1 and 0 == instr.imm: return 'ret', []
        return 'jr', ([Register(instr.rs1)] if 0 == instr.imm else [Address(instr.rs1, instr.imm)])
    elif isinstance(instr, riscv.instruction.Csrrs) and Reg.ZERO == instr.rs1:
        return 'csrr', _args[:2]
    elif isinstance(instr, riscv.instruction.Csrrw) and Reg.ZERO == instr.rd:
        return 'csrw', _args[1:]
    return _name, _args

def text(instr, allow_pseudo=True):
    if instr is None: return '???'
    _name, _args = (pseudo(instr) if allow_pseudo else (instr.name(), instr.args()))
    return ' '.join([_name] + ([', '.join(map(str, _args))] if _args else []))

def render(dis, filename, allow_pseudo=True):
    # objdump-style listing, one line per yield
    yield ''
    yield '{}:\tfile format ELF32-riscv'.format(filename)
    yield ''
    yield ''
    yield 'Disassembly of section {}:'.format(dis.section)
    for entry in dis.disassembly():
        if entry.labels:
            # blank line ahead of each labelled block
            yield ''
            for label in entry.labels:
                yield '{:08x} <{}>:'.format(entry.addr, label)
        yield '{:8x}: {}{:17}\t{}'.format(
            entry.addr,
            ''.join(map(lambda b: '{:02x} '.format(b), entry.bytes)),
            '',
            text(entry.instr, allow_pseudo),
        )
