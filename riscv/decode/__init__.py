# Copyright (C) 2021, 2022, 2023, 2024 John Haskins Jr.

import riscv.constants

from riscv.bits import bits, bit, sign_ext
from riscv.constants import Reg
from riscv.instruction import (
    Illegal,
    Lb, Lh, Lw, Lbu, Lhu,
    Fence, FenceI,
    Addi, Slti, Sltiu, Xori, Ori, Andi, Slli, Srli, Srai,
    Auipc, Lui,
    Sb, Sh, Sw,
    Add, Sub, Sll, Slt, Sltu, Xor, Srl, Sra, Or, And,
    Beq, Bne, Blt, Bge, Bltu, Bgeu,
    Jalr, Jal,
    Ecall, Ebreak, Uret, Sret, Mret, Wfi,
    Csrrw, Csrrs, Csrrc, Csrrwi, Csrrsi, Csrrci,
)

def fields(word):
    # Different instructions use different named fields in the encoding,
    # and not all fields are always used; however, if two instructions use
    # the same field name, that field sits at the same position in the word
    # for both. Every field and every immediate is computed exactly once
    # here; the instruction classes pick the ones they need.
    #
    #  31      25 24   20 19   15 14  12 11    7 6      0
    # | funct7   | rs2   | rs1   |funct3| rd    | opcode | R-type
    # | imm[11:0]        | rs1   |funct3| rd    | opcode | I-type
    # | imm[11:5]| rs2   | rs1   |funct3|imm[4:0]| opcode| S-type
    # |imm[12|10:5]| rs2 | rs1   |funct3|imm[4:1|11]|opc | B-type
    # | imm[31:12]                      | rd    | opcode | U-type
    # | imm[20|10:1|11|19:12]           | rd    | opcode | J-type
    #
    # see: https://riscv.org/wp-content/uploads/2019/12/riscv-spec-20191213.pdf (p. 16, 17)
    return {
        'opcode': bits(word, 6, 0),
        'rd': Reg.from_index(bits(word, 11, 7)),
        'funct3': bits(word, 14, 12),
        'rs1': Reg.from_index(bits(word, 19, 15)),
        'rs2': Reg.from_index(bits(word, 24, 20)),
        'funct7': bits(word, 31, 25),
        'funct12': bits(word, 31, 20),
        'i_imm': sign_ext(bits(word, 31, 20), 11),
        's_imm': sign_ext((bits(word, 31, 25) << 5) | bits(word, 11, 7), 11),
        'b_imm': sign_ext((bit(word, 31) << 12) | (bit(word, 7) << 11) | (bits(word, 30, 25) << 5) | (bits(word, 11, 8) << 1), 12),
        'u_imm': bits(word, 31, 12),
        'j_imm': sign_ext((bit(word, 31) << 20) | (bits(word, 19, 12) << 12) | (bit(word, 20) << 11) | (bits(word, 30, 21) << 1), 20),
        'shamt': bits(word, 24, 20),
        'uimm': bits(word, 19, 15),
        'csr': bits(word, 31, 20),
        'fm': bits(word, 31, 28),
        'pred': bits(word, 27, 24),
        'succ': bits(word, 23, 20),
    }

# (opcode, funct3, guard, instruction); guard is None or (field, value),
# with field one of funct7/funct12; funct3 None means the instruction does
# not have a funct3 field (those bits belong to its immediate)
ARMS = [
    # imm[11:0] rs1 000 rd 0000011 LB
    # imm[11:0] rs1 001 rd 0000011 LH
    # imm[11:0] rs1 010 rd 0000011 LW
    # imm[11:0] rs1 100 rd 0000011 LBU
    # imm[11:0] rs1 101 rd 0000011 LHU
    (riscv.constants.LOAD, 0b000, None, Lb),
    (riscv.constants.LOAD, 0b001, None, Lh),
    (riscv.constants.LOAD, 0b010, None, Lw),
    (riscv.constants.LOAD, 0b100, None, Lbu),
    (riscv.constants.LOAD, 0b101, None, Lhu),

    # fm pred succ rs1 000 rd 0001111 FENCE
    # imm[11:0]    rs1 001 rd 0001111 FENCE.I
    (riscv.constants.MISC_MEM, 0b000, None, Fence),
    (riscv.constants.MISC_MEM, 0b001, None, FenceI),

    # imm[11:0]     rs1 000 rd 0010011 ADDI
    # 0000000 shamt rs1 001 rd 0010011 SLLI
    # imm[11:0]     rs1 010 rd 0010011 SLTI
    # imm[11:0]     rs1 011 rd 0010011 SLTIU
    # imm[11:0]     rs1 100 rd 0010011 XORI
    # 0000000 shamt rs1 101 rd 0010011 SRLI
    # 0100000 shamt rs1 101 rd 0010011 SRAI
    # imm[11:0]     rs1 110 rd 0010011 ORI
    # imm[11:0]     rs1 111 rd 0010011 ANDI
    (riscv.constants.OP_IMM, 0b000, None, Addi),
    (riscv.constants.OP_IMM, 0b001, ('funct7', 0b000_0000), Slli),
    (riscv.constants.OP_IMM, 0b010, None, Slti),
    (riscv.constants.OP_IMM, 0b011, None, Sltiu),
    (riscv.constants.OP_IMM, 0b100, None, Xori),
    (riscv.constants.OP_IMM, 0b101, ('funct7', 0b000_0000), Srli),
    (riscv.constants.OP_IMM, 0b101, ('funct7', 0b010_0000), Srai),
    (riscv.constants.OP_IMM, 0b110, None, Ori),
    (riscv.constants.OP_IMM, 0b111, None, Andi),

    # imm[31:12] rd 0010111 AUIPC
    (riscv.constants.AUIPC, None, None, Auipc),

    # imm[11:5] rs2 rs1 000 imm[4:0] 0100011 SB
    # imm[11:5] rs2 rs1 001 imm[4:0] 0100011 SH
    # imm[11:5] rs2 rs1 010 imm[4:0] 0100011 SW
    (riscv.constants.STORE, 0b000, None, Sb),
    (riscv.constants.STORE, 0b001, None, Sh),
    (riscv.constants.STORE, 0b010, None, Sw),

    # 0000000 rs2 rs1 000 rd 0110011 ADD
    # 0100000 rs2 rs1 000 rd 0110011 SUB
    # 0000000 rs2 rs1 001 rd 0110011 SLL
    # 0000000 rs2 rs1 010 rd 0110011 SLT
    # 0000000 rs2 rs1 011 rd 0110011 SLTU
    # 0000000 rs2 rs1 100 rd 0110011 XOR
    # 0000000 rs2 rs1 101 rd 0110011 SRL
    # 0100000 rs2 rs1 101 rd 0110011 SRA
    # 0000000 rs2 rs1 110 rd 0110011 OR
    # 0000000 rs2 rs1 111 rd 0110011 AND
    (riscv.constants.OP, 0b000, ('funct7', 0b000_0000), Add),
    (riscv.constants.OP, 0b000, ('funct7', 0b010_0000), Sub),
    (riscv.constants.OP, 0b001, ('funct7', 0b000_0000), Sll),
    (riscv.constants.OP, 0b010, ('funct7', 0b000_0000), Slt),
    (riscv.constants.OP, 0b011, ('funct7', 0b000_0000), Sltu),
    (riscv.constants.OP, 0b100, ('funct7', 0b000_0000), Xor),
    (riscv.constants.OP, 0b101, ('funct7', 0b000_0000), Srl),
    (riscv.constants.OP, 0b101, ('funct7', 0b010_0000), Sra),
    (riscv.constants.OP, 0b110, ('funct7', 0b000_0000), Or),
    (riscv.constants.OP, 0b111, ('funct7', 0b000_0000), And),

    # imm[31:12] rd 0110111 LUI
    (riscv.constants.LUI, None, None, Lui),

    # imm[12|10:5] rs2 rs1 000 imm[4:1|11] 1100011 BEQ
    # imm[12|10:5] rs2 rs1 001 imm[4:1|11] 1100011 BNE
    # imm[12|10:5] rs2 rs1 100 imm[4:1|11] 1100011 BLT
    # imm[12|10:5] rs2 rs1 101 imm[4:1|11] 1100011 BGE
    # imm[12|10:5] rs2 rs1 110 imm[4:1|11] 1100011 BLTU
    # imm[12|10:5] rs2 rs1 111 imm[4:1|11] 1100011 BGEU
    (riscv.constants.BRANCH, 0b000, None, Beq),
    (riscv.constants.BRANCH, 0b001, None, Bne),
    (riscv.constants.BRANCH, 0b100, None, Blt),
    (riscv.constants.BRANCH, 0b101, None, Bge),
    (riscv.constants.BRANCH, 0b110, None, Bltu),
    (riscv.constants.BRANCH, 0b111, None, Bgeu),

    # imm[11:0] rs1 000 rd 1100111 JALR
    (riscv.constants.JALR, 0b000, None, Jalr),

    # imm[20|10:1|11|19:12] rd 1101111 JAL
    (riscv.constants.JAL, None, None, Jal),

    # 000000000000 00000 000 00000 1110011 ECALL
    # 000000000001 00000 000 00000 1110011 EBREAK
    # 000000000010 00000 000 00000 1110011 URET
    # 000100000010 00000 000 00000 1110011 SRET
    # 001100000010 00000 000 00000 1110011 MRET
    # 000100000101 00000 000 00000 1110011 WFI
    # csr          rs1   001 rd    1110011 CSRRW
    # csr          rs1   010 rd    1110011 CSRRS
    # csr          rs1   011 rd    1110011 CSRRC
    # csr          uimm  101 rd    1110011 CSRRWI
    # csr          uimm  110 rd    1110011 CSRRSI
    # csr          uimm  111 rd    1110011 CSRRCI
    # see: https://riscv.org/wp-content/uploads/2019/12/riscv-privileged-20191213.pdf (p. 138)
    (riscv.constants.SYSTEM, 0b000, ('funct12', 0b0000_0000_0000), Ecall),
    (riscv.constants.SYSTEM, 0b000, ('funct12', 0b0000_0000_0001), Ebreak),
    (riscv.constants.SYSTEM, 0b000, ('funct12', 0b0000_0000_0010), Uret),
    (riscv.constants.SYSTEM, 0b000, ('funct12', 0b0001_0000_0010), Sret),
    (riscv.constants.SYSTEM, 0b000, ('funct12', 0b0011_0000_0010), Mret),
    (riscv.constants.SYSTEM, 0b000, ('funct12', 0b0001_0000_0101), Wfi),
    (riscv.constants.SYSTEM, 0b001, None, Csrrw),
    (riscv.constants.SYSTEM, 0b010, None, Csrrs),
    (riscv.constants.SYSTEM, 0b011, None, Csrrc),
    (riscv.constants.SYSTEM, 0b101, None, Csrrwi),
    (riscv.constants.SYSTEM, 0b110, None, Csrrsi),
    (riscv.constants.SYSTEM, 0b111, None, Csrrci),
]

def build_table(arms):
    _table = {}
    for opcode, funct3, guard, instruction in arms:
        for f3 in (range(8) if funct3 is None else [funct3]):
            _table.setdefault((opcode, f3), []).append((guard, instruction))
    check_table(_table)
    return _table
def check_table(table):
    # A key holds either exactly one unguarded arm, or arms that all guard
    # on the same field with pairwise distinct values; in either case at
    # most one arm can match a given word.
    for (opcode, funct3), arms in table.items():
        _guards = list(map(lambda a: a[0], arms))
        if None in _guards:
            assert 1 == len(arms), 'check_table(): ({:#09b}, {:#05b}) has an unguarded arm among {} arms!'.format(opcode, funct3, len(arms))
            continue
        _fields = set(map(lambda g: g[0], _guards))
        assert 1 == len(_fields), 'check_table(): ({:#09b}, {:#05b}) guards on more than one field ({})!'.format(opcode, funct3, _fields)
        assert next(iter(_fields)) in ['funct7', 'funct12'], 'check_table(): ({:#09b}, {:#05b}) guards on {}!'.format(opcode, funct3, _fields)
        _values = list(map(lambda g: g[1], _guards))
        assert len(_values) == len(set(_values)), 'check_table(): ({:#09b}, {:#05b}) has duplicate guards ({})!'.format(opcode, funct3, _values)
    return True

TABLE = build_table(ARMS)

def decode(word):
    # the all-zero word is defined to be illegal
    if 0 == word: return Illegal()
    _fields = fields(word)
    _arms = TABLE.get((_fields.get('opcode'), _fields.get('funct3')), [])
    _match = [i for g, i in _arms if g is None or _fields.get(g[0]) == g[1]]
    return (_match[0].from_fields(_fields) if _match else None)
def decode_bytes(buffer):
    assert 4 == len(buffer), 'decode_bytes(): expected 4 bytes, got {}'.format(len(buffer))
    return decode(int.from_bytes(buffer, 'little'))
