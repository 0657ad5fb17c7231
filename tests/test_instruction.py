import pytest

from riscv.constants import Reg
from riscv.decode import decode
from riscv.instruction import (
    Register, UnsignedImm, SignedImm, Special, Address,
    Illegal, Add, Addi, Lui, Lw, Sw, Beq, Jal, Jalr, Fence, FenceI,
    Ecall, Mret, Csrrw, Csrrs, Csrrwi,
)

@pytest.mark.parametrize('word,expected', [
    (0x00000000, 'illegal'),
    (0x00b78633, 'add a2, a5, a1'),
    (0x04010113, 'addi sp, sp, 64'),
    (0xdeadc537, 'lui a0, 912092'),
    (0x00812503, 'lw a0, 8(sp)'),
    (0xfff50583, 'lb a1, -1(a0)'),
    (0xfe812e23, 'sw s0, -4(sp)'),
    (0xfe050ce3, 'beq a0, zero, -8'),
    (0x0000006f, 'jal zero, 0'),
    (0x801ff0ef, 'jal ra, -2048'),
    (0x00008067, 'jalr zero, 0(ra)'),
    (0x000780e7, 'jalr 0(a5)'),
    (0x41f55513, 'srai a0, a0, 31'),
    (0x0330000f, 'fence zero, zero, succ: 0b11, pred: 0b11, fm: 0b0'),
    (0x8330000f, 'fence zero, zero, succ: 0b11, pred: 0b11, fm: 0b1000'),
    (0x0000100f, 'fence.i zero, zero, 0'),
    (0x00000073, 'ecall'),
    (0x00100073, 'ebreak'),
    (0x30200073, 'mret'),
    (0x10500073, 'wfi'),
    (0x300312f3, 'csrrw t0, mstatus, t1'),
    (0xf1402573, 'csrrs a0, mhartid, zero'),
    (0x7c02d073, 'csrrwi zero, 0x7c0, 5'),
    (0x30047573, 'csrrci a0, mstatus, 8'),
])
def test_str(word, expected):
    assert str(decode(word)) == expected

def test_args():
    assert [Register(Reg.A2), Register(Reg.A5), Register(Reg.A1)] == Add(Reg.A2, Reg.A5, Reg.A1).args()
    assert [Register(Reg.A0), UnsignedImm(912092)] == Lui(Reg.A0, 912092).args()
    assert [Register(Reg.RA), Address(Reg.SP, 12)] == Sw(Reg.SP, Reg.RA, 12).args()
    assert [Register(Reg.A0), Register(Reg.ZERO), SignedImm(-8)] == Beq(Reg.A0, Reg.ZERO, -8).args()
    assert [Register(Reg.ZERO), Special('mstatus'), Register(Reg.T1)] == Csrrw(Reg.ZERO, Reg.T1, 0x300).args()
    assert [] == Ecall(Reg.ZERO, Reg.ZERO).args()
    assert [] == Illegal().args()

def test_jalr_short_form():
    # only rd == ra drops the destination register
    assert [Address(Reg.T0, 4)] == Jalr(Reg.RA, Reg.T0, 4).args()
    assert [Register(Reg.T1), Address(Reg.T0, 4)] == Jalr(Reg.T1, Reg.T0, 4).args()

def test_fence_special():
    _args = Fence(Reg.ZERO, Reg.ZERO, 0b0001, 0b1000, 0b0000).args()
    assert Special('succ: 0b1, pred: 0b1000, fm: 0b0') == _args[-1]

def test_signed_and_unsigned_immediates_differ():
    assert SignedImm(5) != UnsignedImm(5)
    assert '5' == str(SignedImm(5)) == str(UnsignedImm(5))
    assert '-2048' == str(SignedImm(-2048))

def test_address_str():
    assert '-4(s0)' == str(Address(Reg.S0, -4))
    assert '0(zero)' == str(Address(Reg.ZERO, 0))

def test_equality_and_hash():
    assert Addi(Reg.SP, Reg.SP, 64) == Addi(rd=Reg.SP, rs1=Reg.SP, imm=64)
    assert Addi(Reg.SP, Reg.SP, 64) != Addi(Reg.SP, Reg.SP, -64)
    # same operands, different mnemonic
    assert Lw(Reg.A0, Reg.SP, 8) != Addi(Reg.A0, Reg.SP, 8)
    assert hash(Addi(Reg.SP, Reg.SP, 64)) == hash(decode(0x04010113))
    assert 1 == len({decode(0x00000073), Ecall(Reg.ZERO, Reg.ZERO)})

def test_missing_operands_default():
    assert Addi(Reg.ZERO, Reg.ZERO, 0) == Addi()
    assert Csrrwi(Reg.ZERO, 0, 0) == Csrrwi()
    assert Reg.ZERO == Jal(imm=8).rd

def test_missing_arg_fields_raise():
    with pytest.raises(TypeError):
        Register()
    with pytest.raises(TypeError):
        Address(Reg.SP)

def test_unknown_field():
    with pytest.raises(AssertionError):
        Mret(rd=Reg.A0)
    with pytest.raises(AssertionError):
        Add(Reg.A0, Reg.A0, Reg.A0, Reg.A0)

def test_get():
    _instr = Csrrs(Reg.A0, Reg.ZERO, 0xf14)
    assert 0xf14 == _instr.get('csr')
    assert _instr.get('imm') is None
    assert 'x' == _instr.get('imm', 'x')
    assert 'csrrs' == _instr.name()

def test_repr():
    assert 'FenceI(rd=<Reg.ZERO: 0>, rs1=<Reg.ZERO: 0>, imm=0)' == repr(FenceI(Reg.ZERO, Reg.ZERO, 0))
