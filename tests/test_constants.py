import pytest

import riscv.constants

from riscv.constants import Reg, RegIndexError, CsrIndexError, csr_name, csr_privilege

def test_reg_names():
    assert list(map(str, [Reg.ZERO, Reg.RA, Reg.SP, Reg.S0, Reg.A0, Reg.T6])) == ['zero', 'ra', 'sp', 's0', 'a0', 't6']

def test_reg_from_index():
    assert all(map(lambda x: x == Reg.from_index(x), range(32)))
    assert Reg.A5 == Reg.from_index(15)

@pytest.mark.parametrize('idx', [-1, 32, 100])
def test_reg_from_index_out_of_range(idx):
    with pytest.raises(RegIndexError) as ex:
        Reg.from_index(idx)
    assert idx == ex.value.idx
    assert isinstance(ex.value, IndexError)

def test_reg_default():
    assert Reg.ZERO == Reg.default()

@pytest.mark.parametrize('num,expected', [
    (0x300, 'mstatus'),
    (0xf14, 'mhartid'),
    (0x001, 'fflags'),
    (0xc00, 'cycle'),
    (0xc03, 'hpmcounter3'),
    (0xc9f, 'hpmcounter31h'),
    (0x180, 'satp'),
    (0x7c0, '0x7c0'),
    (0x005, 'utvec'),
    (0x00a, '0x00a'),
])
def test_csr_name(num, expected):
    assert csr_name(num) == expected

def test_csr_privilege():
    assert riscv.constants.MRW == csr_privilege(0x300)
    assert riscv.constants.MRO == csr_privilege(0xf11)
    assert riscv.constants.URO == csr_privilege(0xc01)
    assert riscv.constants.SRW == csr_privilege(0x105)
    assert csr_privilege(0x7c0) is None

@pytest.mark.parametrize('num', [-1, 0x1000])
def test_csr_out_of_range(num):
    with pytest.raises(CsrIndexError) as ex:
        csr_name(num)
    assert num == ex.value.idx
    with pytest.raises(CsrIndexError):
        csr_privilege(num)

def test_csr_names_unique():
    _names = list(map(lambda v: v[0], riscv.constants.CSRS.values()))
    assert len(_names) == len(set(_names))
