# Copyright (C) 2021, 2022, 2023, 2024 John Haskins Jr.

WORD_MASK = (2 ** 32) - 1

def bits(word, hi, lo):
    # extract word[hi:lo], inclusive, shifted down to bit 0
    assert 0 <= lo <= hi <= 31, 'bits(): bad range [{}:{}]'.format(hi, lo)
    return (word >> lo) & ((1 << (1 + hi - lo)) - 1)
def bit(word, idx):
    assert 0 <= idx <= 31, 'bit(): bad index {}'.format(idx)
    return (word >> idx) & 0b1
def sign_ext(word, hi):
    # bit hi is the sign bit; every bit above it takes its value, and the
    # result is read back as a two's complement 32-bit integer
    assert 0 <= hi <= 31, 'sign_ext(): bad sign bit {}'.format(hi)
    _retval = word & ((1 << (1 + hi)) - 1)
    if bit(word, hi): _retval |= WORD_MASK ^ ((1 << (1 + hi)) - 1)
    return int.from_bytes(_retval.to_bytes(4, 'little'), 'little', signed=True)
