import struct

import pytest

SHT_PROGBITS = 1
SHT_SYMTAB = 2
SHT_STRTAB = 3
SHT_NOBITS = 8
SHT_DYNSYM = 11
SHF_ALLOC = 0x2
SHF_EXECINSTR = 0x4
PT_LOAD = 1
PF_X = 0x1
PF_R = 0x4
EM_RISCV = 243

def code(*words):
    return b''.join(map(lambda w: w.to_bytes(4, 'little'), words))

def build_elf32(sections, symbols=(), segments=(), machine=EM_RISCV, dynsym=False):
    """Lay out a little-endian ELF32 image in memory.

    sections: dicts with name, data and optionally flags, addr, type, size;
    they get section indices 1..n, followed by .symtab, .strtab, .shstrtab
    and, with dynsym, a .dynsym repeating the symbols of .symtab.
    symbols: (name, value, shndx) tuples. segments: (section index, vaddr,
    p_flags) tuples, each covering the data of one section.
    """
    _sections = list(sections)
    _symtab_index = 1 + len(_sections)
    _strtab_index = 2 + len(_sections)
    _shstrtab_index = 3 + len(_sections)

    shstrtab = bytearray(b'\0')
    def shname(name):
        _offset = len(shstrtab)
        shstrtab.extend(name.encode('ascii') + b'\0')
        return _offset
    _names = list(map(lambda s: shname(s.get('name')), _sections)) + [shname('.symtab'), shname('.strtab'), shname('.shstrtab')]
    _dynsym_name = (shname('.dynsym') if dynsym else None)

    strtab = bytearray(b'\0')
    symtab = bytearray(16)
    for name, value, shndx in symbols:
        symtab.extend(struct.pack('<IIIBBH', len(strtab), value, 0, (1 << 4) | 2, 0, shndx))
        strtab.extend(name.encode('ascii') + b'\0')

    _offset = 52 + 32 * len(segments)
    _blobs = []
    _offsets = []
    _headers = [bytes(40)]
    for name, s in zip(_names, _sections):
        _data = s.get('data', b'')
        _type = s.get('type', SHT_PROGBITS)
        _size = s.get('size', len(_data))
        _offsets.append(_offset)
        _headers.append(struct.pack('<IIIIIIIIII', name, _type, s.get('flags', SHF_ALLOC), s.get('addr', 0), _offset, _size, 0, 0, 4, 0))
        if SHT_NOBITS != _type:
            _blobs.append(bytes(_data))
            _offset += len(_data)
    for name, _type, data, link, info, entsize in [
        (_names[-3], SHT_SYMTAB, bytes(symtab), _strtab_index, 1, 16),
        (_names[-2], SHT_STRTAB, bytes(strtab), 0, 0, 0),
        (_names[-1], SHT_STRTAB, bytes(shstrtab), 0, 0, 0),
    ] + ([(_dynsym_name, SHT_DYNSYM, bytes(symtab), _strtab_index, 1, 16)] if dynsym else []):
        _headers.append(struct.pack('<IIIIIIIIII', name, _type, 0, 0, _offset, len(data), link, info, 1, entsize))
        _blobs.append(data)
        _offset += len(data)
    _padding = (4 - _offset % 4) % 4
    _shoff = _offset + _padding

    _phdrs = []
    for index, vaddr, flags in segments:
        _size = len(_sections[index - 1].get('data', b''))
        _phdrs.append(struct.pack('<IIIIIIII', PT_LOAD, _offsets[index - 1], vaddr, vaddr, _size, _size, flags, 4))

    _ident = b'\x7fELF' + bytes([1, 1, 1, 0]) + bytes(8)
    _header = _ident + struct.pack(
        '<HHIIIIIHHHHHH',
        2, machine, 1, 0,
        (52 if segments else 0), _shoff, 0,
        52, 32, len(segments), 40, len(_headers), _shstrtab_index,
    )
    return _header + b''.join(_phdrs) + b''.join(_blobs) + bytes(_padding) + b''.join(_headers)

@pytest.fixture
def elf32(tmp_path):
    def write(*args, **kwargs):
        _path = tmp_path / 'prog.elf'
        _path.write_bytes(build_elf32(*args, **kwargs))
        return str(_path)
    return write
