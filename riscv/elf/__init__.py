# Copyright (C) 2021, 2022, 2023, 2024 John Haskins Jr.

import logging

import elftools.common.exceptions
import elftools.elf.constants
import elftools.elf.elffile

import riscv.dis

def load(fp):
    # pyelftools parses lazily, so a malformed file can fail anywhere from
    # the constructor to the last symbol
    try:
        elffile = elftools.elf.elffile.ELFFile(fp)
        if 32 != elffile.elfclass:
            raise riscv.dis.StructuralError('Expected ELF32, found ELF{}!'.format(elffile.elfclass))
        if 'EM_RISCV' != elffile.header.e_machine:
            logging.warning('load(): e_machine : {} (expected EM_RISCV)'.format(elffile.header.e_machine))
        return sections(elffile), segments(elffile), symbols(elffile)
    except elftools.common.exceptions.ELFError as ex:
        raise riscv.dis.StructuralError('Malformed ELF file ({})!'.format(ex))
def load_path(path):
    with open(path, 'rb') as fp:
        return load(fp)

def sections(elffile):
    _retval = []
    for x, section in enumerate(elffile.iter_sections()):
        _executable = bool(section.header.sh_flags & elftools.elf.constants.SH_FLAGS.SHF_EXECINSTR)
        _data = (b'' if 'SHT_NOBITS' == section.header.sh_type else section.data())
        if 'SHT_NOBITS' != section.header.sh_type and len(_data) != section.header.sh_size:
            raise riscv.dis.StructuralError('{}: truncated ({} of {} bytes in file)!'.format(section.name, len(_data), section.header.sh_size))
        logging.debug('sections(): [{}] {} : 0x{:08x} ({} bytes{})'.format(x, section.name, section.header.sh_addr, len(_data), (', executable' if _executable else '')))
        _retval.append(riscv.dis.Section(section.name, x, section.header.sh_addr, _data, _executable))
    return _retval
def segments(elffile):
    # loadable segments, for binaries whose code is not in a named section
    _retval = []
    for x, segment in enumerate(elffile.iter_segments()):
        if 'PT_LOAD' != segment.header.p_type: continue
        _executable = bool(segment.header.p_flags & elftools.elf.constants.P_FLAGS.PF_X)
        _data = segment.data()
        if len(_data) != segment.header.p_filesz:
            raise riscv.dis.StructuralError('PT_LOAD[{}]: truncated ({} of {} bytes in file)!'.format(x, len(_data), segment.header.p_filesz))
        _retval.append(riscv.dis.Section('PT_LOAD[{}]'.format(x), None, segment.header.p_vaddr, _data, _executable))
    return _retval
def symbols(elffile):
    # every symbol of the static symbol table(s), in table order; the
    # dynamic table is used only when there is no .symtab, since it
    # repeats the exported symbols. Undefined symbols are skipped, and
    # symbols not tied to a section (SHN_ABS, SHN_COMMON) keep section None
    _symbol_tables = [s for s in elffile.iter_sections() if isinstance(s, elftools.elf.elffile.SymbolTableSection)]
    _symbol_tables = ([s for s in _symbol_tables if 'SHT_SYMTAB' == s.header.sh_type] or _symbol_tables)
    _retval = []
    for s in sum([list(tab.iter_symbols()) for tab in _symbol_tables], []):
        if 'SHN_UNDEF' == s.entry.st_shndx: continue
        _retval.append(riscv.dis.Symbol(s.name, s.entry.st_value, (s.entry.st_shndx if isinstance(s.entry.st_shndx, int) else None)))
    return _retval
