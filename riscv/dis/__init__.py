# Copyright (C) 2021, 2022, 2023, 2024 John Haskins Jr.

import logging

import riscv.constants
import riscv.decode
import riscv.elf

from riscv.instruction import Value

class StructuralError(Exception):
    pass

class Section(Value):
    # A candidate code region. index is the section header index, or None
    # for a loadable segment found through the program headers.
    FIELDS = ('name', 'index', 'addr', 'data', 'executable')
    def contains(self, symbol):
        if self.get('index') is not None: return symbol.get('section') == self.get('index')
        return self.get('addr') <= symbol.get('addr') < self.get('addr') + len(self.get('data'))
class Symbol(Value):
    FIELDS = ('name', 'addr', 'section')
class Entry(Value):
    # One disassembled position: address, the raw little-endian encoding,
    # the decoded instruction (None when the word did not decode) and the
    # labels of the symbols at exactly this address.
    FIELDS = ('addr', 'bytes', 'instr', 'labels')

class Disassembly:
    """The address-ordered, label-annotated disassembly of one code section.

    The section is picked from ``sections`` by name; failing that, the sole
    executable section; failing that, the sole executable loadable segment
    in ``segments``. Anything else, or a section whose size is not a whole
    number of words, raises StructuralError. Once built, a Disassembly is
    never modified.
    """
    def __init__(self, sections, symbols, segments=(), name='.text'):
        _section = select(list(sections), list(segments), name)
        _data = bytes(_section.get('data'))
        if len(_data) % 4:
            raise StructuralError('{}: size ({} bytes) is not a multiple of 4!'.format(_section.get('name'), len(_data)))
        logging.info('Disassembly(): {} : 0x{:08x} ({} bytes)'.format(_section.get('name'), _section.get('addr'), len(_data)))
        self.section = _section.get('name')
        self.base = _section.get('addr')
        _words = {
            self.base + x: _data[x:4 + x]
            for x in range(0, len(_data), 4)
        }
        _labels = {}
        for s in symbols:
            if not s.get('name') or not _section.contains(s): continue
            if s.get('addr') not in _words.keys():
                logging.debug('Disassembly(): dropping {} @ 0x{:08x} (no instruction there)'.format(s.get('name'), s.get('addr')))
                continue
            _labels.setdefault(s.get('addr'), []).append(s.get('name'))
        self.entries = {
            a: Entry(a, w, riscv.decode.decode_bytes(w), tuple(_labels.get(a, [])))
            for a, w in _words.items()
        }
        for e in filter(lambda e: e.get('instr') is not None and 'csr' in e.get('instr').FIELDS, self.entries.values()):
            logging.debug('Disassembly(): 0x{:08x} {} accesses {} ({})'.format(
                e.get('addr'),
                e.get('instr').name(),
                riscv.constants.csr_name(e.get('instr').csr),
                riscv.constants.csr_privilege(e.get('instr').csr) or 'unnamed',
            ))
        logging.debug('Disassembly(): {} entries, {} undecodable, {} labels'.format(
            len(self.entries),
            len(list(filter(lambda e: e.get('instr') is None, self.entries.values()))),
            sum(map(len, _labels.values())),
        ))
    @classmethod
    def from_elf(cls, path, name='.text'):
        _sections, _segments, _symbols = riscv.elf.load_path(path)
        return cls(_sections, _symbols, _segments, name)
    def disassembly(self):
        if not self.entries: return
        for a in range(min(self.entries.keys()), 4 + max(self.entries.keys()), 4):
            yield self.entries.get(a)
    def entry(self, addr, alternative=None):
        return self.entries.get(addr, alternative)
    def __iter__(self):
        return self.disassembly()
    def __len__(self):
        return len(self.entries)

def select(sections, segments, name):
    # .text by name first, then any executable section, then any
    # executable loadable segment; the first non-empty tier must hold
    # exactly one candidate
    if '.text' != name and name not in map(lambda s: s.get('name'), sections):
        logging.warning('select(): no section named {}; falling back to executable code'.format(name))
    for _tier, _candidates in [
        ('section named {}'.format(name), list(filter(lambda s: name == s.get('name'), sections))),
        ('executable section', list(filter(lambda s: s.get('executable'), sections))),
        ('executable segment', list(filter(lambda s: s.get('executable'), segments))),
    ]:
        if 0 == len(_candidates): continue
        if 1 < len(_candidates):
            raise StructuralError('More than one {} ({})!'.format(_tier, ', '.join(map(lambda s: '{}@0x{:08x}'.format(s.get('name'), s.get('addr')), _candidates))))
        logging.info('select(): using {} {}'.format(_tier, _candidates[0].get('name')))
        return _candidates[0]
    raise StructuralError('No executable code section!')
