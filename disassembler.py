# Copyright (C) 2021, 2022, 2023, 2024 John Haskins Jr.

import os
import sys
import argparse
import logging

import riscv.dis
import riscv.listing

def output_path(input, output=None):
    # when no output is given, derive ./<stem>.s from the input file
    return (output if output else os.path.join('.', '{}.s'.format(os.path.splitext(os.path.basename(input))[0])))
def disassemble(input, output, section='.text', allow_pseudo=True):
    dis = riscv.dis.Disassembly.from_elf(input, section)
    logging.info('disassemble(): {} -> {} ({} instructions)'.format(input, output, len(dis)))
    with open(output, 'w') as fp:
        for line in riscv.listing.render(dis, input, allow_pseudo):
            fp.write('{}\n'.format(line))
    return dis

def main(argv=None):
    parser = argparse.ArgumentParser(description='RISC-V (RV32I) ELF disassembler')
    parser.add_argument('--debug', '-D', dest='debug', action='store_true', help='output debug messages')
    parser.add_argument('--log', type=str, dest='log', default=None, help='logging output directory')
    parser.add_argument('--output', '-o', type=str, dest='output', default=None, help='path to write disassembled output into (default: ./<input stem>.s)')
    parser.add_argument('--section', type=str, dest='section', default='.text', help='name of the code section')
    parser.add_argument('--no-pseudo', dest='allow_pseudo', action='store_false', help='do not use equivalent pseudo-instructions')
    parser.add_argument('input', type=str, help='path to a RISC-V ELF to disassemble')
    args = parser.parse_args(argv)
    if args.log:
        assert not os.path.isfile(args.log), '--log must point to directory, not file'
        os.makedirs(args.log, exist_ok=True)
    logging.basicConfig(
        **({'filename': os.path.join(args.log, '{}.log'.format(os.path.basename(__file__)))} if args.log else {}),
        format='%(message)s',
        level=(logging.DEBUG if args.debug else logging.INFO),
    )
    logging.debug('args : {}'.format(args))
    _output = output_path(args.input, args.output)
    try:
        disassemble(args.input, _output, args.section, args.allow_pseudo)
    except (riscv.dis.StructuralError, OSError) as ex:
        logging.fatal('main(): {}: {}'.format(args.input, ex))
        return 1
    return 0

if '__main__' == __name__:
    sys.exit(main())
