'''
pngme - hide messages inside PNG files

  pngme encode FILE MESSAGE CHUNK_TYPE [OUTPUT]
  pngme decode FILE CHUNK_TYPE
  pngme remove FILE CHUNK_TYPE
  pngme print FILE

Set the DEBUG environment variable to see what happens under the hood.
'''
import argparse
import logging
import os
import sys

from . import commands
from .exceptions import (
    PngmeException,
    MagicException,
    TruncatedFieldException,
    InvalidChunkTypeException,
    ChecksumMismatchException,
    NotUtf8Exception,
    ChunkNotFoundException,
)


# each kind of failure has its own exit status
EXIT_STATUS = {
    OSError: 2,
    MagicException: 3,
    TruncatedFieldException: 4,
    InvalidChunkTypeException: 5,
    ChecksumMismatchException: 6,
    NotUtf8Exception: 7,
    ChunkNotFoundException: 8,
    PngmeException: 1,
}

MESSAGES = {
    MagicException: 'not a PNG file',
    TruncatedFieldException: 'the file is truncated',
    InvalidChunkTypeException: 'invalid chunk type',
    ChecksumMismatchException: 'the file is corrupted',
    NotUtf8Exception: 'the chunk doesn\'t contain text',
    ChunkNotFoundException: 'chunk not found',
    PngmeException: 'invalid data',
}


def setup_logging():
    logging.basicConfig(format='%(levelname)s:%(name)s: %(message)s')
    logging.getLogger('pngme').setLevel(logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)


def get_parser():
    parser = argparse.ArgumentParser(prog='pngme', description='Encode/Decode secret messages in PNG files')
    subparsers = parser.add_subparsers(dest='command', required=True)

    encode_parser = subparsers.add_parser('encode', help='Encode a secret message in the given file')
    encode_parser.add_argument('file', help='PNG file to use')
    encode_parser.add_argument('message', help='message to hide')
    encode_parser.add_argument('chunk_type', help='four ASCII letters, e.g. "ruSt"')
    encode_parser.add_argument('output', nargs='?', help='where to save the result (default: overwrite FILE)')

    decode_parser = subparsers.add_parser('decode', help='Decode a secret message from the given file')
    decode_parser.add_argument('file', help='PNG file to read')
    decode_parser.add_argument('chunk_type', help='type of the chunk containing the message')

    remove_parser = subparsers.add_parser('remove', help='Remove a chunk from the given file')
    remove_parser.add_argument('file', help='PNG file to modify')
    remove_parser.add_argument('chunk_type', help='type of the chunk to remove')

    print_parser = subparsers.add_parser('print', help='Print the chunks of the given file')
    print_parser.add_argument('file', help='PNG file to read')

    return parser


def run(args):
    if args.command == 'encode':
        chunk = commands.encode(args.file, args.message, args.chunk_type, args.output)
        print(f'encoded {chunk}')
    elif args.command == 'decode':
        print(commands.decode(args.file, args.chunk_type))
    elif args.command == 'remove':
        chunk = commands.remove(args.file, args.chunk_type)
        print(f'removed {chunk}')
    elif args.command == 'print':
        for line in commands.print_chunks(args.file):
            print(line)


def main(argv=None):
    setup_logging()
    args = get_parser().parse_args(argv)

    try:
        run(args)
    except PngmeException as e:
        kind = next(_ for _ in MESSAGES if isinstance(e, _))
        print(f'error: {MESSAGES[kind]}: {e}', file=sys.stderr)
        return EXIT_STATUS[kind]
    except OSError as e:
        print(f'error: {e}', file=sys.stderr)
        return EXIT_STATUS[OSError]

    return 0


if __name__ == '__main__':
    sys.exit(main())
