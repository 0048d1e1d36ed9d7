'''
The operations offered by the command line, working on files.

They read the whole file, let the PNG model do the work and write
the whole file back when something changed.
'''
import logging
from pathlib import Path
from typing import List, Optional

from .png import (
    PNGChunk,
    PNGFile,
    make_chunk,
    parse_container,
    serialize_container,
)
from .exceptions import ChunkNotFoundException


logger = logging.getLogger(__name__)


def read_png_file(path) -> PNGFile:
    path = Path(path)
    logger.debug('reading \'%s\'' % path)

    return parse_container(path.read_bytes())


def write_png_file(path, png: PNGFile):
    path = Path(path)
    data = serialize_container(png)
    logger.debug('writing %d bytes to \'%s\'' % (len(data), path))

    path.write_bytes(data)


def encode(path, message: str, chunk_type: str, output: Optional[str] = None) -> PNGChunk:
    '''Append a chunk containing the message; the result is written to output
    if indicated, otherwise the original file is overwritten.'''
    # the chunk type is validated before touching the file
    chunk = make_chunk(chunk_type, message.encode('utf-8'))

    png = read_png_file(path)
    png.append(chunk)

    write_png_file(output if output is not None else path, png)
    logger.info(f'encoded {chunk} into \'{output or path}\'')

    return chunk


def decode(path, chunk_type: str) -> str:
    png = read_png_file(path)

    chunk = png.find_by_type(chunk_type)
    if chunk is None:
        raise ChunkNotFoundException(chunk_type)

    return chunk.data_as_string()


def remove(path, chunk_type: str) -> PNGChunk:
    png = read_png_file(path)

    chunk = png.remove_by_type(chunk_type)

    write_png_file(path, png)
    logger.info(f'removed {chunk} from \'{path}\'')

    return chunk


def print_chunks(path) -> List[str]:
    png = read_png_file(path)

    return [
        f'[{idx:02d}] {chunk.chunk_type.value} length={chunk.length.value} '
        f'crc={chunk.crc.value:08x} critical={chunk.is_critical()}'
        for idx, chunk in enumerate(png)
    ]
