'''
# Portable Network Graphics

A PNG file is a fixed signature followed by a sequence of chunks, each one
made of a big-endian length, a type, the data and a CRC.

The specification is at <http://www.libpng.org/pub/png/spec/1.2/PNG-Contents.html> and
is available a full test-suite with a lot of PNG images covering all
the possible cases at <http://www.schaik.com/pngsuite/>.

Only the structure of the file is handled here: the content of the chunks
is not interpreted, so that arbitrary chunks can be added, read and removed
without touching the image.
'''
from typing import List, Optional

from ..core import Chunk
from .. import fields
from ..common import crc
from ..exceptions import ChunkNotFoundException, NotUtf8Exception
from ..properties import Dependency
from .chunk_type import ChunkType, ChunkTypeField


SIGNATURE = b'\x89\x50\x4e\x47\x0d\x0a\x1a\x0a'


class PNGHeader(Chunk):
    magic = fields.StringField(8, default=SIGNATURE, is_magic=True)


class PNGChunk(Chunk):
    '''This is the main data structure of the format: the 4 fields represent
    a chunk into the file. Each field is intended big-endian.

    A chunk is defined as critical or ancillary depending on the case of the
    starting letter of the type field.

    The crc field is network-byte-order CRC-32 computed over the chunk type and chunk data, but not the length.

    # Critical chunks

     1. IHDR: contains image's width, height, bit depth, color type, compression method, filter method and interlace method
     2. PLTE: contains the palette data
     3. IDAT: contains the actual image data (compressed)
     4. IEND: is the terminator chunk

    Once built a chunk can't be modified: create a new one instead.
    '''
    frozen = True

    length     = fields.StructField('I')  # big endian
    chunk_type = ChunkTypeField()
    data       = fields.StringField(Dependency('.length'))
    crc        = crc.CRCField(['chunk_type', 'data'])  # network byte order

    def __init__(self, raw=None, chunk_type=None, data=b'', father=None):
        # length and crc are always derived from chunk_type and data
        if raw is not None:
            if chunk_type is not None or data:
                raise ValueError('you can\'t pass both raw data and field values')
            super().__init__(raw=raw, father=father)
            return

        if chunk_type is None:
            raise ValueError('a chunk needs a type')

        super().__init__(father=father, chunk_type=chunk_type, data=data)

    def __str__(self):
        return 'Chunk {%s length=%d crc=%08x}' % (
            self.chunk_type.value,
            self.length.value,
            self.crc.value,
        )

    def isCritical(self):
        return self.chunk_type.value.is_critical()

    is_critical = isCritical

    def data_as_string(self) -> str:
        try:
            return self.data.value.decode('utf-8')
        except UnicodeDecodeError as e:
            raise NotUtf8Exception(e.reason, chain=['data'], offset=e.start) from e

    payload_as_text = data_as_string


class PNGFile(Chunk):
    '''The whole file: the signature and all the chunks in the order they are
    found. The chunks are read until the data is exhausted so that whatever
    follows IEND is preserved too.'''
    header = PNGHeader()
    chunks = fields.ArrayField(PNGChunk(chunk_type='IEND'))

    def __len__(self):
        return len(self.chunks)

    def __iter__(self):
        return iter(self.chunks)

    def append(self, chunk: PNGChunk):
        self.logger.debug(f'appending {chunk}')
        self.chunks.append(chunk)

    def insert(self, index: int, chunk: PNGChunk):
        self.logger.debug(f'inserting {chunk} at position {index}')
        self.chunks.insert(index, chunk)

    def _index_by_type(self, name: str) -> Optional[int]:
        for idx, chunk in enumerate(self.chunks):
            if str(chunk.chunk_type.value) == name:
                return idx

        return None

    def find_by_type(self, name: str) -> Optional[PNGChunk]:
        '''Return the first chunk with the given type or None.'''
        idx = self._index_by_type(name)

        return self.chunks[idx] if idx is not None else None

    def find_all_by_type(self, name: str) -> List[PNGChunk]:
        return [_ for _ in self.chunks if str(_.chunk_type.value) == name]

    def remove_by_type(self, name: str) -> PNGChunk:
        '''Remove the first chunk with the given type and return it, the other
        chunks keep their order.'''
        idx = self._index_by_type(name)

        if idx is None:
            raise ChunkNotFoundException(name)

        chunk = self.chunks.pop(idx)
        self.logger.debug(f'removed {chunk} from position {idx}')

        return chunk


def parse_container(data: bytes) -> PNGFile:
    return PNGFile(raw=data)


def serialize_container(png: PNGFile) -> bytes:
    return png.pack()


def make_chunk(type_string: str, payload: bytes) -> PNGChunk:
    return PNGChunk(chunk_type=ChunkType.from_str(type_string), data=payload)
