import struct

import pytest

from pngme.exceptions import (
    ChecksumMismatchException,
    ChunkNotFoundException,
    InvalidCharactersException,
    MagicException,
    NotUtf8Exception,
    TruncatedFieldException,
)
from pngme.png import (
    SIGNATURE,
    PNGChunk,
    PNGFile,
    PNGHeader,
    make_chunk,
    parse_container,
    serialize_container,
)
from pngme.png.chunk_type import ChunkType


MESSAGE = b'This is where your secret message will be!'
MESSAGE_CRC = 2882656334


def test_header():
    """Check header is right"""
    png_header = PNGHeader()

    assert png_header.magic.value == b'\x89PNG\x0d\x0a\x1a\x0a'
    assert png_header.pack() == SIGNATURE


def test_chunk_new():
    chunk = PNGChunk(chunk_type=ChunkType.from_str('RuSt'), data=MESSAGE)

    assert chunk.length.value == len(MESSAGE) == 42
    assert str(chunk.chunk_type.value) == 'RuSt'
    assert chunk.data.value == MESSAGE
    assert chunk.crc.value == MESSAGE_CRC
    assert chunk.data_as_string() == MESSAGE.decode()
    assert chunk.is_critical()


def test_chunk_from_bytes(raw_chunk):
    chunk = PNGChunk(raw=raw_chunk(b'RuSt', MESSAGE, crc=MESSAGE_CRC))

    assert chunk.length.value == 42
    assert str(chunk.chunk_type.value) == 'RuSt'
    assert chunk.payload_as_text() == MESSAGE.decode()
    assert chunk.crc.value == MESSAGE_CRC
    assert chunk == PNGChunk(chunk_type='RuSt', data=MESSAGE)


def test_chunk_from_bytes_wrong_crc(raw_chunk):
    with pytest.raises(ChecksumMismatchException) as excinfo:
        PNGChunk(raw=raw_chunk(b'RuSt', MESSAGE, crc=MESSAGE_CRC - 1))

    assert excinfo.value.stored == MESSAGE_CRC - 1
    assert excinfo.value.computed == MESSAGE_CRC
    assert excinfo.value.chain == ['crc']
    assert excinfo.value.offset == 4 + 4 + 42


@pytest.mark.parametrize('chunk_type,data', [
    ('RuSt', MESSAGE),
    ('IEND', b''),
    ('tEXt', b'Comment\x00hello'),
    ('ruSt', bytes(range(256))),
])
def test_chunk_round_trip(chunk_type, data):
    chunk = make_chunk(chunk_type, data)

    unpacked = PNGChunk(raw=chunk.pack())

    assert unpacked == chunk
    assert unpacked.length.value == chunk.length.value
    assert unpacked.chunk_type.value == chunk.chunk_type.value
    assert unpacked.data.value == chunk.data.value
    assert unpacked.crc.value == chunk.crc.value
    assert unpacked.size == len(data) + 12


def test_chunk_checksum_sensitivity():
    """Flipping a bit covered by the CRC (leaving the CRC untouched) must be detected."""
    raw = make_chunk('RuSt', MESSAGE).pack()

    # every bit of every byte of the payload
    for idx in range(8, 8 + len(MESSAGE)):
        for bit in range(8):
            corrupted = bytearray(raw)
            corrupted[idx] ^= 1 << bit

            with pytest.raises(ChecksumMismatchException):
                PNGChunk(raw=bytes(corrupted))

    # changing the case of a letter of the type keeps it alphabetic
    for idx in range(4, 8):
        corrupted = bytearray(raw)
        corrupted[idx] ^= 0x20

        with pytest.raises(ChecksumMismatchException):
            PNGChunk(raw=bytes(corrupted))


@pytest.mark.parametrize('cut,field,expected,actual', [
    (2, 'length', 4, 2),
    (6, 'chunk_type', 4, 2),
    (8 + 10, 'data', 42, 10),
    (8 + 42 + 3, 'crc', 4, 3),
])
def test_chunk_truncated(cut, field, expected, actual):
    raw = make_chunk('RuSt', MESSAGE).pack()

    with pytest.raises(TruncatedFieldException) as excinfo:
        PNGChunk(raw=raw[:cut])

    assert excinfo.value.field == field
    assert excinfo.value.expected == expected
    assert excinfo.value.actual == actual


def test_chunk_invalid_type(raw_chunk):
    with pytest.raises(InvalidCharactersException) as excinfo:
        PNGChunk(raw=raw_chunk(b'Ru5t', MESSAGE))

    assert excinfo.value.value == b'Ru5t'
    assert excinfo.value.offset == 4


def test_chunk_not_utf8():
    chunk = make_chunk('ruSt', b'\xff\xfe\xfd')

    with pytest.raises(NotUtf8Exception):
        chunk.data_as_string()


def test_chunk_is_frozen():
    chunk = make_chunk('ruSt', b'kebab')

    with pytest.raises(AttributeError):
        chunk.data.value = b'pizza'

    with pytest.raises(AttributeError):
        chunk.crc.value = 0

    assert chunk.data.value == b'kebab'
    assert chunk.length.value == 5


def test_chunk_derived_fields_cannot_be_passed():
    """length and crc always come from the type and the data."""
    with pytest.raises(TypeError):
        PNGChunk(chunk_type=ChunkType.from_str('ruSt'), data=b'abc', length=99)

    with pytest.raises(TypeError):
        PNGChunk(chunk_type='ruSt', data=b'abc', crc=0)

    with pytest.raises(ValueError):
        PNGChunk(raw=make_chunk('ruSt', b'abc').pack(), data=b'abc')

    chunk = PNGChunk(chunk_type='ruSt', data=b'abc')

    assert chunk.length.value == len(chunk.data.value) == 3
    assert PNGChunk(raw=chunk.pack()) == chunk


def test_make_chunk_validates_type():
    with pytest.raises(InvalidCharactersException):
        make_chunk('ru5t', b'kebab')


def test_png_file(png_data):
    """Check unpacking a PNG file created by Pillow is fine"""
    png = parse_container(png_data)

    assert png.header.magic.value == SIGNATURE
    assert str(png.chunks[0].chunk_type.value) == 'IHDR'
    assert str(png.chunks[-1].chunk_type.value) == 'IEND'
    assert png.chunks[0].offset == 8
    assert png.chunks[0].length.value == 13

    for chunk in png:
        assert chunk.crc.is_valid()

    assert serialize_container(png) == png_data


def test_png_file_empty():
    png = PNGFile()

    assert len(png) == 0
    assert png.pack() == SIGNATURE
    assert len(parse_container(SIGNATURE)) == 0


@pytest.mark.parametrize('data', [
    b'',
    b'\x89PN',
    b'\x89PNG\r\n\x1a\x0b',
    b'GIF89a\x00\x00',
])
def test_png_file_wrong_signature(png_data, data):
    with pytest.raises(MagicException):
        parse_container(data + png_data[8:])

    with pytest.raises(MagicException) as excinfo:
        parse_container(data)

    assert excinfo.value.expected == SIGNATURE
    assert excinfo.value.path == 'header.magic'


def test_png_file_corrupted_chunk(raw_chunk):
    data = SIGNATURE + raw_chunk(b'IHDR', b'\x00' * 13) + raw_chunk(b'ruSt', b'kebab', crc=0) + raw_chunk(b'IEND', b'')

    with pytest.raises(ChecksumMismatchException) as excinfo:
        parse_container(data)

    assert excinfo.value.path == 'chunks.1.crc'
    assert excinfo.value.offset == 8 + 25 + 4 + 4 + 5


def test_png_file_truncated(png_data):
    with pytest.raises(TruncatedFieldException) as excinfo:
        parse_container(png_data[:-2])

    assert excinfo.value.field == 'crc'
    assert excinfo.value.chain[-1] == 'chunks'


def test_png_file_keeps_chunks_after_iend(png_data, raw_chunk):
    data = png_data + raw_chunk(b'ruSt', b'after the end')

    png = parse_container(data)

    assert str(png.chunks[-1].chunk_type.value) == 'ruSt'
    assert png.pack() == data


def test_png_file_order():
    a, b, c, d = [make_chunk(name, name.encode()) for name in ('aaAa', 'bbBb', 'ccCc', 'ddDd')]

    png = PNGFile(chunks=[a, b, c])

    removed = png.remove_by_type('bbBb')

    assert removed == b
    assert list(png) == [a, c]

    png.append(d)

    assert list(png) == [a, c, d]
    assert list(parse_container(png.pack())) == [a, c, d]


def test_png_file_insert():
    png = PNGFile(chunks=[make_chunk('IHDR', b''), make_chunk('IEND', b'')])

    png.insert(1, make_chunk('ruSt', b'kebab'))

    assert [str(_.chunk_type.value) for _ in png] == ['IHDR', 'ruSt', 'IEND']


def test_png_file_not_found(png_data):
    png = parse_container(png_data)
    before = list(png)

    assert png.find_by_type('ruSt') is None

    with pytest.raises(ChunkNotFoundException) as excinfo:
        png.remove_by_type('ruSt')

    assert excinfo.value.chunk_type == 'ruSt'
    assert list(png) == before
    assert png.pack() == png_data


def test_png_file_duplicated_types():
    first = make_chunk('ruSt', b'first')
    second = make_chunk('ruSt', b'second')

    png = PNGFile(chunks=[make_chunk('IHDR', b''), first, second])

    assert png.find_by_type('ruSt') == first
    assert png.find_all_by_type('ruSt') == [first, second]
    # the match is case sensitive
    assert png.find_by_type('RUST') is None

    png.remove_by_type('ruSt')

    assert png.find_by_type('ruSt') == second


def test_png_file_serialize_idempotent(png_data):
    png = parse_container(png_data)
    png.append(make_chunk('ruSt', b'kebab'))

    assert serialize_container(png) == serialize_container(png)


def test_png_file_layout(png_data):
    png = PNGFile(raw=png_data)
    png.append(make_chunk('ruSt', b'kebab'))

    png.pack()

    assert png.layout['header'] == (0, 8)
    assert png.chunks[-1].offset == len(png_data)
    assert struct.unpack('>I', png.pack()[len(png_data):len(png_data) + 4])[0] == 5
