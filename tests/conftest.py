import io
import struct
import zlib

import pytest
from PIL import Image


@pytest.fixture
def png_data():
    """A real 5x5 red image as produced by Pillow."""
    buffer = io.BytesIO()
    Image.new('RGB', (5, 5), color='red').save(buffer, format='PNG')

    return buffer.getvalue()


@pytest.fixture
def png_path(tmp_path, png_data):
    path = tmp_path / 'red.png'
    path.write_bytes(png_data)

    return path


@pytest.fixture
def raw_chunk():
    """Build the binary representation of a chunk without using pngme."""
    def _raw_chunk(chunk_type: bytes, data: bytes, crc=None) -> bytes:
        if crc is None:
            crc = zlib.crc32(chunk_type + data)

        return struct.pack('>I', len(data)) + chunk_type + data + struct.pack('>I', crc)

    return _raw_chunk
