'''
# Chunk types

Four bytes identifying what a chunk contains. The case of each letter
(i.e. bit 5 of the byte) encodes a property of the chunk:

 1. ancillary bit (first byte): uppercase means critical
 2. private bit (second byte): uppercase means public
 3. reserved bit (third byte): must be uppercase in this version of PNG
 4. safe-to-copy bit (fourth byte): lowercase means safe to copy

See <http://www.libpng.org/pub/png/spec/1.2/PNG-Structure.html#Chunk-naming-conventions>.
'''
import string

from bitstring import Bits

from .. import fields
from ..exceptions import (
    InvalidLengthException,
    InvalidCharactersException,
)


# bit 5 of a byte is the third bit starting from the most significant one
CASE_BIT = 2
ALPHABET = frozenset(string.ascii_letters.encode())


class ChunkType(object):
    '''Immutable value representing the type of a chunk.

    There are two ways of building one and they don't check the same things:

     - from_bytes() trusts its input (it usually comes from a file) and accepts
       any 4 bytes
     - from_str() is meant for user input and accepts only ASCII letters
    '''
    LENGTH = 4

    def __init__(self, data: bytes):
        data = bytes(data)
        if len(data) != self.LENGTH:
            raise InvalidLengthException(data)

        self._data = data

    @classmethod
    def from_bytes(cls, data: bytes) -> "ChunkType":
        return cls(data)

    @classmethod
    def from_str(cls, value: str) -> "ChunkType":
        if len(value) != cls.LENGTH:
            raise InvalidLengthException(value)

        if not all(_ in string.ascii_letters for _ in value):
            raise InvalidCharactersException(value)

        return cls(value.encode('ascii'))

    def __bytes__(self):
        return self._data

    def __str__(self):
        return self._data.decode()

    def __repr__(self):
        return f'<{self.__class__.__name__}({self._data!r})>'

    def __eq__(self, other):
        if not isinstance(other, ChunkType):
            return NotImplemented

        return self._data == other._data

    def __hash__(self):
        return hash(self._data)

    def _is_lowercase(self, idx: int) -> bool:
        return Bits(self._data)[idx * 8 + CASE_BIT]

    def is_alphabetic(self) -> bool:
        return all(_ in ALPHABET for _ in self._data)

    def is_critical(self) -> bool:
        return not self._is_lowercase(0)

    def is_public(self) -> bool:
        return not self._is_lowercase(1)

    def is_reserved_bit_valid(self) -> bool:
        return not self._is_lowercase(2)

    def is_valid(self) -> bool:
        '''A chunk type is valid when its reserved bit is set as the
        specification requires.'''
        return self.is_reserved_bit_valid()

    def is_safe_to_copy(self) -> bool:
        return self._is_lowercase(3)


class ChunkTypeField(fields.Field):
    '''Four bytes containing a ChunkType.

    While unpacking the bytes must be ASCII letters, otherwise the
    chunk is considered malformed.'''

    def __init__(self, **kw):
        kw.setdefault('default', ChunkType(b'\x00' * ChunkType.LENGTH))
        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(bytes(self.value)))

    def _set_value(self, value):
        if isinstance(value, str):
            value = ChunkType.from_str(value)

        if not isinstance(value, ChunkType):
            raise ValueError(f"field '{self.name}' accepts only ChunkType or str, not {value.__class__.__name__}")

        self._value = value

    def _get_size(self):
        return ChunkType.LENGTH

    def _get_raw(self):
        return bytes(self.value)

    def unpack(self, stream):
        data = self._read(stream, self.size)
        chunk_type = ChunkType.from_bytes(data)

        if not chunk_type.is_alphabetic():
            raise InvalidCharactersException(data, chain=[], offset=self.offset)

        self._value = chunk_type
