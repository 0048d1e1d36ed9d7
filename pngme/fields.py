"""
A Field is "fundamental" datatype from the format point of view, something directly
packable/unpackable without need for relayouting.
"""
import logging
import struct

from .meta import FieldBase, Endianess
from .properties import Dependency, ChunkPhase
from .exceptions import (
    PngmeException,
    TruncatedFieldException,
    MagicException,
)


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, name=None, father=None, default=None, offset=None, endianess=Endianess.BIG_ENDIAN):
        super().__init__()
        self._phase = ChunkPhase.INIT
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.father = father
        self.default = default
        self.offset = offset
        self.endianess = endianess

        self.init()

    def init(self):
        self._value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    @property
    def is_frozen(self):
        return self._phase == ChunkPhase.DONE

    def freeze(self):
        self._phase = ChunkPhase.DONE

    value = property(
        fget=lambda self: self._get_value(),
        fset=lambda self, value: self._check_and_set_value(value))

    def _check_and_set_value(self, value):
        if self.is_frozen:
            raise AttributeError(f"field '{self.name}' is frozen")

        self._set_value(value)

    def _get_value(self):
        return self._value

    def _set_value(self, value):
        self._value = value

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    def _get_raw(self) -> bytes:
        raise NotImplementedError(f"method {self.__class__.__name__}._get_raw() not implemented")

    raw = property(
        fget=lambda self: self._get_raw(),
    )

    def relayout(self, offset=0):
        self.offset = offset

        return self.size

    def _update_value(self):
        '''This is used to update the binary value before packing'''
        pass

    def _read(self, stream, n):
        '''Read exactly n bytes from the stream or complain.'''
        offset = stream.tell()
        data = stream.read(n)

        if len(data) < n:
            self.logger.debug('field %s wants %d bytes at offset %d but only %d are left' % (
                self.name, n, offset, len(data)))
            raise TruncatedFieldException(n, len(data), chain=[], offset=offset)

        return data

    def unpack(self, stream):
        raise NotImplementedError('you need to implement this in the subclass')


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module packing/unpacking
    integers to/from bytes.
    """

    def __init__(self, format, default=0, **kw):
        self.format = format
        super().__init__(default=default, **kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, hex(self.value))

    def __str__(self):
        width = self.size * 2
        formatter = '0x%%0%dx' % width
        return formatter % (self.value,)

    def get_format(self):
        return '%s%s' % ('<' if self.endianess == Endianess.LITTLE_ENDIAN else '>', self.format)

    def _set_value(self, value):
        try:
            struct.pack(self.get_format(), value)
        except struct.error as e:
            raise ValueError(f"value {value!r} doesn't fit the format '{self.get_format()}' of field '{self.name}'") from e

        self._value = value

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _get_raw(self) -> bytes:
        return struct.pack(self.get_format(), self.value)

    def unpack(self, stream):
        raw = self._read(stream, self.size)
        self._value = struct.unpack(self.get_format(), raw)[0]


class StringField(Field):
    """Represent a contiguous chunk of bytes.

    The length can be a constant or a Dependency to another field: in the latter
    case setting the value writes back its length to the field it depends on.

    With is_magic the default value is the only acceptable value while unpacking.
    """

    def __init__(self, n=None, is_magic=False, **kw):
        if n is None and kw.get('default') is None:
            raise ValueError(f"StringField must have 'n' or 'default' indicated!")

        self._length = n if n is not None else len(kw['default'])
        self.is_magic = is_magic

        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    @property
    def length(self) -> int:
        if isinstance(self._length, Dependency):
            if self.father is None:
                return len(self._value)
            return self._length.resolve(self)

        return self._length

    def value_from_default(self):
        if self.default is not None:
            return self.default

        if isinstance(self._length, Dependency):
            return b''

        return b'\x00' * self._length

    def _get_size(self):
        return len(self._value)

    def _set_value(self, value):
        value = bytes(value)

        if isinstance(self._length, Dependency):
            if self.father is not None:
                self._length.resolve_and_set(self, len(value))
        elif len(value) != self._length:
            raise ValueError(f'you are trying to set a value with the wrong size (that is {self._length} bytes)')

        self._value = value

    def _get_raw(self):
        return self._value

    def unpack(self, stream):
        n = self.length

        if self.is_magic:
            offset = stream.tell()
            data = stream.read(n)
            if data != self.default:
                self.logger.warning('the magic doesn\'t correspond')
                raise MagicException(self.default, data, chain=[], offset=offset)
        else:
            data = self._read(stream, n)

        self._value = data


class ArrayField(Field):
    '''Un/Pack an array of Chunks.

    The elements are unpacked one after the other until the stream is exhausted;
    an element failing to unpack aborts the whole array since all the following
    offsets would be meaningless.

    This class behaves like a list in python, at least for the methods
    that make sense for an ordered sequence of chunks.
    '''

    def __init__(self, field_cls, **kw):
        self.field_cls = field_cls

        super().__init__(**kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value!r})>'

    def __getitem__(self, item):
        return self.value[item]

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def value_from_default(self):
        return list(self.default) if self.default is not None else []

    def _set_value(self, value):
        elements = list(value)
        for element in elements:
            element.father = self

        self._value = elements

    def _get_raw(self):
        return b''.join(element.raw for element in self.value)

    def _get_size(self):
        return sum(element.size for element in self.value)

    def relayout(self, offset=0):
        super().relayout(offset=offset)
        size = 0
        for field in self.value:
            size += field.relayout(offset=offset + size)

        return size

    def instance_element(self):
        return self.field_cls.create(father=self)  # pass the father so that we don't lose the hierarchy

    def unpack(self, stream):
        self._value = []

        while not stream.is_exhausted():
            idx = len(self._value)
            element = self.instance_element()
            self.logger.debug('unpacking element %d of \'%s\' at offset %d' % (idx, self.name, stream.tell()))

            stream.save()
            try:
                element.unpack(stream)
            except PngmeException as e:
                stream.restore()
                e.chain.append(str(idx))
                raise
            stream.discard()

            self._value.append(element)

    def append(self, element):
        self.insert(len(self.value), element)

    def insert(self, index, element):
        if self.is_frozen:
            raise AttributeError(f"field '{self.name}' is frozen")

        element.father = self
        self.value.insert(index, element)

    def pop(self, index=-1):
        if self.is_frozen:
            raise AttributeError(f"field '{self.name}' is frozen")

        return self.value.pop(index)

    def clear(self):
        if self.is_frozen:
            raise AttributeError(f"field '{self.name}' is frozen")

        self.value.clear()
