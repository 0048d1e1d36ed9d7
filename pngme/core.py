"""
Core module for the abstraction of a file format

"""
from typing import Tuple, List, Dict

from .fields import Field
from .meta import MetaChunk
from .streams import Stream
from .exceptions import PngmeException
from .properties import ChunkPhase


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format: its main attributes
    are offset and size that identify a Chunk.

    A Chunk can contain sub-chunks, declared as class attributes in the order they
    appear in the binary representation.

    It can be built in two ways:

     1. Chunk(raw=data) unpacks the bytes (the chunk consumes what it needs
        starting from the first byte)
     2. Chunk(field=value, ...) sets the given values and lets the dependent
        fields (lengths, checksums) be derived from them

    If the class attribute "frozen" is True the fields can't be modified anymore
    once the chunk is built.
    """
    frozen = False

    def __init__(self, raw=None, father=None, **values):
        super().__init__(father=father)

        if raw is not None:
            if values:
                raise ValueError('you can\'t pass both raw data and field values')

            stream = Stream(raw)
            self.logger.debug('unpacking \'%s\' from %s' % (self.__class__.__name__, stream))
            self.unpack(stream)
            return

        for field_name, value in values.items():
            if field_name not in self._fields:
                raise AttributeError(f"'{self.__class__.__name__}' has no field named '{field_name}'")
            getattr(self, field_name).value = value

        self.update()
        self.relayout()

        if self.frozen:
            self.freeze()

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented

        return self.raw == other.raw

    __hash__ = None

    def get_ordered_fields_name(self) -> List[str]:
        return self._fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%s' % (field_name, repr(field)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def __str__(self):
        msg = ''
        for field_name, field in self.get_fields():
            msg += '%s: %s\n' % (field_name, repr(field))
        return msg

    def init(self):
        for _, field in self.get_fields():
            field.init()

    def _get_value(self):
        return {name: field.value for name, field in self.get_fields()}

    def _set_value(self, value):
        for name, field_value in value.items():
            getattr(self, name).value = field_value

    def freeze(self):
        super().freeze()
        for _, field in self.get_fields():
            field.freeze()

    def update(self):
        '''Derive the values that depend on the others (e.g. checksums).'''
        for _, field in self.get_fields():
            field._update_value()

    def _get_size(self):
        '''the size parameter MUST not be set but MUST be derived from the subchunks'''
        return sum(field.size for _, field in self.get_fields())

    def _get_raw(self):
        value = b''
        for field_name, field_instance in self.get_fields():
            value += field_instance.raw

        return value

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        result = {}
        for name, field in self.get_fields():
            result[name] = (field.offset, field.size)

        return result

    def relayout(self, offset=0):
        '''This method triggers the chunk's children to reset the offsets.

        In practice it's like packing() but it's only interested in the sizes
        of the chunks.'''
        self.offset = offset

        size = 0
        for field_name, field_instance in self.get_fields():
            self.logger.debug('relayouting %s.%s' % (self.__class__.__name__, field_name))
            size += field_instance.relayout(offset=offset + size)

        return size

    def pack(self) -> bytes:
        '''Encode the chunk into its binary representation.

        Packing doesn't modify the chunk so it can be called as many
        times as needed obtaining the same result.'''
        self.relayout(offset=self.offset or 0)

        return self.raw

    def unpack(self, stream):
        '''This is one of the main APIs to take care of: its aim is to take a binary
        data and transform in the representation given by the class this method
        is implemented.

        The fields are unpacked in order, each one starting where the previous
        ended; the offset of each field is recorded so that the layout reflects
        the original data.
        '''
        phase_old = self._phase
        self._phase = ChunkPhase.UNPACKING
        self.offset = stream.tell()

        for field_name, field in self.get_fields():
            self.logger.debug('unpacking %s.%s at offset %d' % (self.__class__.__name__, field_name, stream.tell()))

            field.offset = stream.tell()

            try:
                field.unpack(stream)
            except PngmeException as e:
                e.chain.append(field_name)
                self._phase = phase_old
                raise

        self._phase = ChunkPhase.INIT

        if self.frozen:
            self.freeze()
