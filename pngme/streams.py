import logging


logger = logging.getLogger(__name__)


class Stream(object):
    '''Read cursor over a single immutable buffer.

    The whole input is available before parsing starts: the stream never
    copies it, it only moves an offset forward and hands out slices.'''
    def __init__(self, obj):
        self.obj = memoryview(bytes(obj))
        self._offset = 0
        self.history = []

    def __repr__(self):
        return f'<{self.__class__.__name__}(offset={self._offset}, size={len(self.obj)})>'

    def __len__(self):
        return len(self.obj)

    def tell(self) -> int:
        return self._offset

    def seek(self, offset: int):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        if not 0 <= offset <= len(self.obj):
            raise ValueError(f'offset {offset} is outside the stream (size {len(self.obj)})')

        self._offset = offset

        return self

    def read(self, n: int) -> bytes:
        '''Return at most n bytes; less are returned if the stream is short.'''
        data = self.obj[self._offset:self._offset + n].tobytes()
        self._offset += len(data)

        return data

    def read_all(self) -> bytes:
        return self.read(self.remaining())

    def remaining(self) -> int:
        return len(self.obj) - self._offset

    def is_exhausted(self) -> bool:
        return self.remaining() == 0

    def save(self):
        self.history.append(self._offset)

    def restore(self):
        self._offset = self.history.pop()

    def discard(self):
        '''Forget the last saved position without moving.'''
        self.history.pop()
