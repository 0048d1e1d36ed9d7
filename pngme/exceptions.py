class PngmeException(Exception):
    '''Base class to extend in order to throw exception in pngme.

    It takes as first argument the chain of the layers that caused the
    exception: the innermost field name comes first and every chunk the
    exception goes through appends its own name while propagating.
    '''

    def __init__(self, chain=None, offset=None):
        self.chain = chain if chain is not None else []
        self.offset = offset
        super().__init__()

    @property
    def path(self) -> str:
        return '.'.join(reversed(self.chain))

    def describe(self) -> str:
        return self.__class__.__name__

    def __str__(self):
        msg = self.describe()
        if self.chain:
            msg += f' [{self.path}]'
        if self.offset is not None:
            msg += f' at offset {self.offset:#x}'

        return msg


class MagicException(PngmeException):
    '''The signature at the start of the buffer is not the expected one.'''

    def __init__(self, expected, actual, **kwargs):
        self.expected = expected
        self.actual = actual
        super().__init__(**kwargs)

    def describe(self):
        return f'invalid signature: expected {self.expected.hex()} found {self.actual.hex()}'


class TruncatedFieldException(PngmeException):
    '''The buffer ended before the field named as first element of
    the chain could be read completely.'''

    def __init__(self, expected, actual, **kwargs):
        self.expected = expected
        self.actual = actual
        super().__init__(**kwargs)

    @property
    def field(self):
        return self.chain[0] if self.chain else None

    def describe(self):
        return f'truncated field \'{self.field}\': needed {self.expected} bytes, {self.actual} available'


class InvalidChunkTypeException(PngmeException):

    def __init__(self, value, **kwargs):
        self.value = value
        super().__init__(**kwargs)

    def describe(self):
        return f'invalid chunk type {self.value!r}'


class InvalidLengthException(InvalidChunkTypeException):

    def describe(self):
        return f'invalid chunk type {self.value!r}: it must be 4 characters long'


class InvalidCharactersException(InvalidChunkTypeException):

    def describe(self):
        return f'invalid chunk type {self.value!r}: only ASCII letters are allowed'


class ChecksumMismatchException(PngmeException):

    def __init__(self, stored, computed, **kwargs):
        self.stored = stored
        self.computed = computed
        super().__init__(**kwargs)

    def describe(self):
        return f'CRC mismatch: stored {self.stored:08x} computed {self.computed:08x}'


class NotUtf8Exception(PngmeException):

    def __init__(self, reason, **kwargs):
        self.reason = reason
        super().__init__(**kwargs)

    def describe(self):
        return f'chunk data is not valid UTF-8: {self.reason}'


class ChunkNotFoundException(PngmeException):

    def __init__(self, chunk_type, **kwargs):
        self.chunk_type = chunk_type
        super().__init__(**kwargs)

    def describe(self):
        return f'no chunk with type \'{self.chunk_type}\''
