import copy
from enum import Enum, auto


class Endianess(Enum):
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()


class FieldBase(object):

    def create(self, father):
        '''Fields declared on a class are prototypes: every chunk
        works on its own copy.'''
        instance = copy.deepcopy(self)
        instance.father = father
        return instance


class FieldDescriptor(object):
    """Hands to each chunk its own copy of the field declared on the class;
    assigning to the attribute sets the value of that copy."""

    def __init__(self, prototype: FieldBase, name: str):
        prototype.name = name
        self.prototype = prototype

    def __get__(self, chunk, owner=None):
        if chunk is None:
            return self.prototype

        fields = chunk.__dict__
        if self.prototype.name not in fields:
            fields[self.prototype.name] = self.prototype.create(father=chunk)

        return fields[self.prototype.name]

    def __set__(self, chunk, value):
        self.__get__(chunk).value = value


class MetaChunk(type):
    '''Collects the fields declared in the body of a Chunk subclass.

    Their names end up in "_fields", in declaration order after the ones
    inherited, and the attributes become FieldDescriptor.'''

    def __new__(mcs, name, bases, attrs):
        declared = [(_k, _v) for _k, _v in attrs.items() if isinstance(_v, FieldBase)]

        for field_name, _ in declared:
            if any(hasattr(base, field_name) for base in bases):
                raise AttributeError(f'field {field_name} is already present in a base of class {name}')
            del attrs[field_name]

        cls = super().__new__(mcs, name, bases, attrs)

        inherited = [_ for base in bases for _ in getattr(base, '_fields', [])]
        cls._fields = inherited + [field_name for field_name, _ in declared]

        for field_name, prototype in declared:
            setattr(cls, field_name, FieldDescriptor(prototype, field_name))

        return cls
