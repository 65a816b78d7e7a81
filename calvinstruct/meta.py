import copy
import logging
from enum import Enum, auto


class Endianess(Enum):
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()
    NETWORK       = auto()
    NATIVE        = auto()

    @property
    def prefix(self):
        return {
            Endianess.LITTLE_ENDIAN: '<',
            Endianess.BIG_ENDIAN: '>',
            Endianess.NETWORK: '!',
            Endianess.NATIVE: '=',
        }[self]


class FieldDescriptor(object):
    """Wrapper around field access of a Field related class.

    The class attribute holds the prototype, each chunk instance gets its own
    copy the first time the attribute is accessed."""

    def __init__(self, field_instance: "Field", field_name: str):
        self.logger = logging.getLogger(f"{self.__module__}.{self.__class__.__name__}")
        self.field = field_instance
        self.field.name = field_name

    def __get__(self, instance, type=None):
        if instance is None:
            return self

        data = instance.__dict__

        if self.field.name not in data:
            self.logger.debug("create new field for field named '%s'", self.field.name)
            data[self.field.name] = self.field.create(father=instance)

        return data[self.field.name]

    def __set__(self, instance, value):
        data = instance.__dict__

        # if the value is the same type then set as it is
        if isinstance(value, self.field.__class__):
            value.father = instance
            value.name = self.field.name
            data[self.field.name] = value
        # otherwise delegate to the field
        else:
            self.__get__(instance).value = value


# set on every field and chunk while unpacking, a field with one of these names would be overwritten
RESERVED_NAMES = frozenset((
    "name", "father", "default", "offset", "size", "value",
    "endianess", "compliant", "limits", "logger",
))


class FieldBase(object):

    def contribute_to_chunk(self, cls, name):
        if name in cls.__dict__:
            raise AttributeError(f"field {name} is already present in class {cls.__name__}")

        if name in RESERVED_NAMES or hasattr(cls, name):
            raise AttributeError(f"field {name} would shadow an attribute of class {cls.__name__}")

        descriptor = FieldDescriptor(self, name)
        setattr(cls, name, descriptor)

        return descriptor

    def create(self, father):
        instance = copy.deepcopy(self)
        instance.father = father
        return instance


class Meta(object):
    """Class containing metadata about the abstraction"""

    def __init__(self):
        self.fields = []
        self.descriptors = {}


class MetaChunk(type):

    def __new__(cls, names, bases, attrs):
        '''Fields are collected in declaration order, the ones of the parent classes first.'''
        module = attrs.pop('__module__')
        classcell = attrs.pop('__classcell__', None)

        new_attrs = {
            '__module__': module,
        }
        if classcell is not None:
            new_attrs['__classcell__'] = classcell
        new_cls = super(MetaChunk, cls).__new__(cls, names, bases, new_attrs)

        new_cls._meta = Meta()
        new_cls.logger = logging.getLogger(module)

        # handle inheritance
        parents = [_ for _ in bases if isinstance(_, MetaChunk)]
        for parent in parents:
            for obj_name in parent._meta.fields:
                if obj_name in new_cls._meta.descriptors:
                    continue
                descriptor = parent._meta.descriptors[obj_name]
                setattr(new_cls, obj_name, descriptor)
                new_cls._meta.fields.append(obj_name)
                new_cls._meta.descriptors[obj_name] = descriptor

        for obj_name, obj in attrs.items():
            new_cls.add_to_class(obj_name, obj)

        return new_cls

    def add_to_class(cls, name, value):
        if not isinstance(value, type) and hasattr(value, 'contribute_to_chunk'):
            cls.logger.debug("contribute_to_chunk() found for field '%s'", name)
            cls._meta.fields.append(name)
            cls._meta.descriptors[name] = value.contribute_to_chunk(cls, name)
        else:
            setattr(cls, name, value)
