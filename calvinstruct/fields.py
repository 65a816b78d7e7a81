"""
A Field is "fundamental" datatype from the format point of view, something directly
unpackable from the stream without need of subcomponents.
"""
import logging
import struct
from enum import Enum
from typing import List

from .config import DEFAULT_LIMITS, Limits
from .enum import Compliant
from .meta import FieldBase, Endianess
from .properties import ChunkPhase, get_root_from_chunk, iter_fathers, resolve
from .exceptions import (
    CalvinException,
    UnpackException,
    BadMagic,
    LimitExceeded,
)


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, *, name=None, father=None, default=None, offset=None,
                 endianess=Endianess.BIG_ENDIAN, compliant=Compliant.INHERIT, limits: Limits = None):
        super().__init__()
        self._phase = ChunkPhase.INIT
        self.logger = logging.getLogger(self.__module__)
        self.name = name
        self.father = father
        self.default = default
        self._offset = offset  # where to seek before unpacking, can be a Dependency
        self.offset = None     # where it was actually found
        self.size = 0
        self.endianess = endianess
        self.compliant = compliant
        self.limits = limits

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __repr__(self):
        return '<%s(%r)>' % (self.__class__.__name__, self.value)

    def __str__(self):
        return str(self.value)

    @property
    def root(self):
        '''Obtain the final father of this field'''
        return get_root_from_chunk(self)

    def resolve(self, value):
        return resolve(self, value)

    def get_offset(self):
        '''The absolute position declared for this field, None if it simply follows the previous one.'''
        return self.resolve(self._offset)

    def is_compliant(self, level):
        '''Returns the compliant'''
        instance = self
        while instance is not None:
            if instance.compliant & level:
                return True
            if not instance.compliant & Compliant.INHERIT:
                break

            instance = instance.father

        return False

    def get_limits(self) -> Limits:
        '''The nearest limits along the father chain win.'''
        if self.limits is not None:
            return self.limits

        for father in iter_fathers(self):
            if father.limits is not None:
                return father.limits

        return DEFAULT_LIMITS

    def check_count(self, count, what=None):
        what = what or self.name
        if count < 0:
            raise UnpackException(chain=[], msg=f'negative count {count} for {what}')

        max_count = self.get_limits().max_count
        if max_count is not None and count > max_count:
            raise LimitExceeded(chain=[], msg=f'{what} declares {count} elements, the limit is {max_count}')

        return count

    def unpack(self, stream):
        raise NotImplementedError(f'you need to implement unpack() in {self.__class__.__name__}')


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module unpacking
    integers from bytes.

    The main advantage is the possibility to indicate via the "enum" argument some subclass
    of enum.Enum so to have directly a representation of the integer value of the field itself.

    With "is_magic" the value read must be equal to the default, otherwise the
    exception passed as "mismatch" is raised (when the chunk asks for Compliant.MAGIC).
    """

    def __init__(self, format, default=0, enum=None, is_magic=False, mismatch=BadMagic, **kw):
        self.format = format
        self.enum = enum
        self.is_magic = is_magic
        self.mismatch = mismatch
        super().__init__(default=default, **kw)

    def __repr__(self):
        if self.enum or not isinstance(self.value, int):
            return f'<{self.__class__.__name__}({self.value!r})>'

        return '<%s(%s)>' % (self.__class__.__name__, hex(self.value))

    def value_from_default(self):
        if not self.enum or self.default is None:
            return super().value_from_default()

        return self.enum(self.default)

    def get_format(self):
        return '%s%s' % (self.endianess.prefix, self.format)

    def get_size(self):
        return struct.calcsize(self.get_format())

    def _unpack_enum(self, value: int) -> Enum:
        try:
            return self.enum(value)
        except ValueError:
            if self.is_compliant(Compliant.ENUM):
                raise UnpackException(chain=[], msg=f'{self.enum.__name__} has no element with value 0x{value:x}')

            self.logger.warning(f'enum {self.enum!r} doesn\'t have element with value 0x{value:x} in it')

    def _unpack(self, raw):
        value = struct.unpack(self.get_format(), raw)[0]
        if self.enum:
            value = self._unpack_enum(value)

        if self.is_magic and value != self.value_from_default():
            self.logger.warning(f"the magic for '{self.name}' doesn't correspond: {value!r}")
            if self.is_compliant(Compliant.MAGIC):
                raise self.mismatch(chain=[], msg=f'expected {self.default!r}, found {value!r}')

        return value

    def unpack(self, stream):
        self.value = self._unpack(stream.read(self.get_size()))


class ArrayField(Field):
    '''Unpack an array of Chunks.

    You can indicate an explicite number of elements via the parameter named "n",
    usually a Dependency on a sibling field.

    Passing 'self' as element the array contains instances of the chunk the array
    belongs to, so to describe recursive structures.

    With "follow" the elements are not contiguous: each element stores the absolute
    position of the next one in the field with that name.
    '''

    def __init__(self, field_cls, n=0, follow=None, **kw):
        self.field_cls = field_cls
        self._n = n
        self._follow = follow

        kw.setdefault('default', [])
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
        return list(self.default)

    @property
    def n(self):
        return self.resolve(self._n)

    def instance_element(self):
        if self.field_cls == 'self':
            return self.father.__class__(father=self)

        return self.field_cls.create(father=self)  # pass the father so that we don't lose the hierarchy

    def unpack(self, stream):
        n = self.check_count(self.n)
        self.logger.debug("unpacking %d elements for '%s'", n, self.name)

        elements: List[Field] = []
        for idx in range(n):
            if elements and self._follow:
                position = getattr(elements[-1], self._follow).value
                # zero means the next element starts where the previous one ended
                if position:
                    self.logger.debug("following '%s' of element %d to 0x%08x", self._follow, idx - 1, position)
                    stream.seek(position)

            element = self.instance_element()
            try:
                element.unpack(stream)
            except CalvinException as e:
                e.chain.append(str(idx))
                raise

            elements.append(element)

        self.value = elements
