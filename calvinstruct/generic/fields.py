from .. import fields
from .strings import read_astring, read_awstring


class AStringField(fields.Field):
    '''Length prefixed string of bytes, no encoding is applied.

    The value is None when the string is absent (length zero).'''

    def unpack(self, stream):
        self.value = read_astring(stream)


class AWStringField(fields.Field):
    '''Length prefixed string of 16 bits code units, decoded as str.'''

    def unpack(self, stream):
        self.value = read_awstring(stream)
