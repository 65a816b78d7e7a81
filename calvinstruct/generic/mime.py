'''
Decoding of the value of a name/value/type triplet.

The value is always stored as a narrow string, its meaning depends on
the MIME type stored alongside:

 - text/ascii: the bytes as they are
 - text/plain: the bytes are big-endian 16 bits code units (NOT a wide string,
   there is no length in units, only the byte length of the narrow string)
 - text/x-calvin-*: a scalar widened to 4 bytes, see common.primitives

Text values are padded with NULs, the decoded value stops at the first one.
'''
import logging
from typing import Union

from ..common import primitives
from ..enum import Compliant
from ..exceptions import UnknownMimeType
from .enum import MIMEType
from .strings import WIDE_UNIT_SIZE, decode_wide


logger = logging.getLogger(__name__)

# the kind used for the types we don't know about, as it always was
FALLBACK_MIME_TYPE = MIMEType.FLOAT32

SCALAR_DECODERS = {
    MIMEType.FLOAT32: primitives.decode_float32,
    MIMEType.INT8: primitives.decode_int8,
    MIMEType.INT16: primitives.decode_int16,
    MIMEType.INT32: primitives.decode_int32,
    MIMEType.UINT8: primitives.decode_uint8,
    MIMEType.UINT16: primitives.decode_uint16,
    MIMEType.UINT32: primitives.decode_uint32,
}

TypedValue = Union[bytes, str, int, float]

KNOWN_MIME_TYPES = frozenset(_.value for _ in MIMEType)


def is_known_mime_type(mime_type) -> bool:
    return mime_type in KNOWN_MIME_TYPES


def classify_mime_type(triplet) -> MIMEType:
    '''Exact match of the type of the triplet against the known MIME types.

    An unknown type raises UnknownMimeType when the triplet asks for Compliant.MIME,
    otherwise it's logged and the value is treated as a float.'''
    mime_type = triplet.mime_type.value
    try:
        return MIMEType(mime_type)
    except ValueError:
        if triplet.is_compliant(Compliant.MIME):
            raise UnknownMimeType(chain=[], msg=f'unknown MIME type {mime_type!r} for {triplet.entry_name.value!r}')

    logger.warning("unknown MIME type %r for '%s', decoding as %s",
                   mime_type, triplet.entry_name.value, FALLBACK_MIME_TYPE.value)

    return FALLBACK_MIME_TYPE


def _payload(triplet) -> bytes:
    return triplet.raw_value.value or b''


def _until_nul(value):
    index = value.find('\x00' if isinstance(value, str) else b'\x00')
    return value if index < 0 else value[:index]


def decode_ascii(raw: bytes) -> bytes:
    return _until_nul(raw)


def decode_text(raw: bytes) -> str:
    '''An odd trailing byte is not a code unit and it's dropped.'''
    usable = len(raw) - len(raw) % WIDE_UNIT_SIZE
    return _until_nul(decode_wide(raw[:usable]))


def decode_value(triplet, kind: MIMEType = None) -> TypedValue:
    '''Converts the raw value of the triplet in the type indicated by kind
    (by default the one declared by the triplet itself).'''
    kind = kind or classify_mime_type(triplet)
    raw = _payload(triplet)

    if kind == MIMEType.ASCIITEXT:
        return decode_ascii(raw)

    if kind == MIMEType.PLAINTEXT:
        return decode_text(raw)

    return SCALAR_DECODERS[kind](raw)


def decode_value_to_text(triplet, kind: MIMEType = None) -> str:
    '''Any value as a string: useful when a uniform representation is needed.'''
    kind = kind or classify_mime_type(triplet)
    value = decode_value(triplet, kind)

    if kind == MIMEType.ASCIITEXT:
        return value.decode('latin-1')

    if kind == MIMEType.FLOAT32:
        return '%f' % value

    return str(value)
