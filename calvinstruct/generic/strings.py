'''
The two string encodings of the format.

    narrow (ASTRING):  | int32 length | length x uint8  |
    wide   (AWSTRING): | int32 length | length x uint16 |

the length of a wide string counts the 16 bits code units, not the bytes.
A length of zero (or less) means the string is absent and nothing follows.

The fixed width variants are used by the string columns of a data set: the
field always occupies the declared width after the length prefix, the
unused part is padding to skip.
'''
import logging
from typing import Optional

from ..streams import Stream


logger = logging.getLogger(__name__)

LENGTH_PREFIX_SIZE = 4
WIDE_UNIT_SIZE = 2


def decode_wide(raw: bytes) -> str:
    '''Big-endian 16 bits code units to str, lone surrogates are kept as they are.'''
    return raw.decode('utf-16-be', errors='surrogatepass')


def read_astring(stream: Stream) -> Optional[bytes]:
    length = stream.read_int32()
    if length <= 0:
        return None

    return stream.read(length)


def read_awstring(stream: Stream) -> Optional[str]:
    length = stream.read_int32()
    if length <= 0:
        return None

    return decode_wide(stream.read(length * WIDE_UNIT_SIZE))


def _read_fixed(stream: Stream, width: int, unit: int) -> Optional[bytes]:
    '''Returns the payload, always consuming the prefix plus width bytes.

    The padding is read and not skipped: a table cut inside it is truncated as well.'''
    length = stream.read_int32()
    width = max(width, 0)
    capacity = width // unit

    if length > capacity:
        logger.warning('string of %d units does not fit a field of %d bytes, truncating', length, width)
        length = capacity

    field = stream.read(width)
    if length <= 0:
        return None

    return field[:length * unit]


def read_astring_fw(stream: Stream, width: int) -> Optional[bytes]:
    '''width is the usable part of the field, the declared column width minus the length prefix.'''
    return _read_fixed(stream, width, 1)


def read_awstring_fw(stream: Stream, width: int) -> Optional[str]:
    payload = _read_fixed(stream, width, WIDE_UNIT_SIZE)

    return decode_wide(payload) if payload is not None else None
