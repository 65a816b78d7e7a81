'''
Decoding of the scalar values stored in a 4 bytes big-endian field.

Historically the 1 and 2 bytes values are widened to 4 bytes on disk but
only the most significant byte(s) carry the value: the rest is garbage (usually zero)
and must be ignored.

    int8     | v | x | x | x |
    int16    | v   v | x | x |
    int32    | v   v   v   v |
'''
import logging

from bitstring import Bits

from ..exceptions import TruncatedStream


logger = logging.getLogger(__name__)

WIDENED_SIZE = 4


def _widened(raw: bytes) -> Bits:
    if len(raw) < WIDENED_SIZE:
        raise TruncatedStream(chain=[], msg=f'a widened value needs {WIDENED_SIZE} bytes, got {len(raw)}')

    return Bits(raw[:WIDENED_SIZE])


def decode_int8(raw: bytes) -> int:
    return _widened(raw)[:8].int


def decode_uint8(raw: bytes) -> int:
    return _widened(raw)[:8].uint


def decode_int16(raw: bytes) -> int:
    return _widened(raw)[:16].int


def decode_uint16(raw: bytes) -> int:
    return _widened(raw)[:16].uint


def decode_int32(raw: bytes) -> int:
    return _widened(raw).int


def decode_uint32(raw: bytes) -> int:
    return _widened(raw).uint


def decode_float32(raw: bytes) -> float:
    '''IEEE-754 single precision, the bit pattern is big-endian.'''
    return _widened(raw).floatbe
