import pytest

from calvinstruct.streams import Stream
from calvinstruct.exceptions import TruncatedStream
from calvinstruct.generic.strings import (
    read_astring,
    read_awstring,
    read_astring_fw,
    read_awstring_fw,
)

from calvin_builder import astring, awstring, fixed_astring, fixed_awstring, int32


def test_astring():
    stream = Stream(astring(b'kebab') + b'\xaa')

    assert read_astring(stream) == b'kebab'
    assert stream.tell() == 9


def test_absent_strings():
    stream = Stream(int32(0) + int32(-1) + int32(0))

    assert read_astring(stream) is None
    assert read_astring(stream) is None
    assert read_awstring(stream) is None
    assert stream.tell() == 12


def test_awstring():
    stream = Stream(awstring('affymetrix-calvin-κ'))

    assert read_awstring(stream) == 'affymetrix-calvin-κ'


def test_awstring_length_counts_units():
    stream = Stream(int32(2) + b'\x00a\x00b\x00c')

    assert read_awstring(stream) == 'ab'
    assert stream.tell() == 8


def test_truncated_string():
    with pytest.raises(TruncatedStream):
        read_astring(Stream(int32(10) + b'abc'))


def test_fixed_width_consumes_the_whole_field():
    stream = Stream(fixed_astring(b'abc', 12) + fixed_awstring('xy', 12) + b'\x2a')

    assert read_astring_fw(stream, 8) == b'abc'
    assert stream.tell() == 12
    assert read_awstring_fw(stream, 8) == 'xy'
    assert stream.tell() == 24
    assert stream.read_uint8() == 0x2a


def test_fixed_width_absent():
    stream = Stream(fixed_astring(None, 12) + fixed_awstring(None, 12))

    assert read_astring_fw(stream, 8) is None
    assert stream.tell() == 12
    assert read_awstring_fw(stream, 8) is None
    assert stream.tell() == 24


def test_fixed_width_too_long_is_truncated():
    stream = Stream(int32(10) + b'abcdefgh' + b'\x2a')

    assert read_astring_fw(stream, 8) == b'abcdefgh'
    assert stream.tell() == 12
    assert stream.read_uint8() == 0x2a


def test_fixed_width_without_room():
    stream = Stream(int32(3) + b'\x2a')

    assert read_astring_fw(stream, 0) is None
    assert stream.read_uint8() == 0x2a
