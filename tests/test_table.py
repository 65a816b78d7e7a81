import numpy as np
import pytest

from calvinstruct.config import Limits
from calvinstruct.enum import Compliant
from calvinstruct.exceptions import TruncatedStream, UnpackException, UnrecoverableException, LimitExceeded
from calvinstruct.generic import DataSet, DataSetHeader
from calvinstruct.generic.enum import ColumnType
from calvinstruct.generic.table import read_rows
from calvinstruct.streams import Stream

from calvin_builder import Column, DataSetDef, awstring, data_set, int32, nvt_int32, uint32


def float_data_set():
    return data_set(0, DataSetDef(
        'Intensity',
        [Column('Intensity', ColumnType.FLOAT32)],
        rows=[(1.5,), (-2.0,), (0.0,)],
        nvts=[nvt_int32('affymetrix-cel-rows', 3)],
    ))


def test_float_column():
    ds = DataSet(float_data_set())

    assert ds.data_set_name.value == 'Intensity'
    assert ds.n_rows.value == 3
    assert ds.column_names == ['Intensity']
    assert ds.column_types == [ColumnType.FLOAT32]
    assert ds.data[0].dtype == np.float32
    assert ds.data[0].tolist() == [1.5, -2.0, 0.0]
    assert ds.column('Intensity') is ds.data[0]
    assert ds.find_nvt('affymetrix-cel-rows').decode() == 3


def test_numeric_columns():
    columns = [
        Column('a', ColumnType.INT8),
        Column('b', ColumnType.UINT8),
        Column('c', ColumnType.INT16),
        Column('d', ColumnType.UINT16),
        Column('e', ColumnType.INT32),
        Column('f', ColumnType.UINT32),
        Column('g', ColumnType.FLOAT32),
    ]
    ds = DataSet(data_set(0, DataSetDef('numbers', columns, rows=[
        (-1, 255, -2, 0xfffe, -3, 0xfffffffd, 0.5),
        (127, 0, 300, 1, 70000, 4, -0.25),
    ])))

    assert [_.byte_width.value for _ in ds.columns] == [1, 1, 2, 2, 4, 4, 4]
    assert [_.dtype for _ in ds.data] == [_.type.dtype for _ in columns]
    assert [_.tolist() for _ in ds.data] == [
        [-1, 127],
        [255, 0],
        [-2, 300],
        [0xfffe, 1],
        [-3, 70000],
        [0xfffffffd, 4],
        [0.5, -0.25],
    ]


def test_string_columns():
    columns = [
        Column('id', ColumnType.INT32),
        Column('name', ColumnType.ASTRING, width=12),
        Column('label', ColumnType.AWSTRING, width=12),
        Column('x', ColumnType.INT8),
    ]
    ds = DataSet(data_set(0, DataSetDef('features', columns, rows=[
        (1, b'AFFX-1', 'ab', -5),
        (2, None, None, 6),
        (3, b'12345678', 'wxyz', 7),
    ])))

    assert ds.column('id').tolist() == [1, 2, 3]
    assert ds.column('name').tolist() == [b'AFFX-1', None, b'12345678']
    assert ds.column('label').tolist() == ['ab', None, 'wxyz']
    assert ds.column('x').tolist() == [-5, 6, 7]
    assert ds.column('name').dtype == object


def test_header_only():
    raw = float_data_set()
    stream = Stream(raw)
    header = DataSetHeader()
    header.unpack(stream)

    assert stream.tell() == header.first_row_position.value
    assert header.last_row_position.value == len(raw)
    assert header.data[0].tolist() == [0.0, 0.0, 0.0]

    assert read_rows(header, stream)[0].tolist() == [1.5, -2.0, 0.0]
    assert stream.tell() == len(raw)


def test_rows_fill_the_schema_columns():
    raw = data_set(0, DataSetDef('features', [Column('id', ColumnType.INT32), Column('name', ColumnType.ASTRING, 8)], rows=[
        (1, b'a'),
        (2, b'b'),
    ]))
    stream = Stream(raw)
    header = DataSetHeader()
    header.unpack(stream)
    columns = list(header.data)

    data = read_rows(header, stream)

    assert data is header.data
    assert all(_ is __ for _, __ in zip(data, columns))
    assert data[1].tolist() == [b'a', b'b']


def test_no_rows():
    ds = DataSet(data_set(0, DataSetDef('empty', [Column('a', ColumnType.UINT16), Column('s', ColumnType.ASTRING, 8)])))

    assert ds.n_rows.value == 0
    assert [len(_) for _ in ds.data] == [0, 0]
    assert ds.data[0].dtype == np.uint16


def test_truncated_rows():
    ds = DataSet()

    with pytest.raises(TruncatedStream) as excinfo:
        ds.unpack(Stream(float_data_set()[:-2]))

    assert excinfo.value.path == 'rows'
    # nothing was read, the columns allocated from the schema stay empty
    assert ds.data[0].tolist() == [0.0, 0.0, 0.0]


def test_truncated_string_rows():
    raw = data_set(0, DataSetDef('features', [Column('id', ColumnType.INT32), Column('name', ColumnType.ASTRING, 8)], rows=[
        (1, b'a'),
        (2, b'b'),
    ]))

    with pytest.raises(TruncatedStream) as excinfo:
        DataSet(raw[:-1])

    assert excinfo.value.path == 'rows.1.name'


def test_truncated_string_rows_are_cleared():
    raw = data_set(0, DataSetDef('features', [Column('id', ColumnType.INT32), Column('name', ColumnType.ASTRING, 8)], rows=[
        (1, b'a'),
        (2, b'b'),
    ]))
    ds = DataSet()

    with pytest.raises(TruncatedStream):
        ds.unpack(Stream(raw[:-1]))

    # the first row had been read already
    assert ds.column('id').tolist() == [0, 0]
    assert ds.column('name').tolist() == [None, None]


def unknown_column_type():
    schema = awstring('odd') + int32(0) + uint32(1) + awstring('c') + b'\x09' + int32(4) + uint32(1)
    first_row = 8 + len(schema)

    return uint32(first_row) + uint32(first_row + 4) + schema + b'\x00' * 4


def test_unknown_column_type():
    with pytest.raises(UnrecoverableException):
        DataSet(unknown_column_type())

    header = DataSetHeader(unknown_column_type())
    assert header.column_types == [None]

    with pytest.raises(UnpackException) as excinfo:
        DataSetHeader(unknown_column_type(), compliant=Compliant.ENUM)

    assert excinfo.value.path == 'columns.0.column_type'


def test_too_many_rows():
    with pytest.raises(LimitExceeded):
        DataSet(float_data_set(), limits=Limits(max_count=2))


def test_default_row_ceiling():
    raw = float_data_set()
    first_row = int.from_bytes(raw[:4], 'big')
    raw = raw[:first_row - 4] + uint32(0xffffffff) + raw[first_row:]

    with pytest.raises(LimitExceeded):
        DataSetHeader(raw)
