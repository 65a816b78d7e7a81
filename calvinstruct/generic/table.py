'''
Rows of a data set.

On disk the table is row-major, each cell as wide as its column type requires:

    | row 0: col 0 | col 1 | ... | row 1: col 0 | col 1 | ... |

the numeric cells use the natural size of their type (1, 2 or 4 bytes) while the
string cells occupy the width declared by the column, length prefix included.

In memory we want the opposite, one numpy array for each column.
'''
import logging
import struct
from typing import List, Optional, Sequence

import numpy as np

from ..exceptions import CalvinException, UnrecoverableException
from .enum import ColumnType
from .strings import LENGTH_PREFIX_SIZE, read_astring_fw, read_awstring_fw


logger = logging.getLogger(__name__)


def allocate_column(column_type: Optional[ColumnType], n_rows: int) -> np.ndarray:
    '''Empty column: zeros for the numeric types, None for the strings (and the unknown types).'''
    if column_type is None or column_type.is_string:
        return np.full(n_rows, None, dtype=object)

    return np.zeros(n_rows, dtype=column_type.dtype)


def allocate_columns(column_types: Sequence[Optional[ColumnType]], n_rows: int) -> List[np.ndarray]:
    return [allocate_column(_, n_rows) for _ in column_types]


def get_column_types(columns) -> List[ColumnType]:
    column_types = []
    for column in columns:
        column_type = column.column_type.value
        if column_type is None:
            # without the type the width of the cell is unknown and the rest of the table with it
            raise UnrecoverableException(chain=[column.column_name.value or ''], msg='column with unknown type code')
        column_types.append(column_type)

    return column_types


def _read_numeric_table(stream, column_types: List[ColumnType], data: List[np.ndarray]):
    '''All the cells have a fixed size: the whole table is a single read.'''
    n_rows = len(data[0])
    record = np.dtype([('c%d' % idx, _.wire_dtype) for idx, _ in enumerate(column_types)])
    logger.debug('reading %d rows of %d bytes in one go', n_rows, record.itemsize)

    raw = stream.read(record.itemsize * n_rows)
    table = np.frombuffer(raw, dtype=record, count=n_rows)

    for idx, column in enumerate(data):
        column[:] = table['c%d' % idx]


def _read_cells(stream, columns, column_types: List[ColumnType], data: List[np.ndarray]):
    readers = []
    for column, column_type in zip(columns, column_types):
        if column_type == ColumnType.ASTRING:
            readers.append((read_astring_fw, column.byte_width.value - LENGTH_PREFIX_SIZE))
        elif column_type == ColumnType.AWSTRING:
            readers.append((read_awstring_fw, column.byte_width.value - LENGTH_PREFIX_SIZE))
        else:
            readers.append((None, struct.Struct(column_type.wire_format)))

    for row in range(len(data[0])):
        for idx, (reader, arg) in enumerate(readers):
            try:
                if reader:
                    data[idx][row] = reader(stream, arg)
                else:
                    data[idx][row] = arg.unpack(stream.read(arg.size))[0]
            except CalvinException as e:
                e.chain.extend([columns[idx].column_name.value or str(idx), str(row)])
                raise


def clear_columns(data: List[np.ndarray]):
    for column in data:
        column.fill(None if column.dtype == object else 0)


def read_table(stream, columns, n_rows: int, data: Optional[List[np.ndarray]] = None) -> List[np.ndarray]:
    '''Reads n_rows rows described by the column descriptors passed as argument
    into data, allocated here when not given, and returns the columns.'''
    column_types = get_column_types(columns)

    if data is None:
        data = allocate_columns(column_types, n_rows)

    if not column_types or not n_rows:
        return data

    if any(_.is_string for _ in column_types):
        _read_cells(stream, columns, column_types, data)
    else:
        _read_numeric_table(stream, column_types, data)

    return data


def read_rows(data_set, stream):
    '''Fills in place the columns allocated when the schema of the data set has been unpacked.

    A failure clears them again: no partially read table is left behind.'''
    offset = data_set.first_row_position.value
    if offset:
        stream.seek(offset)

    try:
        read_table(stream, data_set.columns.value, data_set.n_rows.value, data_set.data)
    except CalvinException:
        clear_columns(data_set.data)
        raise

    return data_set.data
