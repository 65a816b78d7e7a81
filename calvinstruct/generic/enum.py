from enum import Enum, IntEnum

import numpy as np


class ColumnType(IntEnum):
    '''Type code of a column of a data set, stored as a single byte.'''
    INT8   = 0
    UINT8  = 1
    INT16  = 2
    UINT16 = 3
    INT32  = 4
    UINT32 = 5
    FLOAT32 = 6
    ASTRING = 7   # fixed width narrow string
    AWSTRING = 8  # fixed width wide string

    @property
    def is_string(self):
        return self in (ColumnType.ASTRING, ColumnType.AWSTRING)

    @property
    def dtype(self) -> np.dtype:
        '''Element type of the decoded column, in native byte order.'''
        return np.dtype(COLUMN_DTYPES[self])

    @property
    def wire_dtype(self) -> np.dtype:
        '''Element type as found on disk, big-endian.'''
        return self.dtype.newbyteorder('>')

    @property
    def wire_format(self) -> str:
        return '>' + COLUMN_FORMATS[self]

    @property
    def wire_size(self) -> int:
        return self.wire_dtype.itemsize


COLUMN_DTYPES = {
    ColumnType.INT8: 'int8',
    ColumnType.UINT8: 'uint8',
    ColumnType.INT16: 'int16',
    ColumnType.UINT16: 'uint16',
    ColumnType.INT32: 'int32',
    ColumnType.UINT32: 'uint32',
    ColumnType.FLOAT32: 'float32',
    ColumnType.ASTRING: 'object',
    ColumnType.AWSTRING: 'object',
}

COLUMN_FORMATS = {
    ColumnType.INT8: 'b',
    ColumnType.UINT8: 'B',
    ColumnType.INT16: 'h',
    ColumnType.UINT16: 'H',
    ColumnType.INT32: 'i',
    ColumnType.UINT32: 'I',
    ColumnType.FLOAT32: 'f',
}


class MIMEType(Enum):
    '''Encoding of the value of a name/value/type triplet.'''
    FLOAT32   = 'text/x-calvin-float'
    PLAINTEXT = 'text/plain'
    ASCIITEXT = 'text/ascii'
    INT8      = 'text/x-calvin-integer-8'
    INT16     = 'text/x-calvin-integer-16'
    INT32     = 'text/x-calvin-integer-32'
    UINT8     = 'text/x-calvin-unsigned-integer-8'
    UINT16    = 'text/x-calvin-unsigned-integer-16'
    UINT32    = 'text/x-calvin-unsigned-integer-32'
