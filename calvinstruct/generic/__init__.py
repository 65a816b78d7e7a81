'''
# Command Console Generic Data format

Also known as the "Calvin" format, it's the container used by Affymetrix
instruments and software to interchange data (CEL, CHP, ...). Every integer is
big-endian.

    .------------------------------.
    | file header                  |  magic (59), version (1), #groups, first group position
    | data header                  |  metadata triplets + parent headers (recursive)
    | data group 1                 |  --> next group position
    |   data set 1                 |  schema, then the rows up to its last row position
    |   data set 2                 |
    |   ...                        |
    | data group 2                 |
    |   ...                        |
    '------------------------------'

The physical order of the groups is not necessarily the logical one: the groups are
a chain through their "next group position" and the data sets of a group continue
at the last row position of the previous one (trailing padding can be present).

Each data header records the headers of the files it was generated from (its lineage)
as nested data headers.
'''
from typing import Iterator, List, Optional

from ..fields import StructField, ArrayField
from ..core import Chunk
from ..enum import Compliant
from ..exceptions import CalvinException, UnsupportedVersion, LimitExceeded
from ..properties import Dependency, iter_fathers
from .enum import ColumnType, MIMEType
from .fields import AStringField, AWStringField
from .mime import classify_mime_type, decode_value, decode_value_to_text, is_known_mime_type
from .table import allocate_columns, read_rows


MAGIC = 59
VERSION = 1


class FileHeader(Chunk):
    magic              = StructField('B', default=MAGIC, is_magic=True)
    version            = StructField('B', default=VERSION, is_magic=True, mismatch=UnsupportedVersion)
    n_data_groups      = StructField('i')
    first_group_position = StructField('I')

    def __init__(self, *args, **kwargs):
        kwargs.setdefault('compliant', Compliant.MAGIC | Compliant.INHERIT)
        super().__init__(*args, **kwargs)


class NameValueType(Chunk):
    '''Name/value/type triplet: the value is an opaque string of bytes
    whose meaning is given by the MIME type.'''
    entry_name = AWStringField()
    raw_value  = AStringField()
    mime_type  = AWStringField()

    def __str__(self):
        return '%s=%s (%s)' % (self.entry_name.value, self.decode_to_text(), self.mime_type.value)

    @property
    def kind(self) -> MIMEType:
        return classify_mime_type(self)

    @property
    def has_known_type(self):
        '''False when the value is decoded with the fallback kind.'''
        return is_known_mime_type(self.mime_type.value)

    def decode(self, kind: MIMEType = None):
        return decode_value(self, kind)

    def decode_to_text(self, kind: MIMEType = None) -> str:
        return decode_value_to_text(self, kind)


def find_nvt_in(triplets, name) -> Optional[NameValueType]:
    for triplet in triplets:
        if triplet.entry_name.value == name:
            return triplet

    return None


class DataHeader(Chunk):
    data_type_id      = AStringField()
    unique_file_id    = AStringField()
    date_time         = AWStringField()
    locale            = AWStringField()
    n_name_type_value = StructField('i')
    name_type_value   = ArrayField(NameValueType(), n=Dependency('.n_name_type_value'))
    n_parent_headers  = StructField('i')
    parent_headers    = ArrayField('self', n=Dependency('.n_parent_headers'))

    @property
    def depth(self):
        '''How many data headers are above this one in the lineage.'''
        return sum(1 for _ in iter_fathers(self) if isinstance(_, DataHeader))

    def unpack(self, stream):
        max_depth = self.get_limits().max_depth
        if self.depth > max_depth:
            raise LimitExceeded(chain=[], msg=f'lineage deeper than {max_depth} parent headers')

        super().unpack(stream)

    def iter_lineage(self) -> Iterator["DataHeader"]:
        '''Depth-first, this header first then each parent with its own lineage.'''
        yield self
        for parent in self.parent_headers:
            yield from parent.iter_lineage()

    def find_nvt(self, name: str) -> Optional[NameValueType]:
        '''The first triplet with the given name, looking at this header
        and then through the lineage.'''
        for header in self.iter_lineage():
            triplet = find_nvt_in(header.name_type_value, name)
            if triplet is not None:
                return triplet

        return None


class ColumnDescriptor(Chunk):
    column_name = AWStringField()
    column_type = StructField('B', enum=ColumnType)
    byte_width  = StructField('i')  # string columns: length prefix included


class DataSetHeader(Chunk):
    '''The schema of a data set: the rows follow at first_row_position.

    Once unpacked, "data" holds an empty array for each column.'''
    first_row_position = StructField('I')
    last_row_position  = StructField('I')
    data_set_name      = AWStringField()
    n_name_type_value  = StructField('i')
    name_type_value    = ArrayField(NameValueType(), n=Dependency('.n_name_type_value'))
    n_columns          = StructField('I')
    columns            = ArrayField(ColumnDescriptor(), n=Dependency('.n_columns'))
    n_rows             = StructField('I')

    def init(self):
        super().init()
        self.data = []

    def unpack(self, stream):
        super().unpack(stream)
        self.data = allocate_columns(self.column_types, self.check_count(self.n_rows.value, 'n_rows'))

    @property
    def column_types(self) -> List[ColumnType]:
        return [_.column_type.value for _ in self.columns]

    @property
    def column_names(self) -> List[str]:
        return [_.column_name.value for _ in self.columns]

    def column(self, name: str):
        return self.data[self.column_names.index(name)]

    def find_nvt(self, name: str) -> Optional[NameValueType]:
        return find_nvt_in(self.name_type_value, name)


class DataSet(DataSetHeader):
    '''Schema plus rows.'''

    def unpack(self, stream):
        super().unpack(stream)

        try:
            read_rows(self, stream)
        except CalvinException as e:
            e.chain.append('rows')
            raise


class DataGroupHeader(Chunk):
    next_group_position     = StructField('I')
    first_data_set_position = StructField('I')
    n_data_sets             = StructField('i')
    group_name              = AWStringField()


class DataGroup(DataGroupHeader):
    data_sets = ArrayField(
        DataSet(),
        n=Dependency('.n_data_sets'),
        offset=Dependency('.first_data_set_position'),
        follow='last_row_position',
    )

    def get_data_set(self, name: str) -> Optional[DataSet]:
        for data_set in self.data_sets:
            if data_set.data_set_name.value == name:
                return data_set

        return None


class GenericHeader(Chunk):
    '''Only the headers, the data groups are left alone.'''
    file_header = FileHeader()
    data_header = DataHeader()


class GenericFile(GenericHeader):
    data_groups = ArrayField(
        DataGroup(),
        n=Dependency('.file_header.n_data_groups'),
        offset=Dependency('.file_header.first_group_position'),
        follow='next_group_position',
    )

    def get_data_group(self, name: str) -> Optional[DataGroup]:
        for data_group in self.data_groups:
            if data_group.group_name.value == name:
                return data_group

        return None

    def find_nvt(self, name: str) -> Optional[NameValueType]:
        return self.data_header.find_nvt(name)
