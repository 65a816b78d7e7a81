import pytest

from calvinstruct.config import configure_logging
from calvinstruct.generic.enum import ColumnType

from calvin_builder import (
    Column,
    DataSetDef,
    GroupDef,
    data_header,
    generic_file,
    nvt_float,
    nvt_int32,
    nvt_text,
)


configure_logging()


@pytest.fixture
def intensity_groups():
    return [
        GroupDef('Intensities', [
            DataSetDef(
                'Signal',
                [Column('value', ColumnType.FLOAT32)],
                rows=[(1.5,), (-2.0,), (0.0,)],
                nvts=[nvt_text('units', 'counts')],
            ),
            DataSetDef(
                'Features',
                [
                    Column('id', ColumnType.INT32),
                    Column('name', ColumnType.ASTRING, width=12),
                    Column('label', ColumnType.AWSTRING, width=12),
                ],
                rows=[(1, b'AFFX-1', 'ab'), (2, None, None)],
            ),
        ]),
        GroupDef('Masks', [
            DataSetDef('Flags', [Column('flag', ColumnType.UINT8), Column('x', ColumnType.INT16)], rows=[(255, -3)]),
        ]),
    ]


@pytest.fixture
def intensity_header():
    return data_header(nvts=[
        nvt_text('affymetrix-scanner-id', 'SCN-01'),
        nvt_float('affymetrix-cel-version', 4.0),
        nvt_int32('affymetrix-cel-rows', 1164),
    ])


@pytest.fixture
def intensity_file(intensity_groups, intensity_header):
    return generic_file(intensity_groups, header=intensity_header)


@pytest.fixture
def intensity_path(tmp_path, intensity_file):
    path = tmp_path / 'intensity.cel'
    path.write_bytes(intensity_file)

    return path
