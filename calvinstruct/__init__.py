"""
# Calvin file format ORM.

We can define a file format as a way of describing a binary representation of something
digital, where each subcomponent of the file format aims to represent a specific aspect
of the digital artefact.

Here the subcomponents are chunks: classes whose attributes are fields, unpacked in
declaration order from a stream

    class DataGroupHeader(Chunk):
        next_group_position     = fields.StructField('I')
        first_data_set_position = fields.StructField('I')
        n_data_sets             = fields.StructField('i')
        group_name              = AWStringField()

and the format described is the Affymetrix "Command Console Generic Data" one,
a.k.a. Calvin (see calvinstruct.generic). Only the unpacking direction exists.

An instance representing a file format can be in one of the following states

 1. INIT
 2. UNPACKING
 3. DONE
 4. ERROR

"""
from .config import Limits, DEFAULT_LIMITS
from .enum import Compliant
from .exceptions import (
    CalvinException,
    UnpackException,
    TruncatedStream,
    MagicException,
    BadMagic,
    UnsupportedVersion,
    UnknownMimeType,
    UnrecoverableException,
    LimitExceeded,
)
from .streams import Stream
from .generic import (
    MAGIC,
    VERSION,
    GenericFile,
    GenericHeader,
)


def read(source, **kwargs) -> GenericFile:
    '''Unpacks a whole generic file: source is a path, bytes, a binary file object or a Stream.'''
    return GenericFile(source, **kwargs)


def read_header(source, **kwargs) -> GenericHeader:
    '''Unpacks only the file header and the data header (with its lineage).'''
    return GenericHeader(source, **kwargs)


def is_generic_file(source) -> bool:
    '''Fast check of the first two bytes, gzipped files included.

    A file object passed in is left at the position it had.'''
    # decompressing moves the cursor of the underlying file object
    origin = source.tell() if hasattr(source, 'tell') and not isinstance(source, Stream) else None

    stream = source if isinstance(source, Stream) else Stream(source)
    try:
        start = stream.tell()
        head = stream.read(2)
        stream.seek(start)
    except TruncatedStream:
        return False
    finally:
        if stream is not source:
            stream.close()
        if origin is not None:
            source.seek(origin)

    return head == bytes([MAGIC, VERSION])


__all__ = [
    'read',
    'read_header',
    'is_generic_file',
    'GenericFile',
    'GenericHeader',
    'Stream',
    'Compliant',
    'Limits',
    'DEFAULT_LIMITS',
    'CalvinException',
    'UnpackException',
    'TruncatedStream',
    'MagicException',
    'BadMagic',
    'UnsupportedVersion',
    'UnknownMimeType',
    'UnrecoverableException',
    'LimitExceeded',
]

__version__ = '0.0.1'
