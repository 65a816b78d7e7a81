import gzip
import io
import logging
import os
import struct

from .exceptions import TruncatedStream


logger = logging.getLogger(__name__)

GZIP_MAGIC = b'\x1f\x8b'
# a corrupt length can't make us allocate more than this before failing
READ_BLOCK_SIZE = 1 << 20


class Stream(object):
    '''This is a simple wrapper around bytes/file objects to
    uniform its properties: every read is exact and big-endian aware,
    and gzipped data is decompressed transparently.

    The cursor is the only state of the parse: a Stream must not be
    shared between two parses running at the same time.'''

    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self._type = type(obj)
        self._owned = False
        self.obj = obj
        self._raw = None
        self.is_gzip = False

        init_method_name = 'init_%s' % self.obj.__class__.__name__
        init_method = getattr(self, init_method_name, self.init_file)

        init_method()

    def __repr__(self):
        return '<%s(%r%s)>' % (
            self.__class__.__name__,
            getattr(self.obj, 'name', self._type.__name__),
            ', gzip' if self.is_gzip else '',
        )

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def init_str(self):
        '''We think this is a path'''
        logger.debug("opening path '%s'", self.obj)
        self._owned = True
        self.obj = open(self.obj, 'rb')
        self._sniff_gzip()

    def init_PosixPath(self):
        self.obj = os.fspath(self.obj)
        self.init_str()

    init_WindowsPath = init_PosixPath

    def init_bytes(self):
        '''We think these are raw bytes'''
        self._owned = True
        self.obj = io.BytesIO(self.obj)
        self._sniff_gzip()

    init_bytearray = init_bytes

    def init_file(self):
        '''An already opened binary file object: the caller keeps the ownership'''
        if not hasattr(self.obj, 'read') or not hasattr(self.obj, 'seek'):
            raise ValueError("'%s' is the wrong kind of object to use as stream" % self.obj.__class__.__name__)

        if isinstance(self.obj, gzip.GzipFile):
            self.is_gzip = True
            return

        self._sniff_gzip()

    def _sniff_gzip(self):
        start = self.obj.tell()
        head = self.obj.read(len(GZIP_MAGIC))
        self.obj.seek(start)

        if head == GZIP_MAGIC:
            logger.debug('gzip magic found, decompressing transparently')
            self._raw = self.obj
            self.obj = gzip.GzipFile(fileobj=self.obj, mode='rb')
            self.is_gzip = True

    def close(self):
        if self._raw is not None:
            self.obj.close()  # it doesn't close the underlying fileobj

        if self._owned:
            (self.obj if self._raw is None else self._raw).close()

    def tell(self):
        return self.obj.tell()

    def seek(self, offset):
        if not isinstance(offset, int):
            raise ValueError("'%s' is the wrong kind of offset to use" % offset.__class__.__name__)

        if offset < 0:
            raise ValueError(f'negative absolute offset {offset}')

        logger.debug('seek to 0x%08x', offset)
        self.obj.seek(offset)

    def seek_relative(self, delta):
        '''Moves the cursor forward or backward from the current position.'''
        if delta == 0:
            return

        target = self.tell() + delta
        if target < 0:
            raise ValueError(f'relative seek of {delta} goes before the start of the stream')

        self.obj.seek(target)

    def read(self, n):
        '''Read exactly n bytes, a short read is an error and never returns partial data.'''
        if n < 0:
            raise ValueError(f'cannot read {n} bytes')

        chunks = []
        missing = n
        while missing > 0:
            try:
                data = self.obj.read(min(missing, READ_BLOCK_SIZE))
            except EOFError as e:  # compressed stream cut short
                raise TruncatedStream(msg=str(e)) from e
            if not data:
                break
            chunks.append(data)
            missing -= len(data)

        if missing:
            raise TruncatedStream(msg=f'expected {n} bytes at 0x{self.tell() - (n - missing):08x}, got {n - missing}')

        return b''.join(chunks)

    def read_all(self):
        '''Returns whatever remains in the stream.'''
        return self.obj.read()

    def read_struct(self, fmt):
        '''Read a single value packed with the struct format passed as argument.'''
        return struct.unpack(fmt, self.read(struct.calcsize(fmt)))[0]

    def read_uint8(self):
        return self.read_struct('>B')

    def read_int8(self):
        return self.read_struct('>b')

    def read_uint16(self):
        return self.read_struct('>H')

    def read_int16(self):
        return self.read_struct('>h')

    def read_uint32(self):
        return self.read_struct('>I')

    def read_int32(self):
        return self.read_struct('>i')

    def read_float32(self):
        return self.read_struct('>f')
