"""
Core module for the abstraction of a file format

"""
from typing import Tuple, List, Dict

from .fields import Field
from .meta import MetaChunk
from .streams import Stream
from .exceptions import CalvinException
from .properties import ChunkPhase


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format: its main attributes
    are offset and size that identify a Chunk.

    A Chunk can contain sub-chunks: the fields are unpacked in declaration order,
    jumping to the position declared by a field when it has one.

    Passing a source (path, bytes, binary file object or Stream) to the constructor
    unpacks it right away; a file opened here is closed here, also on error.
    """

    def __init__(self, source=None, **kwargs):
        super().__init__(**kwargs)

        if source is None:
            return

        if isinstance(source, Stream):
            self.unpack(source)
            return

        with Stream(source) as stream:
            self.logger.debug("unpacking '%s' from %s", self.__class__.__name__, stream)
            self.unpack(stream)

    @property
    def value(self):
        return self

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%s' % (field_name, repr(field)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def __str__(self):
        msg = ''
        for field_name, field in self.get_fields():
            msg += '%s: %s\n' % (field_name, repr(field))
        return msg

    def init(self):
        for _, field in self.get_fields():
            field.init()

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        result = {}
        for name, field in self.get_fields():
            result[name] = (field.offset, field.size)

        return result

    def unpack(self, stream):
        '''This is one of the main APIs to take care of: its aim is to take a binary
        data and transform in the representation given by the class this method
        is implemented.

        Passing a stream is mandatory since is possible that the different
        sub-chunks can have offsets not contiguous so we need to jump back and
        forth: a field with a declared offset is read from there, all the others
        are read where the previous one ended.

        If something goes wrong the exception carries the name of the field.
        '''
        self._phase = ChunkPhase.UNPACKING
        self.offset = stream.tell()

        for field_name, field in self.get_fields():
            self.logger.debug('unpacking %s.%s', self.__class__.__name__, field_name)

            try:
                # setup the offset for this chunk
                offset = field.get_offset()
                if offset:
                    stream.seek(offset)

                start = stream.tell()
                self.logger.debug('offset at 0x%08x', start)

                field.unpack(stream)
            except CalvinException as e:
                self._phase = ChunkPhase.ERROR
                e.chain.append(field_name)
                raise

            field.offset = start
            field.size = stream.tell() - start

        self.size = stream.tell() - self.offset
        self._phase = ChunkPhase.DONE
