"""
Core module for the abstraction of a file format

"""
from typing import Tuple, List

from .fields import Field
from .meta import MetaChunk
from .streams import Stream
from .exceptions import (
    DbstructException,
    ChunkUnpackException,
    UnpackException,
)


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format: a Chunk
    is an ordered sequence of fields unpacked one after the other.

    A Chunk can contain sub-chunks, simply declare an instance of
    another Chunk as attribute.

    If some data is passed with the constructor (a path, some bytes, a
    file object or a Stream) the chunk is unpacked right away.

    A subclass can define a validate() method, called once all the fields
    are unpacked, that raises when the values are not consistent.
    """

    def __init__(self, data=None, **kwargs):
        super().__init__(**kwargs)

        if data is not None:
            stream = data if isinstance(data, Stream) else Stream(data)
            self.logger.debug('unpacking \'%s\' from %s' % (self.__class__.__name__, stream))
            self.unpack(stream)

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

    def unpack(self, stream):
        '''This is one of the main APIs to take care of: its aim is to take a binary
        data and transform in the representation given by the class this method
        is implemented.

        The stream is consumed sequentially, each field reads exactly the
        bytes it needs and the offset where it started is saved in it.

        Errors coming from a field are re-raised with the name of the field
        added to their chain, so that the path of the failure is preserved.
        '''
        for field_name, field in self.get_fields():
            self.logger.debug('unpacking %s.%s' % (self.__class__.__name__, field_name))

            offset = stream.tell()
            self.logger.debug('offset at %d' % offset)

            try:
                field.unpack(stream)
            except (UnpackException, ChunkUnpackException) as e:
                chain = e.chain
                chain.append(field_name)
                raise ChunkUnpackException(chain=chain, msg=e.msg) from e
            except DbstructException as e:
                e.chain.append(field_name)
                raise
            field.offset = offset

        if hasattr(self, 'validate'):
            self.validate()
