import io
import os
import logging

from .exceptions import ShortReadException


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around bytes/path/file object to
    uniform its properties: mainly we need a read_exactly() method
    that fails loudly when the data is not there.

    The stream is forward only, nobody is going to seek() it.'''
    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self._type = type(obj)
        self.obj = obj
        self.position = 0  # bytes consumed through read_exactly()

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, None)

        if init_method is None:
            if isinstance(self.obj, os.PathLike):
                init_method = self.init_str
            elif hasattr(self.obj, 'read'):
                init_method = self.init_fileobj
            else:
                raise ValueError('\'%s\' is the wrong kind of object to read from' % self._type.__name__)

        init_method()

    def __getattr__(self, name):
        if name == 'obj':
            raise AttributeError(name)
        return getattr(self.obj, name)

    def __del__(self):
        close = getattr(self.__dict__.get('obj'), 'close', None)
        if close is not None:
            close()

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, self._type.__name__)

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % self.obj)
        self.obj = open(self.obj, 'rb')

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)

    def init_bytearray(self):
        self.obj = io.BytesIO(bytes(self.obj))

    def init_fileobj(self):
        '''Already something with read(), take it as it is'''
        logger.debug('using file object %r' % self.obj)

    def tell(self):
        return self.position

    def read_exactly(self, n):
        '''Read n bytes or raise ShortReadException.

        Raw file objects and sockets may return fewer bytes than asked
        for, so keep reading until n bytes arrive or the source is exhausted.'''
        data = b''
        while len(data) < n:
            chunk = self.obj.read(n - len(data))
            if not chunk:
                break
            data += chunk

        self.position += len(data)

        if len(data) != n:
            raise ShortReadException(
                chain=[],
                msg='expected %d bytes, got %d' % (n, len(data)))

        return data
