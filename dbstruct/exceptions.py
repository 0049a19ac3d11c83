class DbstructException(Exception):
    '''Base class to extend in order to throw exception in dbstruct.

    It takes as first argument the chain of the layers that caused
    the exception, innermost first, and optionally a message.
    '''

    def __init__(self, chain, msg=''):
        self.chain = chain
        self.msg = msg
        super().__init__(msg)

    def __str__(self):
        path = '.'.join(reversed(self.chain))
        if not path:
            return self.msg

        return f'{path}: {self.msg}' if self.msg else path


class UnpackException(DbstructException):
    pass


class MagicException(DbstructException):
    pass


class ChunkUnpackException(DbstructException):
    pass


class ShortReadException(DbstructException):
    '''The stream ended before the requested number of bytes was read.'''
    pass


class MalformedHeaderException(DbstructException):
    pass


class MalformedFieldDescriptorException(DbstructException):
    pass


class UnexpectedTerminatorException(MalformedFieldDescriptorException):
    '''The byte after the field descriptors is not the 0x0d sentinel.'''
    pass


class InvalidFieldDataException(DbstructException):
    '''The bytes of a record don't decode to the type declared by its descriptor.'''
    pass
