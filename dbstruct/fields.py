"""
A Field is "fundamental" datatype from the format point of view, something directly
unpackable from a stream without sub-components.

All the integers of the formats handled here are little endian.
"""
import logging
import struct
from enum import Enum

from .enum import Compliant
from .meta import FieldBase
from .properties import Dependency
from .exceptions import DbstructException, UnpackException, MagicException


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, *args, name=None, father=None, default=None, offset=None,
                 compliant=Compliant.INHERIT, is_magic=False):
        super().__init__()
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.father = father
        self.default = default
        self.offset = offset
        self.compliant = compliant
        self.is_magic = is_magic

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    def is_compliant(self, level):
        '''Walks the fathers as long as they inherit the compliance level'''
        instance = self
        while instance is not None:
            if instance.compliant & level:
                return True
            if not instance.compliant & Compliant.INHERIT:
                break

            instance = instance.father

        return False

    def unpack(self, stream):
        raise NotImplementedError('you need to implement this in the subclass')


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module unpacking
    integers from bytes.

    The main advantage is the possibility to indicate via the "enum" argument some subclass
    of enum.Enum so to have directly a representation of the value of the field itself.
    """

    def __init__(self, format, default=0, enum=None, **kw):
        self.format = format
        self.enum = enum
        super().__init__(default=default, **kw)

    def _get_encoder(self):
        return repr if isinstance(self.value, bytes) else hex

    def __repr__(self):
        if not isinstance(self.value, Enum):
            return '<%s(%s)>' % (self.__class__.__name__, self._get_encoder()(self.value))

        return f'<{self.__class__.__name__}({self.value!r})>'

    def __str__(self):
        if self.format == 'c':
            return self.value.decode('latin1')
        if isinstance(self.value, Enum):
            return self.value.name
        width = self.size * 2  # we want to be as large as possible
        formatter = '0x%%0%dx' % width
        return formatter % (self.value,)

    def value_from_default(self):
        if not self.enum or isinstance(self.default, self.enum):
            return super().value_from_default()

        # like when unpacking, a value outside of the enum is kept as it is
        try:
            return self.enum(self.default)
        except ValueError:
            return self.default

    def get_format(self):
        return '<%s' % self.format

    @property
    def size(self):
        return struct.calcsize(self.get_format())

    def _unpack_struct(self, raw: bytes):
        try:
            unpacked_value = struct.unpack(self.get_format(), raw)[0]
        except struct.error as e:
            raise UnpackException(chain=[], msg=str(e)) from e

        return unpacked_value

    def _unpack_enum(self, value):
        try:
            return self.enum(value)
        except ValueError:
            if self.is_compliant(Compliant.ENUM):
                raise UnpackException(chain=[], msg=f'{value!r} is not a valid {self.enum.__name__}')

            self.logger.warning(f'enum {self.enum!r} doesn\'t have element with value {value!r} in it')

        return value

    def _unpack(self, raw):
        value = self._unpack_struct(raw)
        if self.enum:
            value = self._unpack_enum(value)

        if self.is_magic and value != self.default:
            self.logger.warning(f'the magic doesn\'t correspond: {value!r} instead of {self.default!r}')
            if self.is_compliant(Compliant.MAGIC):
                raise MagicException(chain=[], msg=f'expected {self.default!r}, found {value!r}')

        return value

    def unpack(self, stream):
        self.value = self._unpack(stream.read_exactly(self.size))


class StringField(Field):
    """Represent a contiguous chunk of bytes.

    The length can be a Dependency, in that case it's resolved when unpacking."""

    def __init__(self, n=None, **kw):
        if n is None and 'default' not in kw:
            raise ValueError(f"StringField must have 'n' or 'default' indicated!")

        self._length = n if n is not None else len(kw['default'])

        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    @property
    def length(self):
        if isinstance(self._length, Dependency):
            return self._length.resolve(self)

        return self._length

    def value_from_default(self):
        if self.default:
            return self.default

        return b'' if isinstance(self._length, Dependency) else b'\x00' * self._length

    def unpack(self, stream):
        self.value = stream.read_exactly(self.length)


class ArrayField(Field):
    '''Unpack an array of Chunks.

    You indicate the number of elements via the parameter named "n", that
    can be an integer or a Dependency.

    This class must behave like a list in python, obviously cannot implement all the methods
    since, for example, slicing what should mean?
    '''

    def __init__(self, field_cls, n=0, **kw):
        self.field_cls = field_cls
        if not isinstance(n, (Dependency, int)):
            raise ValueError('n is \'%s\' must be of the right type' % n.__class__.__name__)

        self._n = n

        if 'default' not in kw:
            kw['default'] = []

        super().__init__(**kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value!r})>'

    def __getitem__(self, item):
        return self.value[item]

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def value_from_default(self):
        return list(self.default)

    @property
    def n(self):
        if isinstance(self._n, Dependency):
            return self._n.resolve(self)

        return self._n

    def instance_element(self):
        return self.field_cls.create(father=self)  # pass the father so that we don't lose the hierarchy

    def unpack(self, stream):
        n = self.n
        self.logger.debug('unpacking %d elements for field \'%s\'' % (n, self.name))

        self.value = []
        for idx in range(n):
            element = self.instance_element()
            element.offset = stream.tell()
            try:
                element.unpack(stream)
            except DbstructException as e:
                e.chain.append(str(idx))
                raise
            self.value.append(element)
