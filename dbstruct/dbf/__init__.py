'''
# dBASE table format

A .dbf file is made of

  .-------------------------------------.
  | header (32 bytes)                   |
  | field descriptor 1 (32 bytes)       |
  | ...                                 |
  | field descriptor N (32 bytes)       |
  | terminator 0x0d                     |
  | [backlink (263 bytes), VFP only]    |
  | record 1                            |
  | ...                                 |
  | record M                            |
  '-------------------------------------'

Each record starts with a one byte deletion flag (' ' or '*') followed by the
columns laid out one after the other with the width indicated by their descriptor;
all the records have the same size, indicated in the header.

A description of the format is at <http://www.dbase.com/Knowledgebase/INT/db7_file_fmt.htm>
and the Visual FoxPro variant is at <https://learn.microsoft.com/en-us/previous-versions/visualstudio/foxpro/st4a0s68(v=vs.80)>.
'''
import datetime
from collections import Counter

from bitstring import BitArray

from ..core import Chunk
from .. import fields
from ..enum import Compliant
from ..properties import Dependency
from ..exceptions import (
    MagicException,
    ChunkUnpackException,
    MalformedHeaderException,
    MalformedFieldDescriptorException,
    UnexpectedTerminatorException,
)
from .enum import (
    DBFVersion,
    DBFFieldType,
    DBFFieldFlags,
    VISUAL_FOXPRO_VERSIONS,
)


HEADER_SIZE = 32
DESCRIPTOR_SIZE = 32
TERMINATOR = b'\r'
BACKLINK_SIZE = 263
DELETION_FLAG_NAME = 'DeletionFlag'


class DBFVersionField(fields.StructField):
    '''The first byte of the file is a bit-field

      bit 7    DBT memo file present
      bits 6-4 SQL table (dBASE IV)
      bit 3    dBASE IV memo file present
      bits 2-0 version number

    but some producers (FoxPro mainly) use it as a plain identifier.'''

    def __init__(self, **kwargs):
        super().__init__('B', **kwargs)

    @property
    def bits(self) -> BitArray:
        return BitArray(uint=self.value, length=8)

    @property
    def version_number(self) -> int:
        return self.bits[5:].uint

    @property
    def has_memo(self) -> bool:
        bits = self.bits
        return bits[0] or bits[4]

    @property
    def kind(self):
        try:
            return DBFVersion(self.value)
        except ValueError:
            return None

    def is_visual_foxpro(self) -> bool:
        return self.kind in VISUAL_FOXPRO_VERSIONS


class DBFHeader(Chunk):
    '''The fixed part at the start of the file, all the integers are little endian.

    The year of the last update is stored as an offset from 1900.'''
    version                = DBFVersionField()
    last_update_year       = fields.StructField('B')
    last_update_month      = fields.StructField('B')
    last_update_day        = fields.StructField('B')
    num_records            = fields.StructField('I')
    offset_to_first_record = fields.StructField('H')
    size_of_record         = fields.StructField('H')  # deletion flag included
    reserved               = fields.StringField(2)
    incomplete_transaction = fields.StructField('B')
    encryption_flag        = fields.StructField('B')
    multi_user             = fields.StringField(12)
    has_mdx                = fields.StructField('B')
    language_driver        = fields.StructField('B')  # code page mark
    reserved2              = fields.StringField(2)

    @property
    def last_update(self):
        try:
            return datetime.date(
                1900 + self.last_update_year.value,
                self.last_update_month.value,
                self.last_update_day.value,
            )
        except ValueError:
            return None

    def backlink_size(self) -> int:
        return BACKLINK_SIZE if self.version.is_visual_foxpro() else 0

    def minimum_offset(self) -> int:
        '''Offset of the first record when there are no columns at all'''
        return HEADER_SIZE + len(TERMINATOR) + self.backlink_size()

    def num_fields(self) -> int:
        '''Number of descriptors on disk, derived from the offset of the first record.'''
        extent = self.offset_to_first_record.value - self.minimum_offset()
        n, remainder = divmod(extent, DESCRIPTOR_SIZE)

        if remainder:
            raise MalformedHeaderException(
                chain=[],
                msg=f'the descriptors take {extent} bytes, not a multiple of {DESCRIPTOR_SIZE}')

        return n

    def validate(self):
        offset = self.offset_to_first_record.value
        if offset < self.minimum_offset():
            raise MalformedHeaderException(
                chain=['offset_to_first_record'],
                msg=f'{offset} is smaller than the minimum of {self.minimum_offset()} bytes')

        if self.size_of_record.value == 0:
            raise MalformedHeaderException(chain=['size_of_record'], msg='records can\'t be empty')


class DBFFieldDescriptor(Chunk):
    '''Describes one column: the name is NUL padded, the length is in bytes.

    The fields after decimal_count are only meaningful for Visual FoxPro.'''
    field_name         = fields.StringField(11)
    type               = fields.StructField('c', enum=DBFFieldType, default=DBFFieldType.CHARACTER, compliant=Compliant.ENUM)
    displacement       = fields.StructField('I')
    length             = fields.StructField('B')
    decimal_count      = fields.StructField('B')
    flags              = fields.StructField('B')
    autoincrement_next = fields.StructField('I')
    autoincrement_step = fields.StructField('B')
    reserved           = fields.StringField(8)

    @classmethod
    def deletion_flag(cls):
        '''The first byte of each record, handled as a one byte wide character column.'''
        descriptor = cls()
        descriptor.field_name = DELETION_FLAG_NAME.encode('ascii')
        descriptor.type = DBFFieldType.CHARACTER
        descriptor.length = 1

        return descriptor

    def __str__(self):
        return '%s(%s, %d, %d)' % (
            self.column_name,
            self.type.value.value.decode('ascii'),
            self.width,
            self.decimal_count.value,
        )

    @property
    def column_name(self) -> str:
        return self.field_name.value.split(b'\x00', 1)[0].decode('latin1').strip()

    @property
    def width(self) -> int:
        '''Bytes taken by the column in each record.

        FoxPro and Clipper store character columns wider than 255 bytes
        with the high byte of the width in decimal_count.'''
        if self.type.value == DBFFieldType.CHARACTER:
            return self.length.value + 256 * self.decimal_count.value

        return self.length.value

    @property
    def is_deletion_flag(self) -> bool:
        # on disk names are at most 10 characters so there is no clash
        return self.column_name == DELETION_FLAG_NAME

    @property
    def is_nullable(self) -> bool:
        return bool(self.flags.value & DBFFieldFlags.NULLABLE)

    @property
    def is_binary(self) -> bool:
        return bool(self.flags.value & DBFFieldFlags.BINARY)

    @property
    def is_autoincrement(self) -> bool:
        return self.flags.value & DBFFieldFlags.AUTOINCREMENT == DBFFieldFlags.AUTOINCREMENT

    def validate(self):
        if not self.column_name:
            raise MalformedFieldDescriptorException(chain=['field_name'], msg='empty column name')

        if self.width == 0:
            raise MalformedFieldDescriptorException(
                chain=['length'],
                msg=f'column \'{self.column_name}\' has zero length')


class DBFPrologue(Chunk):
    '''Everything that comes before the first record.

    After unpacking, the stream is positioned at the first byte of the first record.'''
    header      = DBFHeader()
    descriptors = fields.ArrayField(DBFFieldDescriptor(), n=Dependency('.header.num_fields'))
    terminator  = fields.StructField('c', default=TERMINATOR, is_magic=True, compliant=Compliant.MAGIC)
    backlink    = fields.StringField(Dependency('.header.backlink_size'))

    def unpack(self, stream):
        try:
            super().unpack(stream)
        except MagicException as e:
            raise UnexpectedTerminatorException(chain=e.chain, msg=e.msg) from e
        except ChunkUnpackException as e:
            exc = MalformedHeaderException if e.chain[-1] == 'header' else MalformedFieldDescriptorException
            raise exc(chain=e.chain, msg=e.msg) from e

    def validate(self):
        record_size = 1 + sum(descriptor.width for descriptor in self.descriptors)
        if record_size != self.header.size_of_record.value:
            raise MalformedHeaderException(
                chain=['size_of_record', 'header'],
                msg=f'declared {self.header.size_of_record.value} bytes but the columns take {record_size}')

        counter = Counter(descriptor.column_name for descriptor in self.descriptors)
        for name, count in counter.items():
            if count > 1:
                self.logger.warning(f'column \'{name}\' is present {count} times, the last one wins')
