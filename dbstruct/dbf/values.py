'''
Decoding of the bytes of a single column into a python value.

The decoder to use is chosen from the type tag of the descriptor; the bytes
are always consumed before being interpreted so that a failure leaves the
stream aligned to the next column.
'''
import re
import struct
import logging
import datetime
from decimal import Decimal

from ..exceptions import InvalidFieldDataException
from .enum import DBFFieldType


logger = logging.getLogger(__name__)

# julian day number of 0001-01-01 minus one
JULIAN_DAY_ORDINAL_OFFSET = 1721425

NUMBER_RE = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')
DATE_RE = re.compile(r'^\d{8}$')

TRUE_VALUES = (b'T', b't', b'Y', b'y')
FALSE_VALUES = (b'F', b'f', b'N', b'n')
UNKNOWN_VALUES = (b'?', b' ', b'\x00')


def _invalid(raw, reason):
    return InvalidFieldDataException(chain=[], msg=f'{raw!r} {reason}')


def _text(raw):
    '''ASCII content with blanks and NULs around removed'''
    try:
        return raw.strip(b' \x00').decode('ascii')
    except UnicodeDecodeError:
        raise _invalid(raw, 'is not ASCII') from None


def decode_character(raw, descriptor):
    # bytes are mapped one to one, no code page is applied
    return raw.decode('latin1').rstrip(' \x00')


def decode_numeric(raw, descriptor):
    text = _text(raw)

    # overflowing values are filled with stars
    if not text or not text.strip('*'):
        return None

    if not NUMBER_RE.match(text):
        raise _invalid(raw, 'is not a number')

    return float(text)


def decode_date(raw, descriptor):
    text = _text(raw)

    if not text or text == '00000000':
        return None

    if not DATE_RE.match(text):
        raise _invalid(raw, 'is not a date in the YYYYMMDD format')

    try:
        return datetime.date(int(text[:4]), int(text[4:6]), int(text[6:]))
    except ValueError as e:
        raise _invalid(raw, f'is not a valid date ({e})')


def decode_logical(raw, descriptor):
    flag = raw[:1]

    if flag in TRUE_VALUES:
        return True
    if flag in FALSE_VALUES:
        return False
    if flag in UNKNOWN_VALUES:
        return None

    raise _invalid(raw, 'is not a logical value')


def decode_memo(raw, descriptor):
    '''Returns the index of the block in the memo file.

    dBASE stores it as ten ASCII digits, Visual FoxPro as a 32 bit integer.'''
    if len(raw) == 4:
        index, = struct.unpack('<I', raw)
        return index or None

    text = _text(raw)
    if not text:
        return None

    if not text.isdigit():
        raise _invalid(raw, 'is not a memo block index')

    return int(text)


def decode_integer(raw, descriptor):
    if len(raw) != 4:
        raise _invalid(raw, 'is not a 32 bit integer')

    value, = struct.unpack('<i', raw)
    return value


def decode_double(raw, descriptor):
    # dBASE uses 'B' for binary memos, Visual FoxPro for doubles
    if len(raw) != 8:
        return decode_memo(raw, descriptor)

    value, = struct.unpack('<d', raw)
    return value


def decode_currency(raw, descriptor):
    if len(raw) != 8:
        raise _invalid(raw, 'is not a currency value')

    value, = struct.unpack('<q', raw)
    return Decimal(value).scaleb(-4)


def decode_datetime(raw, descriptor):
    if len(raw) != 8:
        raise _invalid(raw, 'is not a datetime')

    day, milliseconds = struct.unpack('<II', raw)
    if day == 0 and milliseconds == 0:
        return None

    try:
        date = datetime.date.fromordinal(day - JULIAN_DAY_ORDINAL_OFFSET)
        return datetime.datetime.combine(date, datetime.time()) + datetime.timedelta(milliseconds=milliseconds)
    except (ValueError, OverflowError) as e:
        raise _invalid(raw, f'has an invalid julian day ({e})')


def decode_raw(raw, descriptor):
    # the real size of varchar/varbinary values is in the _NullFlags column
    return raw


DECODERS = {
    DBFFieldType.CHARACTER:  decode_character,
    DBFFieldType.NUMERIC:    decode_numeric,
    DBFFieldType.FLOAT:      decode_numeric,
    DBFFieldType.DATE:       decode_date,
    DBFFieldType.LOGICAL:    decode_logical,
    DBFFieldType.MEMO:       decode_memo,
    DBFFieldType.GENERAL:    decode_memo,
    DBFFieldType.PICTURE:    decode_memo,
    DBFFieldType.INTEGER:    decode_integer,
    DBFFieldType.DOUBLE:     decode_double,
    DBFFieldType.CURRENCY:   decode_currency,
    DBFFieldType.DATETIME:   decode_datetime,
    DBFFieldType.VARCHAR:    decode_raw,
    DBFFieldType.VARBINARY:  decode_raw,
    DBFFieldType.BLOB:       decode_memo,
    DBFFieldType.NULL_FLAGS: decode_raw,
}


def decode(stream, descriptor):
    '''Read the column described by descriptor from the stream and
    return its value.'''
    raw = stream.read_exactly(descriptor.width)

    decoder = DECODERS[descriptor.type.value]
    logger.debug('decoding %r with %s' % (raw, decoder.__name__))

    return decoder(raw, descriptor)
