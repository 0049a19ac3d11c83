import datetime
import struct
from decimal import Decimal

import pytest

from dbstruct.dbf import DBFFieldDescriptor
from dbstruct.dbf.enum import DBFFieldType
from dbstruct.dbf.values import decode, DECODERS
from dbstruct.exceptions import InvalidFieldDataException, ShortReadException
from dbstruct.streams import Stream


def make_descriptor(type_, length, name='COLUMN'):
    descriptor = DBFFieldDescriptor()
    descriptor.field_name = name.encode('ascii')
    descriptor.type = type_
    descriptor.length = length

    return descriptor


def decode_bytes(type_, raw):
    return decode(Stream(raw), make_descriptor(type_, len(raw)))


def test_every_type_has_a_decoder():
    assert set(DECODERS.keys()) == set(DBFFieldType)


def test_character():
    assert decode_bytes(DBFFieldType.CHARACTER, b'hello     ') == 'hello'
    assert decode_bytes(DBFFieldType.CHARACTER, b'  padded\x00\x00') == '  padded'
    assert decode_bytes(DBFFieldType.CHARACTER, b'caf\xe9') == 'caf\xe9'
    assert decode_bytes(DBFFieldType.CHARACTER, b'    ') == ''


def test_numeric():
    assert decode_bytes(DBFFieldType.NUMERIC, b'  12.50') == 12.5
    assert decode_bytes(DBFFieldType.NUMERIC, b'     -3') == -3.0
    assert decode_bytes(DBFFieldType.FLOAT, b' 1.5e+03') == 1500.0
    assert decode_bytes(DBFFieldType.NUMERIC, b'       ') is None
    assert decode_bytes(DBFFieldType.NUMERIC, b'*******') is None

    with pytest.raises(InvalidFieldDataException):
        decode_bytes(DBFFieldType.NUMERIC, b'   12a')

    with pytest.raises(InvalidFieldDataException):
        decode_bytes(DBFFieldType.NUMERIC, b'    nan')


def test_invalid_data_consumes_the_column():
    stream = Stream(b'   1x2' + b'T')

    with pytest.raises(InvalidFieldDataException):
        decode(stream, make_descriptor(DBFFieldType.NUMERIC, 6))

    assert stream.tell() == 6
    assert decode(stream, make_descriptor(DBFFieldType.LOGICAL, 1)) is True


def test_date():
    assert decode_bytes(DBFFieldType.DATE, b'20241016') == datetime.date(2024, 10, 16)
    assert decode_bytes(DBFFieldType.DATE, b'        ') is None
    assert decode_bytes(DBFFieldType.DATE, b'00000000') is None

    with pytest.raises(InvalidFieldDataException):
        decode_bytes(DBFFieldType.DATE, b'20241345')

    with pytest.raises(InvalidFieldDataException):
        decode_bytes(DBFFieldType.DATE, b'2024abcd')


@pytest.mark.parametrize('raw,value', [
    (b'T', True),
    (b'y', True),
    (b'F', False),
    (b'n', False),
    (b'?', None),
    (b' ', None),
])
def test_logical(raw, value):
    assert decode_bytes(DBFFieldType.LOGICAL, raw) is value


def test_logical_invalid():
    with pytest.raises(InvalidFieldDataException):
        decode_bytes(DBFFieldType.LOGICAL, b'X')


def test_memo():
    assert decode_bytes(DBFFieldType.MEMO, b'        12') == 12
    assert decode_bytes(DBFFieldType.MEMO, b'          ') is None
    assert decode_bytes(DBFFieldType.MEMO, b'\x05\x00\x00\x00') == 5
    assert decode_bytes(DBFFieldType.GENERAL, b'\x00\x00\x00\x00') is None

    with pytest.raises(InvalidFieldDataException):
        decode_bytes(DBFFieldType.MEMO, b'     -1234')


def test_integer():
    assert decode_bytes(DBFFieldType.INTEGER, struct.pack('<i', -42)) == -42

    with pytest.raises(InvalidFieldDataException):
        decode_bytes(DBFFieldType.INTEGER, b'\x01\x02')


def test_double():
    assert decode_bytes(DBFFieldType.DOUBLE, struct.pack('<d', 3.5)) == 3.5
    # dBASE binary memo
    assert decode_bytes(DBFFieldType.DOUBLE, b'         7') == 7


def test_currency():
    value = decode_bytes(DBFFieldType.CURRENCY, struct.pack('<q', 123456))

    assert isinstance(value, Decimal)
    assert value == Decimal('12.3456')


def test_datetime():
    raw = struct.pack('<II', 2440588, 3600 * 1000 + 500)

    assert decode_bytes(DBFFieldType.DATETIME, raw) == datetime.datetime(1970, 1, 1, 1, 0, 0, 500000)
    assert decode_bytes(DBFFieldType.DATETIME, b'\x00' * 8) is None

    with pytest.raises(InvalidFieldDataException):
        decode_bytes(DBFFieldType.DATETIME, struct.pack('<II', 1, 0))


def test_null_flags():
    assert decode_bytes(DBFFieldType.NULL_FLAGS, b'\x03') == b'\x03'


def test_variable_length_types():
    assert decode_bytes(DBFFieldType.VARCHAR, b'abc\x00\x00\x03') == b'abc\x00\x00\x03'
    assert decode_bytes(DBFFieldType.VARBINARY, b'\xde\xad') == b'\xde\xad'
    assert decode_bytes(DBFFieldType.BLOB, b'\x09\x00\x00\x00') == 9


def test_wide_character():
    descriptor = make_descriptor(DBFFieldType.CHARACTER, 300 - 256)
    descriptor.decimal_count = 1
    stream = Stream(b'A' * 150 + b'B' * 150 + b'T')

    assert descriptor.width == 300
    assert decode(stream, descriptor) == 'A' * 150 + 'B' * 150
    assert stream.tell() == 300


def test_decimal_count_is_not_width():
    descriptor = make_descriptor(DBFFieldType.NUMERIC, 6)
    descriptor.decimal_count = 2

    assert descriptor.width == 6
    assert decode(Stream(b'  1.25'), descriptor) == 1.25


def test_short_column():
    with pytest.raises(ShortReadException):
        decode(Stream(b'abc'), make_descriptor(DBFFieldType.CHARACTER, 10))
