from enum import Enum


class DBFVersion(Enum):
    '''Known values of the first byte of the file.'''
    FOXBASE                 = 0x02
    DBASE_III               = 0x03
    DBASE_IV                = 0x04
    DBASE_V                 = 0x05
    VISUAL_FOXPRO           = 0x30
    VISUAL_FOXPRO_AUTOINC   = 0x31
    VISUAL_FOXPRO_VARCHAR   = 0x32
    DBASE_IV_SQL_TABLE      = 0x43
    DBASE_IV_SQL_SYSTEM     = 0x63
    DBASE_III_MEMO          = 0x83
    DBASE_IV_MEMO           = 0x8b
    DBASE_IV_SQL_TABLE_MEMO = 0xcb
    FOXPRO_MEMO             = 0xf5
    FOXBASE_MEMO            = 0xfb


VISUAL_FOXPRO_VERSIONS = (
    DBFVersion.VISUAL_FOXPRO,
    DBFVersion.VISUAL_FOXPRO_AUTOINC,
    DBFVersion.VISUAL_FOXPRO_VARCHAR,
)


class DBFFieldType(Enum):
    '''The type tag of a column, as stored in its descriptor.

    The set is closed: an unknown tag makes the descriptor malformed.'''
    CHARACTER  = b'C'
    NUMERIC    = b'N'
    FLOAT      = b'F'
    DATE       = b'D'
    LOGICAL    = b'L'
    MEMO       = b'M'
    GENERAL    = b'G'
    PICTURE    = b'P'
    INTEGER    = b'I'
    DOUBLE     = b'B'
    CURRENCY   = b'Y'
    DATETIME   = b'T'
    VARCHAR    = b'V'
    VARBINARY  = b'Q'
    BLOB       = b'W'
    NULL_FLAGS = b'0'


class DBFFieldFlags:
    '''Bits of the Visual FoxPro field flags byte'''
    SYSTEM        = 0x01
    NULLABLE      = 0x02
    BINARY        = 0x04
    AUTOINCREMENT = 0x0c
