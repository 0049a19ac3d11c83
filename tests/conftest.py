import io
import struct

import pytest


VISUAL_FOXPRO_VERSIONS = (0x30, 0x31, 0x32)


class TrickleReader(io.RawIOBase):
    '''Raw source returning at most `step` bytes for each read, like a pipe or a socket.'''

    def __init__(self, data, step=7):
        self.data = data
        self.step = step
        self.position = 0

    def readable(self):
        return True

    def readinto(self, buffer):
        chunk = self.data[self.position:self.position + min(self.step, len(buffer))]
        buffer[:len(chunk)] = chunk
        self.position += len(chunk)
        return len(chunk)


def build_descriptor(name, type_, length, decimal_count=0, flags=0):
    return struct.pack(
        '<11scIBBBIB8s',
        name.encode('ascii'),
        type_.encode('ascii'),
        0,
        length,
        decimal_count,
        flags,
        0,
        0,
        b'\x00' * 8,
    )


def build_header(version, num_records, offset_to_first_record, size_of_record, last_update=(124, 10, 16)):
    return struct.pack(
        '<B3BIHH2sBB12sBB2s',
        version,
        *last_update,
        num_records,
        offset_to_first_record,
        size_of_record,
        b'\x00\x00',
        0,
        0,
        b'\x00' * 12,
        0,
        0,
        b'\x00\x00',
    )


def _build_dbf(columns, records, version=0x03, num_records=None, terminator=b'\r',
               offset_to_first_record=None, size_of_record=None, descriptors=None):
    '''Build the image of a .dbf file.

    columns is a list of tuples (name, type, length[, decimal_count[, flags]]),
    records a list of the raw bytes of each record, deletion flag included.'''
    if descriptors is None:
        descriptors = b''.join(build_descriptor(*column) for column in columns)
    backlink = b'\x00' * 263 if version in VISUAL_FOXPRO_VERSIONS else b''

    if num_records is None:
        num_records = len(records)
    if offset_to_first_record is None:
        offset_to_first_record = 32 + len(descriptors) + 1 + len(backlink)
    if size_of_record is None:
        size_of_record = 1 + sum(column[2] for column in columns)

    header = build_header(version, num_records, offset_to_first_record, size_of_record)

    return header + descriptors + terminator + backlink + b''.join(records) + b'\x1a'


@pytest.fixture
def build_dbf():
    return _build_dbf


@pytest.fixture
def people_dbf(build_dbf):
    columns = [
        ('NAME', 'C', 10),
        ('AGE', 'N', 3),
        ('BORN', 'D', 8),
        ('ACTIVE', 'L', 1),
    ]
    records = [
        b' ' + b'Alice     ' + b' 42' + b'19820304' + b'T',
        b'*' + b'Bob       ' + b'   ' + b'        ' + b'?',
        b' ' + b'Carol     ' + b'  7' + b'20171231' + b'n',
    ]
    return build_dbf(columns, records)
