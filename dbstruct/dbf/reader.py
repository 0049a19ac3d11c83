'''
Sequential reading of the records of a .dbf file.

The Reader is an iterator: each call to next() decodes exactly one record
from the stream, so nothing is kept in memory apart from the record
being built.

    reader = Reader('table.dbf')
    for record in reader:
        print(record['NAME'])
'''
import logging
from typing import Any, Dict, List

from ..streams import Stream
from ..exceptions import DbstructException
from . import DBFPrologue, DBFFieldDescriptor
from . import values


Record = Dict[str, Any]


class Reader(object):
    '''Owns the stream and the position in it.

    The header and the field descriptors are unpacked as soon as it's
    created; a malformed file makes the constructor fail.

    If next() raises, the stream is no longer aligned to a record and
    the reader must not be used anymore.
    '''

    def __init__(self, source):
        self.logger = logging.getLogger(f"{self.__module__}.{self.__class__.__name__}")
        self.stream = source if isinstance(source, Stream) else Stream(source)

        self.prologue = DBFPrologue()
        self.prologue.unpack(self.stream)

        self.fields_info: List[DBFFieldDescriptor] = [DBFFieldDescriptor.deletion_flag()]
        self.fields_info.extend(self.prologue.descriptors)

        self.current_record = 0

        self.logger.debug('%d records of %d bytes with columns %s' % (
            self.num_records,
            self.header.size_of_record.value,
            ', '.join(str(_) for _ in self.fields),
        ))

    def __repr__(self):
        return '<%s(%s, %d/%d)>' % (
            self.__class__.__name__,
            self.stream,
            self.current_record,
            self.num_records,
        )

    @property
    def header(self):
        return self.prologue.header

    @property
    def fields(self) -> List[DBFFieldDescriptor]:
        '''The descriptors of the columns, deletion flag excluded'''
        return self.fields_info[1:]

    @property
    def field_names(self) -> List[str]:
        return [_.column_name for _ in self.fields]

    @property
    def num_records(self) -> int:
        return self.header.num_records.value

    def __len__(self):
        return self.num_records

    def __iter__(self):
        return self

    def __next__(self) -> Record:
        if self.current_record >= self.num_records:
            raise StopIteration

        record: Record = {}
        for field_info in self.fields_info:
            try:
                value = values.decode(self.stream, field_info)
            except DbstructException as e:
                e.chain.extend([field_info.column_name, str(self.current_record)])
                raise

            if not field_info.is_deletion_flag:
                record[field_info.column_name] = value

        self.current_record += 1

        return record

    def read(self) -> List[Record]:
        '''Returns all the remaining records'''
        return [record for record in self]


def read(source) -> List[Record]:
    '''One liner to read the content of a .dbf file: source can be a path,
    some bytes or a file object.'''
    return Reader(source).read()
