#!/usr/bin/env python3
import sys
import os
import logging

from dbstruct import Reader
from dbstruct.exceptions import DbstructException

if 'DEBUG' in os.environ:
    logging.basicConfig()
    logger = logging.getLogger('dbstruct')
    logger.setLevel(logging.DEBUG)


def usage(progname):
    print('usage: %s <dbf file>' % progname)
    sys.exit(1)


def dump_header(hdr):
    kind = hdr.version.kind
    print(f'''DBF Header:
  Version:                           0x{hdr.version.value:02x} ({kind.name if kind else "unknown"})
  Version number:                    {hdr.version.version_number}
  Memo:                              {hdr.version.has_memo}
  Last update:                       {hdr.last_update}
  Number of records:                 {hdr.num_records.value}
  Start of records:                  {hdr.offset_to_first_record.value} (bytes into file)
  Size of records:                   {hdr.size_of_record.value} (bytes)
  Incomplete transaction:            {hdr.incomplete_transaction.value}
  Encrypted:                         {hdr.encryption_flag.value}
  Production MDX:                    {hdr.has_mdx.value}
  Language driver:                   0x{hdr.language_driver.value:02x}''')


def dump_fields(fields_info):
    print('''Fields:
  [Nr] Name        Type       Off    Len  Dec Flg''')
    offset = 0
    for idx, field in enumerate(fields_info):
        print(f'''  [{idx: >2d}] {field.column_name:<12}{field.type.value.name:<10} {offset:>5} {field.width:>4} {field.decimal_count.value:>4} {field.flags.value:02x}''')
        offset += field.width


def dump_records(reader):
    print('Records:')
    for idx, record in enumerate(reader):
        print(f'  [{idx: >4d}] {record!r}')


if __name__ == '__main__':
    if len(sys.argv) < 2:
        usage(sys.argv[0])

    path = sys.argv[1]

    try:
        reader = Reader(path)

        dump_header(reader.header)
        dump_fields(reader.fields_info)
        dump_records(reader)
    except DbstructException as e:
        print(f'{path}: {e.__class__.__name__}: {e}', file=sys.stderr)
        sys.exit(2)
