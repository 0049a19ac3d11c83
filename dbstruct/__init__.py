"""
# dbstruct, dBASE tables for humans.

A file format is described declaratively as a Chunk, i.e. a class whose
attributes are the fields the binary data is made of, in the order they
appear: unpacking a Chunk means reading its fields one after the other
from a stream.

The dBASE (.dbf) format is built on top of this: the header and the
table of the field descriptors are Chunks, then the records are decoded
one at a time by a Reader

    import dbstruct

    for record in dbstruct.Reader('table.dbf'):
        print(record)

    records = dbstruct.read('table.dbf')

Every error raised while reading carries the path of the field that failed
(see dbstruct.exceptions).

"""
from .dbf.reader import Reader, Record, read
