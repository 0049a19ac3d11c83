"""
Strictness levels a field can be unpacked with.

A field declared with Compliant.INHERIT (the default) takes the level of the
chunk containing it, walking up until a chunk without INHERIT is found.
"""
from enum import Flag


class Compliant(Flag):
    '''Which deviations from the format turn into exceptions'''
    NONE    = 0
    # a value outside of the field's enum
    ENUM    = 1 << 0
    # a magic field not matching its default
    MAGIC   = 1 << 1
    # ask the father
    INHERIT = 1 << 2
