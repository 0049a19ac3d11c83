"""
Class level machinery: a Chunk subclass lists its fields as class attributes,
MetaChunk records their names in declaration order and replaces each of them
with a FieldAccessor so that every chunk instance works on its own copy.
"""
import copy
import logging


logger = logging.getLogger(__name__)


class FieldAccessor(object):
    """Data descriptor standing in the class for a declared field.

    The declared field is only a template: the first access from an instance
    creates a copy bound to that instance and caches it in its __dict__."""

    def __init__(self, template: "FieldBase", field_name: str):
        self.logger = logging.getLogger(f"{self.__module__}.{self.__class__.__name__}")
        self.template = template
        self.template.name = field_name

    @property
    def name(self) -> str:
        return self.template.name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self.template

        bound = instance.__dict__.get(self.name)

        if bound is None:
            self.logger.debug("binding field '%s' to %s", self.name, owner.__name__ if owner else instance.__class__.__name__)
            bound = self.template.create(father=instance)
            instance.__dict__[self.name] = bound

        return bound

    def __set__(self, instance, value):
        # a field of the same kind replaces the bound one
        if isinstance(value, self.template.__class__):
            value.father = instance
            value.name = self.name
            instance.__dict__[self.name] = value
        else:
            self.__get__(instance).value = value


class FieldBase(object):

    def contribute_to_chunk(self, cls, name):
        # redeclaring an inherited field keeps its position
        if name not in cls._meta.fields:
            cls._meta.fields.append(name)

        setattr(cls, name, FieldAccessor(self, name))

    def create(self, father):
        '''Return a copy of this template attached to father.'''
        instance = copy.deepcopy(self)
        instance.father = father
        return instance


class Meta(object):
    """Field names of a Chunk class, in unpacking order"""

    def __init__(self, fields=None):
        self.fields = list(fields or [])


class MetaChunk(type):

    def __new__(cls, name, bases, attrs):
        declared = {
            key: value for key, value in attrs.items()
            if isinstance(value, FieldBase)
        }
        plain = {
            key: value for key, value in attrs.items()
            if key not in declared
        }

        new_cls = super().__new__(cls, name, bases, plain)

        # fields of the parents come first, in the order they were declared
        inherited = []
        for parent in bases:
            for field_name in getattr(parent, '_meta', Meta()).fields:
                if field_name not in inherited:
                    inherited.append(field_name)

        new_cls._meta = Meta(inherited)

        for field_name, field in declared.items():
            logger.debug("field '%s' declared in %s", field_name, name)
            field.contribute_to_chunk(new_cls, field_name)

        return new_cls
