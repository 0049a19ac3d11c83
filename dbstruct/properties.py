import logging
import inspect
from typing import List


def get_root_from_chunk(instance):
    return get_instance_from_chunk(instance, condition=lambda x: x.father is None)


def get_instance_from_chunk(instance, condition):
    is_root = condition(instance)
    father = instance

    while not is_root:
        father = instance.father

        is_root = condition(father)
        instance = father

    return father


class Dependency:
    '''This makes the relation between fields possible.

    In practice this class allows to write something like

        class Prologue(Chunk):
            header = Header()
            fields = fields.ArrayField(Descriptor(), n=Dependency('.header.num_fields'))

    and have the number of elements of the field named 'fields' resolved
    from the header when it's time to unpack.

    The syntax for defining the expression is inspired from module resolution:

     - a leading '.' indicates we refer to a field at the same level
     - otherwise the first component is resolved from the root chunk

    If the last component resolves to a method, it's called without arguments,
    otherwise the value of the field is used.
    '''
    def __init__(self, expression):
        self.expression = expression
        self.logger = logging.getLogger(__name__)
        self._hierarchy: List["Field"] = []

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.expression})>'

    def resolve_field(self, instance):
        self.logger.debug('trying to resolve \'%s\' using class \'%s\'' % (
            self.expression,
            instance.__class__.__name__,
        ))

        self._hierarchy = []

        # '.miao'.split(".") -> ['', 'miao']
        # 'miao'.split(".") -> ['miao']
        fields_path = self.expression.split('.')

        # find the root the resolution starts
        if fields_path[0] != '':
            field = get_root_from_chunk(instance)
            self.logger.debug(' resolve from root: \'%s\'' % field.__class__.__name__)
        else:  # we have a relative dependency
            field = instance.father
            self.logger.debug(' resolve from father: \'%s\'' % field.__class__.__name__)
            fields_path = fields_path[1:]  # skip the first one that is empty

        self._hierarchy.append(field)

        # now we can resolve each component
        for component_name in fields_path:
            field = getattr(field, component_name)
            self.logger.debug(' resolved sub-component "%s" from "%s"' % (
                field.__class__.__name__, component_name))
            self._hierarchy.append(field)

        return field

    def _do_resolve(self, instance):
        field = self._hierarchy[-1]

        if inspect.ismethod(field):
            value = field()
        else:
            value = field.value

        self.logger.debug(' resolved with value %s' % value)

        return value

    def resolve(self, instance):
        '''With this method we resolve the attribute with respect to the instance
        passed as argument.'''
        self.resolve_field(instance)

        return self._do_resolve(instance)
