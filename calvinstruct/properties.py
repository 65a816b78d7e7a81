import logging
from enum import Enum, auto
from typing import List


class ChunkPhase(Enum):
    '''Enum to state the actual phase of a chunk'''
    INIT      = 0
    UNPACKING = auto()
    DONE      = auto()
    ERROR     = auto()


def get_root_from_chunk(instance):
    return get_instance_from_chunk(instance, condition=lambda x: x.father is None)


def get_instance_from_class_name(instance, name):
    return get_instance_from_chunk(instance, condition=lambda x: x.__class__.__name__ == name)


def get_instance_from_chunk(instance, condition):
    father = instance

    while not condition(father):
        father = father.father
        if father is None:
            raise AttributeError(f'no chunk satisfying the condition above {instance!r}')

    return father


def iter_fathers(instance):
    '''Yields the fathers of the instance, the nearest first.'''
    father = instance.father
    while father is not None:
        yield father
        father = father.father


class Dependency:
    '''This makes the relation between fields possible.

    We want that accessing this field the resolution is automagical.

    In practice this class allows to write something like

        class DataGroupHeader(Chunk):
            n_data_sets = fields.StructField('i')
            data_sets   = fields.ArrayField(DataSet(), n=Dependency('.n_data_sets'))

    and have the number of elements of 'data_sets' strictly connected to the
    field named 'n_data_sets'.

    The syntax for defining the expression is inspired from module resolution
    with an extra element via the first char of the expression:

     - '.' indicates we refer to a field at the same level
     - '@' indicates the the first component is the name of a class
     - otherwise the path starts from the root chunk
    '''
    def __init__(self, expression):
        self.expression = expression
        self.logger = logging.getLogger(__name__)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.expression})>'

    def _resolve_wrt_class(self, instance, fields_path: List[str]):
        class_name = fields_path[0][1:]
        self.logger.debug("resolve from class name: '%s'", class_name)
        field = get_instance_from_class_name(instance, class_name)

        return field, fields_path[1:]

    def resolve_field(self, instance):
        self.logger.debug("trying to resolve '%s' for %s", self.expression, instance.__class__.__name__)

        # '.n_rows'.split(".") -> ['', 'n_rows']
        # 'file_header.n_data_groups'.split(".") -> ['file_header', 'n_data_groups']
        fields_path = self.expression.split('.')

        if fields_path[0] == '':  # we have a relative dependency
            field = instance.father
            fields_path = fields_path[1:]
        elif fields_path[0].startswith('@'):
            field, fields_path = self._resolve_wrt_class(instance, fields_path)
        else:
            field = get_root_from_chunk(instance)

        if field is None:
            raise AttributeError(f"'{self.expression}' can't be resolved for a field without father")

        for component_name in fields_path:
            field = getattr(field, component_name)
            self.logger.debug(" resolved sub-component '%s' as %s", component_name, field.__class__.__name__)

        return field

    def resolve(self, instance):
        '''With this method we resolve the attribute with respect to the instance
        passed as argument.'''
        value = self.resolve_field(instance).value

        self.logger.debug(' resolved with value %r', value)

        return value


def resolve(instance, value):
    '''Returns the value itself unless it's a Dependency.'''
    return value.resolve(instance) if isinstance(value, Dependency) else value
