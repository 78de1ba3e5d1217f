"""
The kinds of data that expressions evaluate to.

Data is either *meta* data, which describes how to measure something (a unit
class, a unit, or an entity class), or *value* data, which is something
measured or recorded (a scalar, an entity, or a string). The two families are
closed: every consumer of data handles exactly the variants listed here.
"""

import abc
import enum
import types
import typing

from ackulator.core import errors
from ackulator.core import iterables
from ackulator.core import metric
from ackulator.core import scalar


class MetaData(abc.ABC):
    """Abstract base class for data that describes measurement."""


class ValueData(abc.ABC):
    """Abstract base class for measured or recorded data."""


class UnitClassData(typing.NamedTuple):
    """A compound dimension used as data."""

    composite: metric.CompositeUnitClass


class UnitData(typing.NamedTuple):
    """A compound unit used as data."""

    composite: metric.CompositeUnit


class EntityClassData(typing.NamedTuple):
    """An entity class used as data."""

    id: metric.EntityClassId


class String(typing.NamedTuple):
    """A text value."""

    text: str


class Entity(iterables.ReprStrMixin):
    """An immutable record of named properties and class tags."""

    __slots__ = ('_properties', '_classes')

    def __init__(
        self,
        properties: typing.Mapping[str, 'Data']=None,
        classes: typing.Iterable[metric.EntityClassId]=(),
    ) -> None:
        self._properties = types.MappingProxyType(dict(properties or {}))
        self._classes = frozenset(classes)

    @property
    def properties(self) -> typing.Mapping[str, 'Data']:
        """The named properties of this entity (read-only)."""
        return self._properties

    @property
    def classes(self) -> typing.FrozenSet[metric.EntityClassId]:
        """The entity classes this entity is tagged with."""
        return self._classes

    def __eq__(self, other) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return (
            self._classes == other._classes
            and dict(self._properties) == dict(other._properties)
        )

    __hash__ = None

    def __str__(self) -> str:
        tags = ', '.join(str(c) for c in sorted(self._classes))
        names = ', '.join(self._properties)
        return f"classes=[{tags}], properties=[{names}]"


for _meta in (UnitClassData, UnitData, EntityClassData):
    MetaData.register(_meta)
for _value in (scalar.Scalar, Entity, String):
    ValueData.register(_value)


Data = typing.Union[
    UnitClassData,
    UnitData,
    EntityClassData,
    scalar.Scalar,
    Entity,
    String,
]


class Ambiguity(enum.Enum):
    """Which namespace wins when a name is defined in more than one."""

    PREFER_VALUES = 'prefer_values'
    PREFER_META = 'prefer_meta'


class AmbiguousItem(typing.NamedTuple):
    """Every namespace's answer for a single name.

    Each namespace is independent, so a name may have a meta item, a value
    and a label all at once. The matching label alias is kept with the label
    data.
    """

    name: str
    as_meta: typing.Optional[Data] = None
    as_value: typing.Optional[Entity] = None
    as_label: typing.Optional[typing.Tuple[str, Data]] = None

    def resolve(self, ambiguity: Ambiguity=Ambiguity.PREFER_VALUES) -> Data:
        """Choose one answer according to `ambiguity`.

        A preference for meta items takes the meta answer if there is one.
        Otherwise the order is value, then meta, then label.

        Raises
        ------
        `~errors.UndefinedNameError`
            No namespace defines the name.
        """
        if ambiguity is Ambiguity.PREFER_META and self.as_meta is not None:
            return self.as_meta
        label = self.as_label[1] if self.as_label is not None else None
        for candidate in (self.as_value, self.as_meta, label):
            if candidate is not None:
                return candidate
        raise errors.UndefinedNameError(self.name)
