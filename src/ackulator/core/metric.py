import enum
import typing

import numpy

from ackulator.core import composite
from ackulator.core import storage

if typing.TYPE_CHECKING:
    from ackulator.core.instance import Instance


class UnitClass(typing.NamedTuple):
    """A physical dimension, such as length or time."""

    names: typing.Tuple[str, ...]


class EntityClass(typing.NamedTuple):
    """A class tag that entities may carry."""

    names: typing.Tuple[str, ...]


class CompositeUnitClass(composite.Composite):
    """A compound dimension: a product of powers of unit classes."""

    __slots__ = ()


class Unit(typing.NamedTuple):
    """A concrete unit of measure.

    Multiplying a value in this unit by `base_ratio` gives the value in the
    base unit of `unit_class`.
    """

    names: typing.Tuple[str, ...]
    unit_class: CompositeUnitClass
    symbol: str
    base_ratio: float = 1.0


class CompositeUnit(composite.Composite):
    """A compound unit: a product of powers of concrete units."""

    __slots__ = ()

    def base_ratio(self, instance: 'Instance') -> float:
        """The factor that converts a value in this unit to base units."""
        ratio = numpy.float64(1.0)
        with numpy.errstate(all='ignore'):
            for power, this in self:
                base = numpy.float64(instance.units[this].base_ratio)
                ratio *= base ** power
        return float(ratio)

    def unit_class(self, instance: 'Instance') -> CompositeUnitClass:
        """The dimension that this compound unit measures."""
        result = CompositeUnitClass.identity()
        for power, this in self:
            result = result.union(instance.units[this].unit_class ** power)
        return result


UnitClassId = storage.StorageId[UnitClass]
UnitId = storage.StorageId[Unit]
EntityClassId = storage.StorageId[EntityClass]


class Prefix(typing.NamedTuple):
    """Metadata for a metric order-of-magnitude prefix."""

    name: str
    symbol: str
    factor: float


PREFIXES = (
    Prefix('Yotta', 'Y', 1e+24),
    Prefix('Zetta', 'Z', 1e+21),
    Prefix('Exa', 'E', 1e+18),
    Prefix('Peta', 'P', 1e+15),
    Prefix('Tera', 'T', 1e+12),
    Prefix('Giga', 'G', 1e+9),
    Prefix('Mega', 'M', 1e+6),
    Prefix('Kilo', 'k', 1e+3),
    Prefix('Hecto', 'h', 1e+2),
    Prefix('Deka', 'da', 1e+1),
    Prefix('Deci', 'd', 1e-1),
    Prefix('Centi', 'c', 1e-2),
    Prefix('Milli', 'm', 1e-3),
    Prefix('Micro', 'μ', 1e-6),
    Prefix('Nano', 'n', 1e-9),
    Prefix('Pico', 'p', 1e-12),
    Prefix('Femto', 'f', 1e-15),
    Prefix('Atto', 'a', 1e-18),
    Prefix('Zepto', 'z', 1e-21),
    Prefix('Yocto', 'y', 1e-24),
)
"""The standard metric prefixes, from largest to smallest."""

SMALL_PREFIXES = PREFIXES[10:]
"""The prefixes that shrink a unit (deci and below)."""


class PrefixType(enum.Enum):
    """Which prefixed variants to generate when declaring a unit."""

    NONE = 'none'
    METRIC = 'metric'
    PARTIAL_METRIC = 'partial_metric'
    """Only the shrinking prefixes, for units like seconds: milliseconds are
    idiomatic but kiloseconds are not."""


def prefixes_for(prefix_type: PrefixType) -> typing.Tuple[Prefix, ...]:
    """The prefixes that `prefix_type` calls for."""
    if prefix_type is PrefixType.METRIC:
        return PREFIXES
    if prefix_type is PrefixType.PARTIAL_METRIC:
        return SMALL_PREFIXES
    return ()


def decapitalize(name: str) -> str:
    """Lower-case the first character of `name`."""
    return name[:1].lower() + name[1:]


def prefixed(unit: Unit, prefix: Prefix) -> Unit:
    """Create the variant of `unit` scaled by `prefix`.

    >>> meter = Unit(('Meter', 'Meters'), CompositeUnitClass(), 'm')
    >>> prefixed(meter, PREFIXES[7]).names
    ('Kilometer', 'Kilometers')
    """
    return Unit(
        names=tuple(f"{prefix.name}{decapitalize(n)}" for n in unit.names),
        unit_class=unit.unit_class,
        symbol=f"{prefix.symbol}{unit.symbol}",
        base_ratio=unit.base_ratio * prefix.factor,
    )


def variants(unit: Unit, prefix_type: PrefixType) -> typing.List[Unit]:
    """Create every prefixed variant of `unit` for `prefix_type`."""
    return [prefixed(unit, prefix) for prefix in prefixes_for(prefix_type)]
