"""
Human-readable descriptions of data.
"""

import typing

from ackulator.core import composite
from ackulator.core import data
from ackulator.core import scalar

if typing.TYPE_CHECKING:
    from ackulator.core.instance import Instance


def describe(value: data.Data, instance: 'Instance') -> str:
    """Describe `value` in terms of the names and symbols in `instance`.

    A scalar shows its value in its display unit, followed by its
    precision, so that three meters per second reads as `3.0 m/s`.
    """
    if isinstance(value, scalar.Scalar):
        return _scalar(value, instance)
    if isinstance(value, data.UnitData):
        return _composite(value.composite, lambda i: instance.units[i].symbol)
    if isinstance(value, data.UnitClassData):
        return _composite(value.composite, instance.name_of)
    if isinstance(value, data.EntityClassData):
        return instance.name_of(value.id)
    if isinstance(value, data.Entity):
        return _entity(value, instance)
    if isinstance(value, data.String):
        return f'"{value.text}"'
    raise TypeError(f"Can't describe {value!r}") from None


def _scalar(value: scalar.Scalar, instance: 'Instance') -> str:
    number = value.display_value(instance)
    precision = value.precision
    if isinstance(precision, scalar.SigFigs):
        parts = [f"{number:#.{precision.n}g}"]
    else:
        parts = [repr(number)]
    if not value.display_unit.is_identity():
        parts.append(
            _composite(value.display_unit, lambda i: instance.units[i].symbol)
        )
    if isinstance(precision, scalar.SigFigs):
        parts.append(f"({precision.n} s.f.)")
    elif isinstance(precision, scalar.PercentError):
        parts.append(f"±{precision.p * 100:g}%")
    return ' '.join(parts)


def _composite(
    this: composite.Composite,
    name: typing.Callable[[typing.Any], str],
) -> str:
    """Write a composite as numerator terms over denominator terms."""
    if this.is_identity():
        return '1'
    above = [_term(name(i), p) for p, i in this if p > 0]
    below = [_term(name(i), -p) for p, i in this if p < 0]
    numerator = ' '.join(above) or '1'
    if not below:
        return numerator
    return f"{numerator}/{' '.join(below)}"


def _term(name: str, power: float) -> str:
    if power == 1:
        return name
    return f"{name}^{power:g}"


def _entity(value: data.Entity, instance: 'Instance') -> str:
    tags = [instance.name_of(c) for c in sorted(value.classes)]
    properties = [
        f"{key}: {describe(item, instance)}"
        for key, item in value.properties.items()
    ]
    return '{' + ', '.join(tags + properties) + '}'
