"""
Dimensioned numbers that track their own numerical precision.

A scalar stores its value in base units, together with the dimension it
measures, the unit in which to display it, and how precisely it is known.
Arithmetic on scalars propagates precision with the usual rules of thumb:
significant figures for sums and products of measured values, and relative
(percent) error otherwise.

Floating-point arithmetic follows IEEE-754: dividing by zero produces an
infinity or NaN rather than raising an exception.
"""

import dataclasses
import math
import numbers
import typing

import numpy

from ackulator.core import errors
from ackulator.core import iterables
from ackulator.core import metric

if typing.TYPE_CHECKING:
    from ackulator.core.instance import Instance


def order_of_magnitude(value: float) -> int:
    """The power of ten of the leading digit of `value`.

    Zero and non-finite values have no leading digit; they count as order 0.
    """
    if value == 0 or not math.isfinite(value):
        return 0
    return math.floor(math.log10(abs(value)))


@dataclasses.dataclass(frozen=True)
class Exact:
    """A value known without uncertainty, such as a defined constant."""

    def percent_error(self, for_value: float) -> float:
        return 0.0


@dataclasses.dataclass(frozen=True)
class SigFigs:
    """A value known to a number of significant figures."""

    n: int

    def __post_init__(self) -> None:
        if not isinstance(self.n, numbers.Integral) or self.n < 0:
            raise ValueError(
                f"Significant figures must be a non-negative integer,"
                f" not {self.n!r}"
            ) from None

    def percent_error(self, for_value: float) -> float:
        """The relative size of one unit in the last significant place."""
        exponent = order_of_magnitude(for_value) + 1 - self.n
        with numpy.errstate(all='ignore'):
            ratio = numpy.float64(10.0) ** exponent / abs(for_value)
        return float(ratio)


@dataclasses.dataclass(frozen=True)
class PercentError:
    """A value known to within a fraction of itself (0.01 means 1%)."""

    p: float

    def percent_error(self, for_value: float) -> float:
        return self.p


Precision = typing.Union[Exact, SigFigs, PercentError]


class Scalar(iterables.ReprStrMixin):
    """A number with a dimension, a display unit and a precision."""

    __slots__ = ('value', 'precision', 'unit', 'display_unit')

    def __init__(
        self,
        value: float,
        precision: Precision=Exact(),
        unit: metric.CompositeUnitClass=None,
        display_unit: metric.CompositeUnit=None,
    ) -> None:
        """
        Parameters
        ----------
        value : float
            The magnitude, in the base units of `unit`.

        precision : `Exact`, `SigFigs` or `PercentError`, default=Exact()
            How precisely `value` is known. A measured value must have at
            least one significant figure.

        unit : `~metric.CompositeUnitClass`, optional
            The dimension of this scalar. The default is dimensionless.

        display_unit : `~metric.CompositeUnit`, optional
            The unit to show this scalar in. The caller is responsible for
            making its dimension match `unit`. The default is unitless.
        """
        if isinstance(precision, SigFigs) and precision.n < 1:
            raise ValueError(
                "A measured value needs at least one significant figure"
            ) from None
        self._set(
            value,
            precision,
            unit or metric.CompositeUnitClass.identity(),
            display_unit or metric.CompositeUnit.identity(),
        )

    def _set(self, value, precision, unit, display_unit) -> None:
        self.value = float(value)
        self.precision = precision
        self.unit = unit
        self.display_unit = display_unit

    @classmethod
    def _derived(cls, value, precision, unit, display_unit) -> 'Scalar':
        """Build an arithmetic result without validating its precision."""
        new = cls.__new__(cls)
        new._set(value, precision, unit, display_unit)
        return new

    @classmethod
    def from_unit(
        cls,
        unit: metric.CompositeUnit,
        instance: 'Instance',
    ) -> 'Scalar':
        """Create the exact scalar equal to one of `unit`."""
        return cls(
            unit.base_ratio(instance),
            Exact(),
            unit.unit_class(instance),
            unit,
        )

    def display_value(self, instance: 'Instance') -> float:
        """The magnitude of this scalar in its display unit."""
        with numpy.errstate(all='ignore'):
            ratio = self.display_unit.base_ratio(instance)
            return float(numpy.float64(self.value) / ratio)

    def with_display_unit(
        self,
        display_unit: metric.CompositeUnit,
        instance: 'Instance',
    ) -> 'Scalar':
        """Create a copy of this scalar shown in a different unit."""
        if display_unit.unit_class(instance) != self.unit:
            raise errors.DimensionMismatchError(
                "The new display unit measures a different dimension"
            ) from None
        return self._derived(
            self.value,
            self.precision,
            self.unit,
            display_unit,
        )

    def add(self, other: 'Scalar') -> 'Scalar':
        """Add two scalars of the same dimension."""
        if self.unit != other.unit:
            raise errors.DimensionMismatchError(
                "Can't add or subtract values of different dimensions"
            ) from None
        with numpy.errstate(all='ignore'):
            value = float(numpy.float64(self.value) + other.value)
        precision = _additive_precision(
            (self.value, self.precision),
            (other.value, other.precision),
            value,
        )
        return self._derived(value, precision, self.unit, self.display_unit)

    def sub(self, other: 'Scalar') -> 'Scalar':
        """Subtract a scalar of the same dimension."""
        return self.add(-other)

    def mul(self, other: 'Scalar') -> 'Scalar':
        """Multiply two scalars, combining their dimensions."""
        with numpy.errstate(all='ignore'):
            value = float(numpy.float64(self.value) * other.value)
        return self._derived(
            value,
            _multiplicative_precision(
                (self.value, self.precision),
                (other.value, other.precision),
            ),
            self.unit * other.unit,
            self.display_unit * other.display_unit,
        )

    def div(self, other: 'Scalar') -> 'Scalar':
        """Divide two scalars, combining their dimensions."""
        with numpy.errstate(all='ignore'):
            value = float(numpy.float64(self.value) / other.value)
        return self._derived(
            value,
            _multiplicative_precision(
                (self.value, self.precision),
                (other.value, other.precision),
            ),
            self.unit / other.unit,
            self.display_unit / other.display_unit,
        )

    def pow(self, exponent: 'Scalar', instance: 'Instance') -> 'Scalar':
        """Raise this scalar to the display value of `exponent`.

        The dimension and display unit are raised to the same power, which
        need not be an integer.
        """
        power = exponent.display_value(instance)
        with numpy.errstate(all='ignore'):
            value = float(numpy.float64(self.value) ** power)
        return self._derived(
            value,
            self.precision,
            self.unit ** power,
            self.display_unit ** power,
        )

    def __neg__(self) -> 'Scalar':
        """Called for -self."""
        return self._derived(
            -self.value,
            self.precision,
            self.unit,
            self.display_unit,
        )

    def __add__(self, other):
        """Called for self + other."""
        if not isinstance(other, Scalar):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        """Called for self - other."""
        if not isinstance(other, Scalar):
            return NotImplemented
        return self.sub(other)

    def __mul__(self, other):
        """Called for self * other."""
        if not isinstance(other, Scalar):
            return NotImplemented
        return self.mul(other)

    def __truediv__(self, other):
        """Called for self / other."""
        if not isinstance(other, Scalar):
            return NotImplemented
        return self.div(other)

    def __str__(self) -> str:
        return f"{self.value}, {self.precision}, {self.unit}"


Operand = typing.Tuple[float, Precision]


def _additive_precision(lhs: Operand, rhs: Operand, new_value: float):
    """Compute the precision of a sum."""
    (lvalue, lprec), (rvalue, rprec) = lhs, rhs
    if isinstance(lprec, Exact):
        return rprec
    if isinstance(rprec, Exact):
        return lprec
    if isinstance(lprec, SigFigs) and isinstance(rprec, SigFigs):
        last_digit = max(
            order_of_magnitude(lvalue) - lprec.n,
            order_of_magnitude(rvalue) - rprec.n,
        )
        return SigFigs(max(0, order_of_magnitude(new_value) - last_digit))
    with numpy.errstate(all='ignore'):
        ranges = (
            abs(numpy.float64(lvalue) * lprec.percent_error(lvalue))
            + abs(numpy.float64(rvalue) * rprec.percent_error(rvalue))
        )
        return PercentError(float(ranges / abs(numpy.float64(new_value))))


def _multiplicative_precision(lhs: Operand, rhs: Operand):
    """Compute the precision of a product or ratio."""
    (lvalue, lprec), (rvalue, rprec) = lhs, rhs
    if isinstance(lprec, Exact):
        return rprec
    if isinstance(rprec, Exact):
        return lprec
    if isinstance(lprec, SigFigs) and isinstance(rprec, SigFigs):
        return SigFigs(min(lprec.n, rprec.n))
    p = lprec.percent_error(lvalue)
    q = rprec.percent_error(rvalue)
    return PercentError(float(numpy.hypot(p, q)))
