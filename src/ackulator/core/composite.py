import bisect
import numbers
import typing

from ackulator.core import iterables
from ackulator.core import storage


EPSILON = 1e-10
"""Powers smaller than this in magnitude count as cancelled."""


Factor = typing.Tuple[float, storage.StorageId]


Self = typing.TypeVar('Self', bound='Composite')


class Composite(iterables.ReprStrMixin):
    """A product of identifiers, each raised to a real power.

    A composite represents a compound unit (for example, meters per second
    squared) or a compound dimension (length per time squared) as a multiset
    of identifiers with signed powers. Factors are kept sorted by identifier,
    no identifier appears twice, and any power within `EPSILON` of zero is
    dropped. The empty composite is the identity: unitless, or dimensionless.

    Two composites are equal when they describe the same dimension, that is,
    when their ratio is the identity. Composites of different subclasses never
    combine or compare equal.
    """

    __slots__ = ('_factors',)

    def __init__(self, factors: typing.Iterable[Factor]=()) -> None:
        """Create a composite from (power, identifier) pairs.

        The pairs may appear in any order and may repeat an identifier, in
        which case their powers add.
        """
        normalized = type(self)._from_sorted(())
        for power, this in sorted(factors, key=lambda f: f[1]):
            single = type(self)._from_sorted(((float(power), this),))
            normalized = normalized.union(single)
        self._factors = normalized._factors

    @classmethod
    def _from_sorted(cls: typing.Type[Self], factors: typing.Iterable[Factor]):
        """Wrap factors that already satisfy the ordering invariant."""
        new = cls.__new__(cls)
        new._factors = tuple(factors)
        return new

    @classmethod
    def of(cls: typing.Type[Self], __id: storage.StorageId) -> Self:
        """Create a composite of a single identifier with power 1."""
        return cls._from_sorted(((1.0, __id),))

    @classmethod
    def identity(cls: typing.Type[Self]) -> Self:
        """Create the empty composite."""
        return cls._from_sorted(())

    def is_identity(self) -> bool:
        """True if this composite has no factors."""
        return not self._factors

    @property
    def factors(self) -> typing.Tuple[Factor, ...]:
        """The (power, identifier) pairs, sorted by identifier."""
        return self._factors

    def ids(self) -> typing.Tuple[storage.StorageId, ...]:
        """The identifiers in this composite, in sorted order."""
        return tuple(this for _, this in self._factors)

    def get(self, __id: storage.StorageId) -> float:
        """The power of `__id` in this composite, or 0 if it is absent."""
        index = bisect.bisect_left(self._factors, __id, key=lambda f: f[1])
        if index < len(self._factors) and self._factors[index][1] == __id:
            return self._factors[index][0]
        return 0.0

    def union(self: Self, other: Self) -> Self:
        """Combine the factors of two composites, adding shared powers.

        This is a single merge of two sorted factor lists, so the result is
        already in order and simplified.
        """
        self._check_type(other)
        lhs, rhs = self._factors, other._factors
        merged = []
        i = j = 0
        while i < len(lhs) and j < len(rhs):
            (lpow, lid), (rpow, rid) = lhs[i], rhs[j]
            if lid == rid:
                _append(merged, lpow + rpow, lid)
                i += 1
                j += 1
            elif lid < rid:
                merged.append(lhs[i])
                i += 1
            else:
                merged.append(rhs[j])
                j += 1
        merged.extend(lhs[i:])
        merged.extend(rhs[j:])
        return self._from_sorted(merged)

    def scaled(self: Self, scalar: numbers.Real) -> Self:
        """Multiply every power by `scalar`.

        Scaling by zero produces the identity.
        """
        factors = []
        for power, this in self._factors:
            _append(factors, power * float(scalar), this)
        return self._from_sorted(factors)

    def _check_type(self, other) -> None:
        if type(other) is not type(self):
            raise TypeError(
                f"Can't combine {type(self).__name__}"
                f" with {type(other).__name__}"
            ) from None

    def __mul__(self: Self, other: Self) -> Self:
        """Called for self * other."""
        if not isinstance(other, Composite):
            return NotImplemented
        return self.union(other)

    def __truediv__(self: Self, other: Self) -> Self:
        """Called for self / other."""
        if not isinstance(other, Composite):
            return NotImplemented
        return self.union(other.scaled(-1.0))

    def __pow__(self: Self, exponent: numbers.Real) -> Self:
        """Called for self ** exponent.

        Any real exponent is allowed, so powers need not be integers.
        """
        if not isinstance(exponent, numbers.Real):
            return NotImplemented
        return self.scaled(exponent)

    def __eq__(self, other) -> bool:
        """True if the two composites cancel each other exactly."""
        if not isinstance(other, Composite):
            return NotImplemented
        if type(other) is not type(self):
            return False
        return (self / other).is_identity()

    def __hash__(self) -> int:
        # Equal composites always contain the same identifiers.
        return hash((type(self), self.ids()))

    def __iter__(self) -> typing.Iterator[Factor]:
        return iter(self._factors)

    def __len__(self) -> int:
        return len(self._factors)

    def __str__(self) -> str:
        if not self._factors:
            return '1'
        return ' '.join(
            f"{this.index}" if power == 1 else f"{this.index}^{power:g}"
            for power, this in self._factors
        )


def _append(factors: typing.List[Factor], power: float, this) -> None:
    """Add a factor unless its power has cancelled out."""
    if abs(power) >= EPSILON:
        factors.append((power, this))
