import random

import pytest

from ackulator.core import metric
from ackulator.core import storage
from ackulator.core.metric import CompositeUnit, CompositeUnitClass


def unit_id(index: int) -> storage.StorageId:
    return storage.StorageId(metric.Unit, index)


def class_id(index: int) -> storage.StorageId:
    return storage.StorageId(metric.UnitClass, index)


@pytest.mark.algebra
def test_normalization():
    """Factors are sorted, merged and stripped of zero powers."""
    a, b, c = (unit_id(i) for i in range(3))
    this = CompositeUnit([(1, c), (2, a), (-1, b), (1, b)])
    assert this.factors == ((2.0, a), (1.0, c))
    assert this.get(a) == 2.0
    assert this.get(b) == 0.0
    assert CompositeUnit([(1, a), (-1, a)]).is_identity()


@pytest.mark.algebra
def test_products_and_ratios():
    a, b = unit_id(0), unit_id(1)
    m = CompositeUnit.of(a)
    s = CompositeUnit.of(b)
    velocity = m / s
    assert velocity.factors == ((1.0, a), (-1.0, b))
    acceleration = velocity / s
    assert acceleration.get(b) == -2.0
    assert (acceleration * s * s) == m
    assert (m / m).is_identity()
    assert not (m / m)


@pytest.mark.algebra
def test_powers():
    """Any real power is allowed."""
    a = unit_id(0)
    m = CompositeUnit.of(a)
    assert (m ** 2).get(a) == 2.0
    assert (m ** 0.5).get(a) == 0.5
    assert (m ** 0).is_identity()
    assert ((m ** 0.5) ** 2) == m


@pytest.mark.algebra
def test_cancellation_threshold():
    """Powers that nearly cancel are treated as cancelled."""
    a = unit_id(0)
    m = CompositeUnit.of(a)
    assert ((m ** 0.1) * (m ** 0.2) / (m ** 0.3)).is_identity()


@pytest.mark.algebra
def test_equality():
    a = unit_id(0)
    assert CompositeUnit.of(a) == CompositeUnit([(1, a)])
    assert hash(CompositeUnit.of(a)) == hash(CompositeUnit([(1, a)]))
    assert CompositeUnit.identity() == CompositeUnit()
    assert CompositeUnit.of(a) != CompositeUnit.of(unit_id(1))
    assert CompositeUnitClass.identity() != CompositeUnit.identity()


@pytest.mark.algebra
def test_kinds_do_not_mix():
    with pytest.raises(TypeError):
        CompositeUnit.of(unit_id(0)) * CompositeUnitClass.of(class_id(0))


def random_composite(rng: random.Random) -> CompositeUnit:
    """A composite built from a random multiset of factors."""
    factors = [
        (rng.randint(-3, 3), unit_id(rng.randrange(6)))
        for _ in range(rng.randrange(8))
    ]
    return CompositeUnit(factors)


@pytest.mark.algebra
def test_union_properties():
    """Union commutes and adds the powers of each identifier."""
    rng = random.Random(20261019)
    for _ in range(200):
        x = random_composite(rng)
        y = random_composite(rng)
        assert x.union(y) == y.union(x)
        assert x.union(y).factors == y.union(x).factors
        combined = x.union(y)
        for index in range(6):
            this = unit_id(index)
            assert combined.get(this) == pytest.approx(x.get(this) + y.get(this))


@pytest.mark.algebra
@pytest.mark.parametrize('n', [2, 3, -1, -2, 0.5, 2.5, -0.25, 1e-3])
def test_power_round_trip(n):
    """Raising to a power and then to its reciprocal restores a composite."""
    a, b, c = (unit_id(i) for i in range(3))
    this = CompositeUnit([(1, a), (-2, b), (0.5, c)])
    assert (this ** n) ** (1 / n) == this
