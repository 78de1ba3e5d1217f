import math

import pytest

from ackulator.core import errors
from ackulator.core import metric
from ackulator.core import storage
from ackulator.core.scalar import (
    Exact,
    PercentError,
    Scalar,
    SigFigs,
    order_of_magnitude,
)


def length() -> metric.CompositeUnitClass:
    return metric.CompositeUnitClass.of(storage.StorageId(metric.UnitClass, 0))


def test_order_of_magnitude():
    assert order_of_magnitude(1.0) == 0
    assert order_of_magnitude(9.99) == 0
    assert order_of_magnitude(10.0) == 1
    assert order_of_magnitude(-0.05) == -2
    assert order_of_magnitude(0.0) == 0
    assert order_of_magnitude(math.inf) == 0
    assert order_of_magnitude(math.nan) == 0


def test_precision_percent_error():
    """Test the relative error each kind of precision implies."""
    assert Exact().percent_error(3.0) == 0.0
    assert PercentError(0.02).percent_error(3.0) == 0.02
    assert SigFigs(2).percent_error(2.0) == pytest.approx(0.05)
    assert SigFigs(3).percent_error(-250.0) == pytest.approx(0.004)


def test_invalid_sig_figs():
    with pytest.raises(ValueError):
        SigFigs(-1)
    with pytest.raises(ValueError):
        SigFigs(1.5)
    with pytest.raises(ValueError):
        Scalar(1.0, SigFigs(0))


@pytest.mark.algebra
def test_exact_passes_precision_through():
    """An exact operand never limits the precision of a result."""
    measured = Scalar(2.0, SigFigs(3))
    exact = Scalar(4.0)
    assert (measured * exact).precision == SigFigs(3)
    assert (exact + measured).precision == SigFigs(3)
    assert (exact * exact).precision == Exact()


@pytest.mark.algebra
def test_sig_fig_sums():
    """A sum is known to the coarser last significant digit."""
    total = Scalar(2.0, SigFigs(2)) + Scalar(0.15, SigFigs(2))
    assert total.value == pytest.approx(2.15)
    assert total.precision == SigFigs(2)
    total = Scalar(100.0, SigFigs(3)) + Scalar(5.0, SigFigs(1))
    assert total.precision == SigFigs(3)


@pytest.mark.algebra
def test_sig_fig_cancellation():
    """Cancelling leading digits can leave no significant figures."""
    difference = Scalar(1.0, SigFigs(2)) - Scalar(0.999, SigFigs(3))
    assert difference.value == pytest.approx(0.001)
    assert difference.precision == SigFigs(0)


@pytest.mark.algebra
def test_sig_fig_products():
    product = Scalar(2.0, SigFigs(2)) * Scalar(3.0, SigFigs(4))
    assert product.value == 6.0
    assert product.precision == SigFigs(2)


@pytest.mark.algebra
def test_percent_error_propagation():
    """Absolute ranges add for sums; relative errors add in quadrature for
    products."""
    total = Scalar(10.0, PercentError(0.01)) + Scalar(10.0, PercentError(0.03))
    assert total.precision.p == pytest.approx(0.02)
    product = Scalar(10.0, PercentError(0.03)) * Scalar(2.0, PercentError(0.04))
    assert product.precision.p == pytest.approx(0.05)
    mixed = Scalar(2.0, SigFigs(2)) * Scalar(2.0, PercentError(0.0))
    assert mixed.precision.p == pytest.approx(0.05)


@pytest.mark.algebra
def test_dimensions():
    """Sums need matching dimensions; products combine them."""
    distance = Scalar(3.0, unit=length())
    with pytest.raises(errors.DimensionMismatchError):
        distance + Scalar(1.0)
    area = distance * distance
    assert area.unit == length() ** 2
    assert (area / distance).unit == length()
    assert (distance - distance).value == 0.0


@pytest.mark.algebra
def test_ieee_division():
    """Division by zero follows floating-point rules."""
    assert (Scalar(1.0) / Scalar(0.0)).value == math.inf
    assert (Scalar(-1.0) / Scalar(0.0)).value == -math.inf
    assert math.isnan((Scalar(0.0) / Scalar(0.0)).value)


def test_negation():
    value = -Scalar(2.0, SigFigs(2), length())
    assert value.value == -2.0
    assert value.precision == SigFigs(2)
    assert value.unit == length()
