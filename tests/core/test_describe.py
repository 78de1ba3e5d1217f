import pytest

from ackulator.core import data
from ackulator.core import describe
from ackulator.core import instance
from ackulator.core import scalar


def described(session: instance.Instance, text: str) -> str:
    """Evaluate `text` and describe the result."""
    result, = session.execute(f"show {text}")
    return describe.describe(result, session)


@pytest.mark.parametrize(
    'text, expected',
    [
        ('2 * Feet', '2.0 ft'),
        ('1 * Kilometers + 500 * Meters', '1.5 km'),
        ('3 * Meters / Seconds', '3.0 m/s'),
        ('1 / Seconds', '1.0 1/s'),
        ('Pi', '3.141592653589793'),
        ('Meters / Seconds / Seconds', 'm/s^2'),
        ('Meters / Meters', '1'),
        ('Acceleration', 'Length/Time^2'),
        ('Length * Mass', 'Length Mass'),
        ('metric', 'metric'),
        ('"hello"', '"hello"'),
    ],
)
def test_describe(standard: instance.Instance, text: str, expected: str):
    """Test descriptions of each kind of data."""
    assert described(standard, text) == expected


def test_describe_precision(standard: instance.Instance):
    """Measured values show their precision after their unit."""
    meters = standard.meta_items['Meters'].composite
    one_meter = scalar.Scalar.from_unit(meters, standard)
    sig_figs = scalar.Scalar(2.0, scalar.SigFigs(3)) * one_meter
    assert describe.describe(sig_figs, standard) == '2.00 m (3 s.f.)'
    percent = scalar.Scalar(2.0, scalar.PercentError(0.05))
    assert describe.describe(percent, standard) == '2.0 ±5%'


def test_describe_entity(standard: instance.Instance):
    standard.execute(
        """
        make entity_class called planet
        make value called Mars { planet, name: "Mars", moons: 2 }
        """
    )
    mars = standard.values['Mars']
    expected = '{planet, name: "Mars", moons: 2.0}'
    assert describe.describe(mars, standard) == expected


def test_describe_unknown(standard: instance.Instance):
    with pytest.raises(TypeError):
        describe.describe(object(), standard)


def test_default_show_logs(caplog):
    """Without a callback, show statements log their descriptions."""
    session = instance.Instance()
    with caplog.at_level('INFO', logger='ackulator.core.instance'):
        session.execute('show "logged"')
    assert '"logged"' in caplog.text


def test_label_data(standard: instance.Instance):
    assert isinstance(standard.labels['Pi'], scalar.Scalar)
    assert isinstance(standard.labels['Velocity'], data.UnitClassData)
    assert standard.labels['Phi'] is standard.labels['GoldenRatio']
