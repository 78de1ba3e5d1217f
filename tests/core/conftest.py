import typing

import pytest

from ackulator.core import data
from ackulator.core import instance
from ackulator.core import prelude


@pytest.fixture
def shown() -> typing.List[data.Data]:
    """A list that collects the results of show statements."""
    return []


@pytest.fixture
def session(shown: list) -> instance.Instance:
    """A fresh instance that records what it shows."""
    return instance.Instance(on_show=lambda value, _: shown.append(value))


@pytest.fixture
def standard(session: instance.Instance) -> instance.Instance:
    """An instance that has run the standard declarations."""
    prelude.load(session)
    return session


@pytest.fixture
def sample_program() -> str:
    """A short program that declares two dimensions and two base units."""
    return """
    make unit_class called Length
    make base_unit called Meter, Meters { class: Length, symbol: "m", metric }
    make unit_class called Time
    make base_unit called Second, Seconds { class: Time, symbol: "s", partial_metric }
    make label called Velocity for Length / Time
    show (1 * Meter / Second ^ 2) is Acceleration
    """
