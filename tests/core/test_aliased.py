import pytest

from ackulator.core import aliased
from ackulator.core import errors


def test_declare_and_lookup():
    """Every alias finds the same item."""
    mapping = aliased.ManyToOneMap()
    item = object()
    mapping.declare(['Meter', 'Meters'], item)
    assert mapping['Meter'] is item
    assert mapping['Meters'] is item
    assert mapping.get('Foot') is None
    assert mapping.get_key_value('Meters') == ('Meters', item)
    assert mapping.get_key_value('Foot') is None
    assert mapping.aliases('Meters') == ('Meter', 'Meters')
    assert len(mapping) == 2
    assert list(mapping) == ['Meter', 'Meters']
    with pytest.raises(KeyError):
        mapping['Foot']


def test_declare_is_atomic():
    """A declaration with any taken key registers nothing."""
    mapping = aliased.ManyToOneMap()
    mapping.declare(['a', 'b'], 1)
    with pytest.raises(errors.NameCollisionError) as exc:
        mapping.declare(['c', 'b', 'd'], 2)
    assert exc.value.names == ('b',)
    assert 'c' not in mapping
    assert 'd' not in mapping
    assert mapping['b'] == 1


def test_repeated_key_in_declaration():
    """A key may not appear twice in the same declaration."""
    mapping = aliased.ManyToOneMap()
    with pytest.raises(errors.NameCollisionError):
        mapping.declare(['x', 'y', 'x'], 1)
    assert len(mapping) == 0


def test_collisions():
    mapping = aliased.ManyToOneMap()
    mapping.insert(['a'], 1)
    assert mapping.collisions(['a', 'b']) == ['a']
