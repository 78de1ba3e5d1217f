import pytest

from ackulator.core import storage


class Thing:
    pass


class Other:
    pass


def test_pool_ids():
    """Identifiers count up from zero in insertion order."""
    pool = storage.StoragePool(Thing)
    assert pool.next_id() == storage.StorageId(Thing, 0)
    first = pool.push(Thing())
    second = pool.push(Thing())
    assert (first.index, second.index) == (0, 1)
    assert first < second
    assert len(pool) == 2
    assert pool.next_id().index == 2


def test_pool_lookup():
    """Items come back by identifier."""
    pool = storage.StoragePool(Thing)
    things = [Thing(), Thing()]
    ids = [pool.push(thing) for thing in things]
    for this, thing in zip(ids, things):
        assert pool[this] is thing


def test_pool_rejects_other_kinds():
    """A pool stores and answers for one kind only."""
    pool = storage.StoragePool(Thing)
    with pytest.raises(TypeError):
        pool.push(Other())
    pool.push(Thing())
    with pytest.raises(TypeError):
        pool[storage.StorageId(Other, 0)]


def test_id_kinds():
    """Identifiers of different kinds never compare equal."""
    thing = storage.StorageId(Thing, 0)
    other = storage.StorageId(Other, 0)
    assert thing != other
    assert thing == storage.StorageId(Thing, 0)
    assert hash(thing) == hash(storage.StorageId(Thing, 0))
    assert len({thing, other}) == 2
    with pytest.raises(TypeError):
        thing < other
    assert str(thing) == "Thing instance 0"
