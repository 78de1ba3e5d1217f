import collections.abc
import typing

from ackulator.core import errors


_KT = typing.TypeVar('_KT')
_VT = typing.TypeVar('_VT')


class ManyToOneMap(collections.abc.Mapping, typing.Generic[_KT, _VT]):
    """A mapping in which several aliased keys may share one value.

    Values live in an internal list and each key maps to a position in that
    list, so every alias of an item resolves to the identical object. Keys are
    never removed or re-bound.

    Examples
    --------
    >>> units = ManyToOneMap()
    >>> units.declare(['Meter', 'Meters'], 'm')
    >>> units['Meters']
    'm'
    >>> units.aliases('Meter')
    ('Meter', 'Meters')
    """

    def __init__(self) -> None:
        self._items: typing.List[_VT] = []
        self._keys: typing.Dict[_KT, int] = {}
        self._groups: typing.List[typing.Tuple[_KT, ...]] = []

    def collisions(self, keys: typing.Iterable[_KT]) -> typing.List[_KT]:
        """The members of `keys` that are already in this mapping."""
        return [key for key in keys if key in self._keys]

    def insert(self, keys: typing.Iterable[_KT], item: _VT) -> None:
        """Store `item` under every key in `keys`, without checking."""
        keys = tuple(keys)
        index = len(self._items)
        self._items.append(item)
        self._groups.append(keys)
        for key in keys:
            self._keys[key] = index

    def declare(self, keys: typing.Iterable[_KT], item: _VT) -> None:
        """Store `item` under all `keys`, or under none of them.

        Raises
        ------
        `~errors.NameCollisionError`
            At least one key is already present (including a key repeated
            within `keys`). The mapping is unchanged.
        """
        keys = tuple(keys)
        taken = self.collisions(keys)
        taken.extend(k for i, k in enumerate(keys) if k in keys[:i])
        if taken:
            raise errors.NameCollisionError(taken)
        self.insert(keys, item)

    def get_key_value(
        self,
        key: _KT,
    ) -> typing.Optional[typing.Tuple[_KT, _VT]]:
        """Get the matching key and its value, if `key` is present."""
        if key in self._keys:
            return key, self._items[self._keys[key]]
        return None

    def aliases(self, key: _KT) -> typing.Tuple[_KT, ...]:
        """All keys that share a value with `key`, in declaration order."""
        return self._groups[self._keys[key]]

    def __getitem__(self, __k: _KT) -> _VT:
        """Look up a value by any of its keys."""
        if __k in self._keys:
            return self._items[self._keys[__k]]
        raise KeyError(__k) from None

    def __iter__(self) -> typing.Iterator[_KT]:
        """Iterate over all keys, including aliases."""
        return iter(self._keys)

    def __len__(self) -> int:
        """The number of keys, including aliases."""
        return len(self._keys)

    def __contains__(self, __k: object) -> bool:
        return __k in self._keys

    def __repr__(self) -> str:
        groups = (
            f"{' | '.join(group)!r}: {item!r}"
            for group, item in zip(self._groups, self._items)
        )
        return f"aliased.ManyToOneMap({', '.join(groups)})"
