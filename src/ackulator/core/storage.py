import functools
import typing

from ackulator.core import iterables


T = typing.TypeVar('T')


@functools.total_ordering
class StorageId(iterables.ReprStrMixin, typing.Generic[T]):
    """An opaque reference to an item in a `~storage.StoragePool`.

    Each identifier carries the type of item it refers to, so that an
    identifier of one kind never compares equal to (or indexes a pool of)
    another kind. Within a kind, equality and ordering use the index alone.
    """

    __slots__ = ('_kind', '_index')

    def __init__(self, kind: typing.Type[T], index: int) -> None:
        self._kind = kind
        self._index = index

    @property
    def kind(self) -> typing.Type[T]:
        """The type of item this identifier refers to."""
        return self._kind

    @property
    def index(self) -> int:
        """The position of the referenced item in its pool."""
        return self._index

    def __eq__(self, other) -> bool:
        """True if both identifiers refer to the same item."""
        if not isinstance(other, StorageId):
            return NotImplemented
        return self._kind is other._kind and self._index == other._index

    def __lt__(self, other) -> bool:
        """Called for self < other."""
        if not isinstance(other, StorageId):
            return NotImplemented
        if self._kind is not other._kind:
            raise TypeError(
                f"Can't order {self._kind.__name__} ids"
                f" against {other._kind.__name__} ids"
            ) from None
        return self._index < other._index

    def __hash__(self) -> int:
        return hash((self._kind, self._index))

    def __str__(self) -> str:
        return f"{self._kind.__name__} instance {self._index}"


class StoragePool(typing.Generic[T]):
    """An append-only arena of items of a single kind.

    The pool is the sole owner of its items; everything else holds
    `~storage.StorageId` instances, which remain valid for the life of the
    pool because items are never removed.
    """

    def __init__(self, kind: typing.Type[T]) -> None:
        self.kind = kind
        """The type of item this pool stores."""
        self._items: typing.List[T] = []

    def next_id(self) -> StorageId[T]:
        """The identifier that `push` will assign to the next item."""
        return StorageId(self.kind, len(self._items))

    def push(self, item: T) -> StorageId[T]:
        """Store `item` and return its new identifier."""
        if not isinstance(item, self.kind):
            raise TypeError(
                f"Can't store {type(item).__name__}"
                f" in a pool of {self.kind.__name__}"
            ) from None
        this = self.next_id()
        self._items.append(item)
        return this

    def __getitem__(self, __id: StorageId[T]) -> T:
        """Look up an item by its identifier."""
        if not isinstance(__id, StorageId) or __id.kind is not self.kind:
            raise TypeError(
                f"A pool of {self.kind.__name__} can't be indexed by {__id!r}"
            ) from None
        return self._items[__id.index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> typing.Iterator[T]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"StoragePool<{self.kind.__name__}>({self._items!r})"
