import typing


T = typing.TypeVar('T')


def unique(*items: T) -> typing.List[T]:
    """Remove repeated items while preserving order."""
    collection = []
    for item in items:
        if item not in collection:
            collection.append(item)
    return collection


def repeated(items: typing.Iterable[T]) -> typing.List[T]:
    """Find the items that occur more than once, in order of first repeat."""
    seen = []
    found = []
    for item in items:
        if item in seen and item not in found:
            found.append(item)
        seen.append(item)
    return found


class ReprStrMixin:
    """A mixin class that provides support for `__repr__` and `__str__`.

    Concrete subclasses define `__str__`; this class builds an unambiguous
    representation from it that includes the (shortened) module path.
    """

    __slots__ = ()

    def __str__(self) -> str:
        """A simplified representation of this object."""
        return ''

    def __repr__(self) -> str:
        """An unambiguous representation of this object."""
        module = f"{self.__module__.replace('ackulator.', '')}."
        name = self.__class__.__qualname__
        return f"{module}{name}({self})"
