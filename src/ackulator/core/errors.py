import typing


class AckulatorError(Exception):
    """Base class for expected failures in parsing or evaluation."""


class ParseError(AckulatorError):
    """The source text is not valid in this language."""

    def __init__(self, message: str, remainder: str='') -> None:
        self.message = message
        self.remainder = remainder
        """The portion of the input that the parser could not consume."""

    def __str__(self) -> str:
        if not self.remainder:
            return self.message
        context = self.remainder.splitlines()[0]
        if len(context) > 40:
            context = f"{context[:40]}..."
        return f"{self.message} at {context!r}"


class NameCollisionError(AckulatorError):
    """At least one name in a declaration is already in use."""

    def __init__(self, names: typing.Iterable[str]) -> None:
        self.names = tuple(names)

    def __str__(self) -> str:
        joined = ', '.join(repr(name) for name in self.names)
        return f"Cannot declare {joined}: name already in use"


class UndefinedNameError(AckulatorError):
    """No namespace contains the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name

    def __str__(self) -> str:
        return f"Nothing is called {self.name!r}"


class DimensionMismatchError(AckulatorError):
    """Attempted to add or subtract quantities of different dimensions."""


class TypeMismatchError(AckulatorError):
    """An operation does not support the kinds of data it received."""


class UnimplementedFeatureError(AckulatorError):
    """The language accepts this construct but cannot evaluate it."""
