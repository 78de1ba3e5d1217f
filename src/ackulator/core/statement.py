"""
Declarative statements and their parser.

A program is a sequence of statements, each introduced by a keyword::

    make <kind> called <name>[, <name> ...] [for] [<expression>]
    show <expression>

The statement after a ``make`` or ``show`` begins wherever the previous
expression stops, so statements need no terminator.
"""

import typing

from ackulator.core import errors
from ackulator.core import expression
from ackulator.core import grammar


Names = typing.Tuple[str, ...]


class MakeUnitClass(typing.NamedTuple):
    """Declare a dimension."""

    names: Names


class MakeBaseUnit(typing.NamedTuple):
    """Declare the base unit of a dimension."""

    names: Names
    value: expression.Expression


class MakeDerivedUnit(typing.NamedTuple):
    """Declare a unit defined in terms of other units."""

    names: Names
    value: expression.Expression


class MakeEntityClass(typing.NamedTuple):
    """Declare a class that entities may carry as a tag."""

    names: Names
    value: expression.Expression


class MakeLabel(typing.NamedTuple):
    """Give a name to the result of an arbitrary expression."""

    names: Names
    value: expression.Expression


class MakeValue(typing.NamedTuple):
    """Give a name to an entity."""

    names: Names
    value: expression.Expression


class Show(typing.NamedTuple):
    """Evaluate an expression and describe the result."""

    value: expression.Expression


Statement = typing.Union[
    MakeUnitClass,
    MakeBaseUnit,
    MakeDerivedUnit,
    MakeEntityClass,
    MakeLabel,
    MakeValue,
    Show,
]


_KINDS = {
    'unit_class': MakeUnitClass,
    'base_unit': MakeBaseUnit,
    'derived_unit': MakeDerivedUnit,
    'entity_class': MakeEntityClass,
    'label': MakeLabel,
    'value': MakeValue,
}


def parse_statement(string: str) -> typing.Tuple[Statement, str]:
    """Parse one statement, with surrounding whitespace, from `string`."""
    string = grammar.skip_whitespace(string)
    word, rest = grammar.keyword(string, 'make', 'show')
    if word == 'make':
        statement, rest = _parse_make(rest)
    else:
        value, rest = expression.parse_expression(rest)
        statement = Show(value)
    return statement, grammar.skip_whitespace(rest)


def parse_statements(string: str) -> typing.Tuple[typing.List[Statement], str]:
    """Parse as many statements as possible from the start of `string`.

    Returns
    -------
    tuple
        The statements parsed and the unparsed remainder of `string`.
    """
    statements = []
    string = grammar.skip_whitespace(string)
    while string:
        try:
            statement, string = parse_statement(string)
        except errors.ParseError:
            break
        statements.append(statement)
    return statements, string


def parse_program(string: str) -> typing.List[Statement]:
    """Parse a complete program.

    Raises
    ------
    `~errors.ParseError`
        The program contains no statements, or some input is left over after
        the last statement that parsed.
    """
    statements, remainder = parse_statements(string)
    if remainder:
        raise errors.ParseError(
            f"Unparsed input after statement {len(statements)}",
            remainder,
        )
    if not statements:
        raise errors.ParseError("Expected at least one statement", string)
    return statements


def _parse_make(string: str) -> typing.Tuple[Statement, str]:
    """The body of a make statement, after the keyword."""
    kind, string = grammar.keyword(
        grammar.skip_whitespace(string),
        *_KINDS,
    )
    _, string = grammar.keyword(grammar.skip_whitespace(string), 'called')
    names, string = _parse_names(string)
    factory = _KINDS[kind]
    if factory is MakeUnitClass:
        return MakeUnitClass(names), string
    string = grammar.skip_whitespace(string)
    try:
        _, string = grammar.keyword(string, 'for')
    except errors.ParseError as err:
        if factory is MakeLabel:
            raise errors.ParseError(
                "A label needs 'for' before its value", string
            ) from err
    if factory is MakeEntityClass and not grammar.startswith(string, '{'):
        return MakeEntityClass(names, expression.BuildEntity()), string
    try:
        value, string = expression.parse_expression(string)
    except errors.ParseError as err:
        raise errors.ParseError(
            f"A {kind} declaration needs a value", err.remainder
        ) from err
    return factory(names, value), string


def _parse_names(string: str) -> typing.Tuple[Names, str]:
    """One or more comma-separated names."""
    names = []
    while True:
        name, string = grammar.identifier(grammar.skip_whitespace(string))
        names.append(name)
        string = grammar.skip_whitespace(string)
        if not string.startswith(','):
            return tuple(names), string
        string = string[1:]
