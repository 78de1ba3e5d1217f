"""
Expression trees and the recursive-descent parser that builds them.

Operator precedence, from loosest to tightest binding:

    ``+ -``   left-associative
    ``* /``   left-associative
    ``^``     right-associative
    ``f(...)`` function application
    atoms: numbers, names, quoted strings, ``( ... )``, ``{ ... }``
"""

import enum
import typing

from ackulator.core import errors
from ackulator.core import grammar


class UnaryOp(enum.Enum):
    """Operators that take a single operand."""

    NEGATE = '-'


class BinaryOp(enum.Enum):
    """Operators that take two operands."""

    ADD = '+'
    SUB = '-'
    MUL = '*'
    DIV = '/'
    POW = '^'


class NumericLiteral(typing.NamedTuple):
    """A number written in the source."""

    value: float


class StringLiteral(typing.NamedTuple):
    """Text between double quotes."""

    text: str


class LookupName(typing.NamedTuple):
    """A reference to something declared elsewhere."""

    name: str


class UnaryExpr(typing.NamedTuple):
    """An operator applied to one expression."""

    op: UnaryOp
    operand: 'Expression'


class BinaryExpr(typing.NamedTuple):
    """An operator applied to two expressions."""

    lhs: 'Expression'
    op: BinaryOp
    rhs: 'Expression'


class ApplyFunction(typing.NamedTuple):
    """A call of one expression with a list of arguments."""

    function: 'Expression'
    arguments: typing.Tuple['Expression', ...]


class BuildEntity(typing.NamedTuple):
    """A literal entity: named properties plus bare class tags.

    The order in which tags and properties appear in the source does not
    affect the entity this expression builds.
    """

    properties: typing.Tuple[typing.Tuple[str, 'Expression'], ...] = ()
    class_names: typing.Tuple[str, ...] = ()


Expression = typing.Union[
    NumericLiteral,
    StringLiteral,
    LookupName,
    UnaryExpr,
    BinaryExpr,
    ApplyFunction,
    BuildEntity,
]


Parsed = typing.Tuple[Expression, str]


def parse_expression(string: str) -> Parsed:
    """Parse an expression from the start of `string`.

    Returns
    -------
    tuple
        The expression and the unparsed remainder of `string`.

    Raises
    ------
    `~errors.ParseError`
        No expression starts at the beginning of `string`.
    """
    return _expr10(string)


def _expr10(string: str) -> Parsed:
    """Addition and subtraction."""
    return _fold_left(string, _expr20, {'+': BinaryOp.ADD, '-': BinaryOp.SUB})


def _expr20(string: str) -> Parsed:
    """Multiplication and division."""
    return _fold_left(string, _expr30, {'*': BinaryOp.MUL, '/': BinaryOp.DIV})


def _fold_left(
    string: str,
    operand: typing.Callable[[str], Parsed],
    operators: typing.Mapping[str, BinaryOp],
) -> Parsed:
    """Parse a left-associative chain of `operators`."""
    expr, string = operand(string)
    while string[:1] in operators:
        try:
            rhs, rest = operand(string[1:])
        except errors.ParseError:
            break
        expr = BinaryExpr(expr, operators[string[0]], rhs)
        string = rest
    return expr, string


def _expr30(string: str) -> Parsed:
    """Exponentiation, which groups from the right."""
    term, string = _expr40(string)
    terms = [term]
    while string.startswith('^'):
        try:
            term, rest = _expr40(string[1:])
        except errors.ParseError:
            break
        terms.append(term)
        string = rest
    expr = terms.pop()
    for lhs in reversed(terms):
        expr = BinaryExpr(lhs, BinaryOp.POW, expr)
    return expr, string


def _expr40(string: str) -> Parsed:
    """An atom, possibly applied to arguments.

    This level consumes the whitespace on both sides of the atom, so the
    levels above it can look for operators directly.
    """
    term, string = _expr50(grammar.skip_whitespace(string))
    string = grammar.skip_whitespace(string)
    if string.startswith('('):
        try:
            arguments, rest = _arguments(string[1:])
        except errors.ParseError:
            return term, string
        return ApplyFunction(term, arguments), grammar.skip_whitespace(rest)
    return term, string


def _arguments(string: str):
    """Comma-separated arguments, with an optional trailing comma."""
    arguments = []
    string = grammar.skip_whitespace(string)
    while not string.startswith(')'):
        argument, string = _expr10(string)
        arguments.append(argument)
        if not string.startswith(','):
            break
        string = grammar.skip_whitespace(string[1:])
    return tuple(arguments), grammar.token(string, ')')


def _expr50(string: str) -> Parsed:
    """An atom."""
    if string.startswith('('):
        expr, rest = _expr10(string[1:])
        return expr, grammar.token(rest, ')')
    if string.startswith('{'):
        return _entity(string[1:])
    if string.startswith('"'):
        text, rest = grammar.quoted(string)
        return StringLiteral(text), rest
    try:
        value, rest = grammar.number(string)
        return NumericLiteral(value), rest
    except errors.ParseError:
        pass
    try:
        name, rest = grammar.identifier(string)
    except errors.ParseError:
        raise errors.ParseError("Expected an expression", string) from None
    return LookupName(name), rest


def _entity(string: str) -> Parsed:
    """The body of an entity literal, after the opening brace."""
    properties = []
    class_names = []
    string = grammar.skip_whitespace(string)
    while not string.startswith('}'):
        name, string = grammar.identifier(string)
        string = grammar.skip_whitespace(string)
        if string.startswith(':'):
            value, string = _expr10(string[1:])
            properties.append((name, value))
        else:
            class_names.append(name)
        if string.startswith(','):
            string = grammar.skip_whitespace(string[1:])
        elif not string.startswith('}'):
            raise errors.ParseError("Expected ',' or '}'", string)
    entity = BuildEntity(tuple(properties), tuple(class_names))
    return entity, string[1:]
