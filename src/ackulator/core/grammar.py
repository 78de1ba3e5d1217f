"""
Lexical primitives shared by the expression and statement parsers.

Every scanner in this module accepts the unparsed input and returns a pair of
(result, remainder), or raises `~errors.ParseError` without consuming anything.
Callers thread the remainder into the next scanner.
"""

import re
import typing

from ackulator.core import errors


_WHITESPACE = re.compile(r"""
    (?:
        \s+         # ordinary whitespace, including newlines
    |
        //[^\n]*    # a comment runs to the end of the line
    )*
""", re.VERBOSE)

_IDENTIFIER = re.compile(r"""
    [^\W\d]     # any word character except a digit
    \w*         # followed by any word characters
""", re.VERBOSE)

_NUMBER = re.compile(r"""
    (?P<sign>[-+])?
    (?P<integer>\d+)?
    (?:\.(?P<fraction>\d+))?
    (?:e(?P<exponent>[-+]?\d+))?
""", re.VERBOSE)

_WORD = re.compile(r"\w")

_STRING = re.compile(r'"(?P<text>[^"\n]*)"')

_EXPONENT_LIMIT = 2**31 - 1
"""The largest exponent magnitude a numeric literal may spell out."""


def skip_whitespace(string: str) -> str:
    """Drop leading whitespace and comments."""
    return string[_WHITESPACE.match(string).end():]


def startswith(string: str, token: str) -> bool:
    """True if `string` begins with `token` after whitespace."""
    return skip_whitespace(string).startswith(token)


def token(string: str, this: str) -> str:
    """Consume the literal text `this` at the start of `string`."""
    if string.startswith(this):
        return string[len(this):]
    raise errors.ParseError(f"Expected {this!r}", string)


def identifier(string: str) -> typing.Tuple[str, str]:
    """Scan a name made of word characters, not starting with a digit."""
    if match := _IDENTIFIER.match(string):
        return match.group(), string[match.end():]
    raise errors.ParseError("Expected a name", string)


def keyword(string: str, *words: str) -> typing.Tuple[str, str]:
    """Scan one of `words` as a whole word.

    A keyword must not run into further word characters, so that, for
    example, ``makeup`` is a name rather than the keyword ``make``.
    """
    for word in words:
        if string.startswith(word):
            rest = string[len(word):]
            if not _WORD.match(rest):
                return word, rest
    expected = ' or '.join(repr(word) for word in words)
    raise errors.ParseError(f"Expected {expected}", string)


def number(string: str) -> typing.Tuple[float, str]:
    """Scan a numeric literal.

    The literal has an optional sign, an optional integer part, an optional
    fractional part and an optional exponent, but needs at least one of the
    integer or fractional parts. An exponent too large to represent does not
    reject the literal; its value becomes NaN instead.
    """
    match = _NUMBER.match(string)
    if match['integer'] is None and match['fraction'] is None:
        raise errors.ParseError("Expected a number", string)
    remainder = string[match.end():]
    exponent = match['exponent']
    if exponent is not None and abs(int(exponent)) > _EXPONENT_LIMIT:
        return float('nan'), remainder
    return float(match.group()), remainder


def quoted(string: str) -> typing.Tuple[str, str]:
    """Scan a double-quoted string on a single line, without escapes."""
    if match := _STRING.match(string):
        return match['text'], string[match.end():]
    raise errors.ParseError("Expected a quoted string", string)
