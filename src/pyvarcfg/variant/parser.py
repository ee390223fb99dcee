# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2024/11/03 15:47:26
# @Author : Kariko Lin

"""Literal text -> Variant, plus the line-level reader of config files.

A config file is a sequence of two kinds of statements:

    ```
    [section]
    key=<literal>
    ```

`parse_tag_assign_eof()` pulls exactly one of them from a
`VariantStream` per call, or tells that the stream is exhausted.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import TypeAlias

from ..errors import VariantParseError
from .types import STRUCT_TYPES, Variant

__all__ = [
    'VariantStream', 'SectionTag', 'Assignment', 'EndOfStream',
    'parse_value', 'parse_tag_assign_eof', 'str_to_var'
]

_NUMBER = re.compile(r'-?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?')
_IDENTIFIER = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')
_HEX4 = re.compile(r'[0-9A-Fa-f]{4}')
_ESCAPES = {
    'b': '\b', 't': '\t', 'n': '\n', 'f': '\f', 'r': '\r',
    '"': '"', '\\': '\\', "'": "'",
}
_KEYWORDS: dict[str, Variant] = {
    'true': True,
    'false': False,
    'null': None,
    'nil': None,
    'inf': float('inf'),
    'inf_neg': float('-inf'),
    'nan': float('nan'),
}


class VariantStream:
    """Character cursor over decoded text, counting lines from 1."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0
        self.line = 1

    def get_char(self) -> str:
        """Consume one char; an empty string means EOF."""
        if self._pos >= len(self._text):
            return ''
        c = self._text[self._pos]
        self._pos += 1
        if c == '\n':
            self.line += 1
        return c

    def peek_char(self) -> str:
        if self._pos >= len(self._text):
            return ''
        return self._text[self._pos]

    def skip_whitespace(self) -> None:
        while (c := self.peek_char()) and c.isspace():
            self.get_char()

    def match(self, pattern: re.Pattern[str]) -> str | None:
        """Consume `pattern` at the cursor. Patterns must not span lines."""
        if (m := pattern.match(self._text, self._pos)) is None:
            return None
        self._pos = m.end()
        return m.group()

    def error(self, message: str) -> VariantParseError:
        return VariantParseError(self.line, message)


# --- literal tokens ---------------------------------------------------------

class TokenType(Enum):
    CURLY_OPEN = auto()
    CURLY_CLOSE = auto()
    BRACKET_OPEN = auto()
    BRACKET_CLOSE = auto()
    PAREN_OPEN = auto()
    PAREN_CLOSE = auto()
    COLON = auto()
    COMMA = auto()
    STRING = auto()
    NUMBER = auto()
    IDENTIFIER = auto()
    EOF = auto()


_PUNCTUATION = {
    '{': TokenType.CURLY_OPEN,
    '}': TokenType.CURLY_CLOSE,
    '[': TokenType.BRACKET_OPEN,
    ']': TokenType.BRACKET_CLOSE,
    '(': TokenType.PAREN_OPEN,
    ')': TokenType.PAREN_CLOSE,
    ':': TokenType.COLON,
    ',': TokenType.COMMA,
}


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: Variant = None


def _read_string(stream: VariantStream) -> str:
    chars: list[str] = []
    while True:
        match c := stream.get_char():
            case '':
                raise stream.error('Unterminated string.')
            case '"':
                return ''.join(chars)
            case '\\':
                esc = stream.get_char()
                if esc in _ESCAPES:
                    chars.append(_ESCAPES[esc])
                elif esc == 'u':
                    code = ''.join(stream.get_char() for _ in range(4))
                    if not _HEX4.fullmatch(code):
                        raise stream.error(
                            f'Malformed unicode escape "\\u{code}".')
                    chars.append(chr(int(code, 16)))
                else:
                    raise stream.error(f'Invalid escape sequence "\\{esc}".')
            case _:
                chars.append(c)


def get_token(stream: VariantStream) -> Token:
    stream.skip_whitespace()
    c = stream.peek_char()
    if not c:
        return Token(TokenType.EOF)
    if c in _PUNCTUATION:
        stream.get_char()
        return Token(_PUNCTUATION[c])
    if c == '"':
        stream.get_char()
        return Token(TokenType.STRING, _read_string(stream))
    if (num := stream.match(_NUMBER)) is not None:
        if any(i in num for i in '.eE'):
            return Token(TokenType.NUMBER, float(num))
        return Token(TokenType.NUMBER, int(num))
    if (ident := stream.match(_IDENTIFIER)) is not None:
        return Token(TokenType.IDENTIFIER, ident)
    raise stream.error(f'Unexpected character "{c}".')


# --- values -----------------------------------------------------------------

def _parse_array(stream: VariantStream) -> list[Variant]:
    ret: list[Variant] = []
    need_comma = False
    while True:
        token = get_token(stream)
        if token.type is TokenType.EOF:
            raise stream.error('Unexpected end of file while parsing array.')
        if token.type is TokenType.BRACKET_CLOSE:
            return ret
        if need_comma:
            if token.type is not TokenType.COMMA:
                raise stream.error('Expected "," or "]" in array.')
            need_comma = False
            continue
        ret.append(parse_value(token, stream))
        need_comma = True


def _parse_dictionary(stream: VariantStream) -> dict[Variant, Variant]:
    ret: dict[Variant, Variant] = {}
    need_comma = False
    while True:
        token = get_token(stream)
        if token.type is TokenType.EOF:
            raise stream.error(
                'Unexpected end of file while parsing dictionary.')
        if token.type is TokenType.CURLY_CLOSE:
            return ret
        if need_comma:
            if token.type is not TokenType.COMMA:
                raise stream.error('Expected "," or "}" in dictionary.')
            need_comma = False
            continue

        key = parse_value(token, stream)
        try:
            hash(key)
        except TypeError:
            raise stream.error(
                f'{type(key).__name__} cannot be a dictionary key.') from None
        if get_token(stream).type is not TokenType.COLON:
            raise stream.error('Expected ":" after dictionary key.')
        ret[key] = parse_value(get_token(stream), stream)
        need_comma = True


def _parse_arguments(stream: VariantStream, name: str) -> list[int | float]:
    if get_token(stream).type is not TokenType.PAREN_OPEN:
        raise stream.error(f'Expected "(" after {name}.')
    args: list[int | float] = []
    need_comma = False
    while True:
        token = get_token(stream)
        if token.type is TokenType.PAREN_CLOSE:
            return args
        if need_comma:
            if token.type is not TokenType.COMMA:
                raise stream.error(f'Expected "," or ")" in {name}.')
            need_comma = False
            continue
        if token.type is TokenType.IDENTIFIER and token.value in (
                'inf', 'inf_neg', 'nan'):
            args.append(_KEYWORDS[token.value])
        elif token.type is TokenType.NUMBER:
            args.append(token.value)
        else:
            raise stream.error(f'Expected a number in {name}.')
        need_comma = True


def _parse_constructor(stream: VariantStream, name: str) -> Variant:
    args = _parse_arguments(stream, name)
    if name == 'PoolByteArray':
        if not all(isinstance(i, int) and 0 <= i <= 255 for i in args):
            raise stream.error('PoolByteArray takes integers in 0..255.')
        return bytes(args)

    cls = STRUCT_TYPES[name]
    if len(args) != len(cls._fields):
        raise stream.error(
            f'{name} takes {len(cls._fields)} arguments, got {len(args)}.')
    return cls(*(float(i) for i in args))


def parse_value(token: Token, stream: VariantStream) -> Variant:
    """Build a value starting with `token` (already consumed)."""
    match token.type:
        case TokenType.CURLY_OPEN:
            return _parse_dictionary(stream)
        case TokenType.BRACKET_OPEN:
            return _parse_array(stream)
        case TokenType.NUMBER | TokenType.STRING:
            return token.value
        case TokenType.IDENTIFIER:
            if token.value in _KEYWORDS:
                return _KEYWORDS[token.value]
            if token.value == 'PoolByteArray' or token.value in STRUCT_TYPES:
                return _parse_constructor(stream, token.value)
            raise stream.error(f'Unknown identifier "{token.value}".')
        case TokenType.EOF:
            raise stream.error('Expected a value, got end of file.')
        case _:
            raise stream.error(
                f'Expected a value, got {token.type.name.lower()}.')


def str_to_var(text: str) -> Variant:
    """Parse a single literal, e.g. `str_to_var('[ 1, 2 ]')`."""
    stream = VariantStream(text)
    ret = parse_value(get_token(stream), stream)
    if get_token(stream).type is not TokenType.EOF:
        raise stream.error('Unexpected data after the literal.')
    return ret


# --- statements -------------------------------------------------------------

@dataclass(frozen=True)
class SectionTag:
    name: str


@dataclass(frozen=True)
class Assignment:
    key: str
    value: Variant


@dataclass(frozen=True)
class EndOfStream:
    pass


TagAssignResult: TypeAlias = SectionTag | Assignment | EndOfStream


def _parse_tag(stream: VariantStream) -> SectionTag:
    chars: list[str] = []
    while (c := stream.peek_char()) != ']':
        if c in ('', '\n'):
            raise stream.error('Unterminated section tag, expected "]".')
        chars.append(stream.get_char())
    stream.get_char()
    return SectionTag(''.join(chars).strip())


def _parse_assign(stream: VariantStream) -> Assignment:
    chars: list[str] = []
    while (c := stream.peek_char()) != '=':
        if c in ('', '\n'):
            raise stream.error(
                f'Expected "=" after key "{"".join(chars).strip()}".')
        chars.append(stream.get_char())
    stream.get_char()

    key = ''.join(chars).strip()
    if not key:
        raise stream.error('Expected a key before "=".')
    return Assignment(key, parse_value(get_token(stream), stream))


def parse_tag_assign_eof(stream: VariantStream) -> TagAssignResult:
    """Read the next `[tag]` or `key=value`, or report the end of stream.

    Raises `VariantParseError` carrying the 1-based line of the problem.
    """
    stream.skip_whitespace()
    match stream.peek_char():
        case '':
            return EndOfStream()
        case '[':
            stream.get_char()
            return _parse_tag(stream)
        case _:
            return _parse_assign(stream)
