# -*- encoding: utf-8 -*-
# @File   : writer.py
# @Time   : 2024/11/03 13:22:09
# @Author : Kariko Lin

"""Variant -> literal text. Whatever is written here,
`parser.parse_value()` should read back as an equal value.
"""

import math
from warnings import warn

from .types import STRUCT_TYPES, Variant

__all__ = ['write_to_string']


def _real(value: float) -> str:
    if math.isnan(value):
        return 'nan'
    if math.isinf(value):
        return 'inf' if value > 0 else 'inf_neg'
    # repr() keeps '.0' or an exponent, so floats never come back as ints.
    return repr(value)


def _escape(value: str) -> str:
    # newlines stay verbatim: multi-line strings span multiple lines.
    return value.replace('\\', '\\\\').replace('"', '\\"')


def _construct(name: str, args: list[str]) -> str:
    if not args:
        return f'{name}( )'
    return f'{name}( {", ".join(args)} )'


def write_to_string(value: Variant) -> str:
    """Encode one value as a literal."""
    match value:
        case None:
            return 'null'
        case bool():
            return 'true' if value else 'false'
        case int():
            return str(value)
        case float():
            return _real(value)
        case str():
            return f'"{_escape(value)}"'
        case bytes() | bytearray():
            return _construct('PoolByteArray', [str(i) for i in value])
        case tuple() if type(value) in STRUCT_TYPES.values():
            return _construct(
                type(value).__name__, [_real(float(i)) for i in value])
        case list() | tuple():
            if isinstance(value, tuple):
                warn('Tuples are written as arrays and load back as lists.')
            if not value:
                return '[ ]'
            return f'[ {", ".join(write_to_string(i) for i in value)} ]'
        case dict():
            if not value:
                return '{ }'
            for k in value:
                # an array key would load back as an unhashable list.
                if (isinstance(k, tuple)
                        and type(k) not in STRUCT_TYPES.values()):
                    raise TypeError(
                        f'Cannot write tuple key {k!r} in a dictionary.')
            pairs = ',\n'.join(
                f'{write_to_string(k)}: {write_to_string(v)}'
                for k, v in value.items())
            return '{\n' + pairs + '\n}'
        case _:
            raise TypeError(
                f'Cannot write {type(value).__name__} as a config literal.')
