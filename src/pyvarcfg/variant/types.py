# -*- encoding: utf-8 -*-
# @File   : types.py
# @Time   : 2024/11/03 13:05:41
# @Author : Kariko Lin

from typing import NamedTuple, TypeAlias, Union


class Vector2(NamedTuple):
    x: float
    y: float


class Vector3(NamedTuple):
    x: float
    y: float
    z: float


class Rect2(NamedTuple):
    x: float
    y: float
    width: float
    height: float


class Color(NamedTuple):
    r: float
    g: float
    b: float
    a: float = 1.0


# constructor name in literals -> type.
STRUCT_TYPES: dict[str, type[tuple]] = {
    'Vector2': Vector2,
    'Vector3': Vector3,
    'Rect2': Rect2,
    'Color': Color,
}

Variant: TypeAlias = Union[
    None, bool, int, float, str, bytes,
    Vector2, Vector3, Rect2, Color,
    list['Variant'], dict['Variant', 'Variant'],
]
