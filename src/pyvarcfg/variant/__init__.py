# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/11/03 18:11:50
# @Author : Kariko Lin

from .types import Variant, Vector2, Vector3, Rect2, Color
from .writer import write_to_string
from .parser import (
    VariantStream,
    SectionTag,
    Assignment,
    EndOfStream,
    parse_tag_assign_eof,
    str_to_var
)

var_to_str = write_to_string
