# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/11/02 21:38:04
# @Author : Kariko Lin

import logging

from .config import ConfigFile, ConfigFileParser, ConfigYamlParser
from .crypto import CipherMode, EncryptedFile
from .errors import (
    ConfigError,
    MissingKeyError,
    NoSuchSectionError,
    EncryptionError,
    VariantParseError
)
from .variant import (
    Variant, Vector2, Vector3, Rect2, Color, str_to_var, var_to_str
)

__version__ = '0.1.0'

__all__ = [
    'ConfigFile', 'ConfigFileParser', 'ConfigYamlParser',
    'CipherMode', 'EncryptedFile',
    'ConfigError', 'MissingKeyError', 'NoSuchSectionError',
    'EncryptionError', 'VariantParseError',
    'Variant', 'Vector2', 'Vector3', 'Rect2', 'Color',
    'str_to_var', 'var_to_str'
]

logging.basicConfig(level=logging.INFO,
                    format='[%(asctime)s] %(levelname)s: %(message)s')
