# -*- encoding: utf-8 -*-
# @File   : errors.py
# @Time   : 2024/11/02 21:52:37
# @Author : Kariko Lin

"""pyvarcfg exceptions.

`OSError` raised by `open()` is never wrapped; everything else the
package raises on purpose derives from `ConfigError`.
"""


class ConfigError(Exception):
    """Base exception for all pyvarcfg errors."""
    pass


class MissingKeyError(ConfigError, KeyError):
    """Raised by `get_value()` on a miss when no default was given."""
    def __init__(self, section: str, key: str):
        self.section = section
        self.key = key
        super().__init__(
            f'Couldn\'t find "{key}" in [{section}] '
            'and no default was given.')

    def __str__(self) -> str:
        return self.args[0]


class NoSuchSectionError(ConfigError, KeyError):
    """Raised by strict accessors on a section that does not exist."""
    def __init__(self, section: str, action: str = 'access'):
        self.section = section
        super().__init__(f'Cannot {action} nonexistent section [{section}].')

    def __str__(self) -> str:
        return self.args[0]


class EncryptionError(ConfigError):
    """Raised when an encrypted stream fails to open or authenticate."""
    pass


class VariantParseError(ConfigError):
    """Raised on malformed tags, assignments or literals."""
    def __init__(self, line: int, message: str):
        self.line = line
        self.message = message
        super().__init__(f'line {line}: {message}')
