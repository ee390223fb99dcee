# -*- encoding: utf-8 -*-
# @File   : model.py
# @Time   : 2024/11/07 00:18:45
# @Author : Kariko Lin

"""
Ordered sections of ordered typed key-value pairs.

    ```
    [display]

    width=1024
    height=768
    ```

Both levels keep *first insertion* order: updating a key never moves it,
only deleting and re-adding does.
"""

from collections.abc import Iterator
from os import PathLike

from ..errors import MissingKeyError, NoSuchSectionError
from ..variant.types import Variant

__all__ = ['ConfigFile']


class ConfigFile:
    """配置文件的内存表示：小节名 -> {键: 值}，均保持插入顺序。

    把值设为`None`即删除该键；小节被删空时会一并移除。
    但`erase_section_key()`*不会*移除删空的小节。
    """

    def __init__(self) -> None:
        self.__values: dict[str, dict[str, Variant]] = {}

    def set_value(self, section: str, key: str, value: Variant) -> None:
        if value is None:
            if section not in self.__values:
                return
            self.__values[section].pop(key, None)
            if not self.__values[section]:
                del self.__values[section]
        else:
            self.__values.setdefault(section, {})[key] = value

    def get_value(
        self, section: str, key: str, default: Variant = None
    ) -> Variant:
        """获取值。找不到时返回`default`；
        若`default`也是`None`，则抛出`MissingKeyError`。"""
        if key not in self.__values.get(section, ()):
            if default is None:
                raise MissingKeyError(section, key)
            return default
        return self.__values[section][key]

    def has_section(self, section: str) -> bool:
        return section in self.__values

    def has_section_key(self, section: str, key: str) -> bool:
        return key in self.__values.get(section, ())

    def get_sections(self) -> list[str]:
        return list(self.__values)

    def get_section_keys(self, section: str) -> list[str]:
        if section not in self.__values:
            raise NoSuchSectionError(section, 'get keys from')
        return list(self.__values[section])

    def erase_section(self, section: str) -> None:
        self.__values.pop(section, None)

    def erase_section_key(self, section: str, key: str) -> None:
        if section not in self.__values:
            raise NoSuchSectionError(section, 'erase key from')
        # an emptied section stays, unlike `set_value(..., None)`.
        self.__values[section].pop(key, None)

    def clear(self) -> None:
        self.__values.clear()

    def _get_pairs(self, section: str) -> dict[str, Variant]:
        """for ConfigFileParser.encode()."""
        return self.__values[section]

    # --- text & files -------------------------------------------------------

    def parse(self, text: str) -> None:
        """Load `text` into this instance, like `load()` does with files."""
        from .parser import ConfigFileParser
        ConfigFileParser.readstream(text, self)

    def encode_to_text(self) -> str:
        from .parser import ConfigFileParser
        return ConfigFileParser.encode(self)

    def save(self, path: str | PathLike[str]) -> None:
        from .parser import ConfigFileParser
        ConfigFileParser(path).write(self)

    def save_encrypted(self, path: str | PathLike[str], key: bytes) -> None:
        from .parser import ConfigFileParser
        ConfigFileParser(path, key=key).write(self)

    def save_encrypted_pass(
        self, path: str | PathLike[str], password: str
    ) -> None:
        from .parser import ConfigFileParser
        ConfigFileParser(path, password=password).write(self)

    def load(self, path: str | PathLike[str]) -> None:
        """Merge the file into this instance.

        On a parse error, pairs before the bad line are kept.
        Use `ConfigFileParser(path).read()` for all-or-nothing loading.
        """
        from .parser import ConfigFileParser
        ConfigFileParser(path).readinto(self)

    def load_encrypted(self, path: str | PathLike[str], key: bytes) -> None:
        from .parser import ConfigFileParser
        ConfigFileParser(path, key=key).readinto(self)

    def load_encrypted_pass(
        self, path: str | PathLike[str], password: str
    ) -> None:
        from .parser import ConfigFileParser
        ConfigFileParser(path, password=password).readinto(self)

    # --- python protocols ---------------------------------------------------

    def __contains__(self, section: object) -> bool:
        return section in self.__values

    def __iter__(self) -> Iterator[str]:
        return iter(self.__values)

    def __len__(self) -> int:
        return len(self.__values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigFile):
            return NotImplemented
        # dict equality ignores order, so compare as ordered pairs.
        return [
            (k, list(v.items())) for k, v in self.__values.items()
        ] == [
            (k, list(v.items())) for k, v in other.__values.items()
        ]

    def __repr__(self) -> str:
        return '<ConfigFile { .sections = %d }>' % len(self.__values)
