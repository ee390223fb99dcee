# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2024/11/07 02:06:33
# @Author : Kariko Lin

"""Readers and writers of `ConfigFile`.

`ConfigFileParser` handles the native text format, optionally
wrapped by `EncryptedFile`. Files are opened *per call* and always
closed before the call returns, no matter how it ends.
"""

import logging
from datetime import date, datetime
from io import StringIO
from os import PathLike
from typing import BinaryIO

import yaml

from ..abstract import FileHandler
from ..crypto import CipherMode, EncryptedFile
from ..errors import ConfigError, VariantParseError
from ..variant import (
    Assignment,
    EndOfStream,
    SectionTag,
    VariantStream,
    parse_tag_assign_eof,
    write_to_string
)
from ..variant.types import STRUCT_TYPES, Variant
from .model import ConfigFile

__all__ = ['ConfigFileParser', 'ConfigYamlParser']


class ConfigFileParser(FileHandler[ConfigFile]):
    def __init__(
        self, filename: str | PathLike[str], encoding: str = 'utf-8', *,
        key: bytes | None = None,
        password: str | None = None
    ) -> None:
        """`key` or `password` (not both) turns on encryption."""
        super().__init__(filename, encoding)
        if key is not None and password is not None:
            raise ValueError('Give either a key or a password, not both.')
        self._key = key
        self._password = password

    @property
    def encrypted(self) -> bool:
        return self._key is not None or self._password is not None

    def __wrap(self, fp: BinaryIO, mode: CipherMode) -> EncryptedFile:
        ret = EncryptedFile()
        if self._key is not None:
            ret.open_and_parse(fp, self._key, mode)
        else:
            ret.open_and_parse_password(fp, self._password, mode)
        return ret

    # --- save ---------------------------------------------------------------

    @staticmethod
    def __check_name(name: str, kind: str, forbidden: str) -> None:
        # the reader strips names and stops them at these chars.
        if name != name.strip() or any(c in name for c in forbidden):
            raise ValueError(
                f'{kind} {name!r} cannot be written: no surrounding '
                f'whitespace, newlines or {" ".join(forbidden[1:])} allowed.')

    @staticmethod
    def encode(instance: ConfigFile) -> str:
        """Serialize to text: blank line between sections,
        blank line after each `[section]`.

        Raises `ValueError` on names the reader could not give back.
        """
        buf = StringIO()
        for idx, section in enumerate(instance.get_sections()):
            ConfigFileParser.__check_name(section, 'Section', '\n]')
            if idx:
                buf.write('\n')
            buf.write(f'[{section}]\n\n')
            for k, v in instance._get_pairs(section).items():
                ConfigFileParser.__check_name(k, 'Key', '\n=')
                if not k or k[0] == '[':
                    raise ValueError(
                        f'Key {k!r} in [{section}] cannot be written: '
                        'keys must be non-empty and not start with "[".')
                buf.write(f'{k}={write_to_string(v)}\n')
        return buf.getvalue()

    def write(self, instance: ConfigFile) -> None:
        """保存到`self`指定的文件。若设置了密钥或密码则加密保存。"""
        # encode and check the secret first, neither may truncate the file.
        data = self.encode(instance).encode(self._codec)
        if self._key is not None:
            EncryptedFile.check_key(self._key)
        elif self._password is not None:
            EncryptedFile.check_password(self._password)
        with open(self._fn, 'wb') as fp:
            if not self.encrypted:
                fp.write(data)
                return
            with self.__wrap(fp, CipherMode.WRITE_AES256) as enc:
                enc.write(data)

    # --- load ---------------------------------------------------------------

    @staticmethod
    def readstream(
        text: str, instance: ConfigFile, source: str = '<string>'
    ) -> None:
        """读取解码好的文本到`instance`。

        无回滚：出错行之前读到的键值对会留在`instance`里。
        """
        stream = VariantStream(text)
        section = ''
        while True:
            try:
                result = parse_tag_assign_eof(stream)
            except VariantParseError as e:
                logging.error(
                    f'ConfigFile::load - {source}:{e.line} '
                    f'error: {e.message}')
                raise
            match result:
                case EndOfStream():
                    return
                case Assignment(key=key, value=value):
                    instance.set_value(section, key, value)
                case SectionTag(name=name):
                    section = name

    def readinto(self, instance: ConfigFile) -> None:
        """Merge the handled file into an existing instance."""
        with open(self._fn, 'rb') as fp:
            if not self.encrypted:
                raw = fp.read()
            else:
                with self.__wrap(fp, CipherMode.READ) as enc:
                    raw = enc.read()
        self.readstream(self._decode(raw), instance, self._fn)

    def read(self) -> ConfigFile:
        """读取`self`指定的文件为新的`ConfigFile`。出错时不返回半成品。"""
        ret = ConfigFile()
        self.readinto(ret)
        return ret

    def __str__(self) -> str:
        return (
            f'{super().__str__()}({self._codec}'
            f'{", encrypted" if self.encrypted else ""})')


class ConfigYamlParser(FileHandler[ConfigFile]):
    """Export to (or import from) a YAML mapping of sections.

    Meant for humans to read. `Vector2` and friends become plain
    sequences, so they come back as lists.
    """

    def __from_plain(self, value: object) -> Variant:
        # YAML tags outside the config literals: timestamps, !!set.
        match value:
            case None | bool() | int() | float() | str() | bytes():
                return value
            case datetime() | date():
                return value.isoformat()
            case list() | tuple() | set():
                return [self.__from_plain(i) for i in value]
            case dict():
                return {
                    self.__from_plain(k): self.__from_plain(v)
                    for k, v in value.items()
                }
            case _:
                raise ConfigError(
                    f'{self._fn}: {type(value).__name__} '
                    'is not a config value.')

    @staticmethod
    def __to_plain(value: Variant) -> object:
        if isinstance(value, tuple):
            if type(value) in STRUCT_TYPES.values():
                return [float(i) for i in value]
            return [ConfigYamlParser.__to_plain(i) for i in value]
        if isinstance(value, list):
            return [ConfigYamlParser.__to_plain(i) for i in value]
        if isinstance(value, dict):
            return {
                (write_to_string(k) if isinstance(k, tuple) else k):
                ConfigYamlParser.__to_plain(v)
                for k, v in value.items()
            }
        if isinstance(value, bytearray):
            return bytes(value)
        return value

    def read(self) -> ConfigFile:
        with open(self._fn, 'rb') as fp:
            raw = fp.read()
        src = yaml.safe_load(self._decode(raw)) or {}
        if not isinstance(src, dict):
            raise ConfigError(f'{self._fn}: YAML root is not a mapping.')

        ret = ConfigFile()
        for section, pairs in src.items():
            if pairs is None:
                continue
            if not isinstance(pairs, dict):
                raise ConfigError(
                    f'{self._fn}: section "{section}" is not a mapping.')
            for k, v in pairs.items():
                ret.set_value(str(section), str(k), self.__from_plain(v))
        return ret

    def write(self, instance: ConfigFile) -> None:
        doc = {
            section: {
                k: self.__to_plain(v)
                for k, v in instance._get_pairs(section).items()
            }
            for section in instance.get_sections()
        }
        with open(self._fn, 'w', encoding=self._codec) as fp:
            yaml.safe_dump(doc, fp, allow_unicode=True, sort_keys=False)
