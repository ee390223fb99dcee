# -*- encoding: utf-8 -*-
# @File   : abstract.py
# @Time   : 2024/11/02 21:40:12
# @Author : Kariko Lin

import logging
from abc import ABCMeta, abstractmethod
from os import PathLike, fspath
from typing import Generic, TypeVar

import chardet

T = TypeVar('T')


class FileHandler(Generic[T], metaclass=ABCMeta):
    """Binds one file path to a reader/writer of `T`."""

    def __init__(
        self, filename: str | PathLike[str], encoding: str = 'utf-8'
    ) -> None:
        self._fn = fspath(filename)
        self._codec = encoding

    @abstractmethod
    def read(self) -> T:
        raise NotImplementedError

    @abstractmethod
    def write(self, instance: T) -> None:
        raise NotImplementedError

    def _decode(self, raw: bytes) -> str:
        """Decode with the handler codec, guessing with `chardet` on failure."""
        try:
            return raw.decode(self._codec)
        except UnicodeDecodeError:
            pass

        codec = chardet.detect(raw)
        if codec['encoding'] is None or codec['confidence'] < 0.8:
            codec = {'encoding': 'utf-8'}
        logging.warning(
            f'{self._fn} is not valid {self._codec}, '
            f'decoding as {codec["encoding"]} instead.')
        # still undecodable bytes are kept visible instead of dropped.
        try:
            return raw.decode(codec['encoding'], errors='replace')
        except LookupError:
            return raw.decode('utf-8', errors='replace')

    def __str__(self) -> str:
        return self._fn
