# -*- encoding: utf-8 -*-
# @File   : stream.py
# @Time   : 2024/11/05 22:31:18
# @Author : Kariko Lin

"""Encrypted container around a binary file object.

Layout (all fixed size but the last field):

    -------------------------
    offset | element
    -------|-----------------
    00H    | char magic[4]      `PVCE`
    04H    | byte key_source    0 = raw key, 1 = password
    05H    | byte salt[16]      PBKDF2 salt, random even for raw keys
    15H    | byte nonce[12]
    21H    | byte payload[]     AES-256-GCM ciphertext + 16 byte tag

The header itself is authenticated as associated data,
so a tampered header fails exactly like a wrong key.
"""

import os
from enum import Enum
from typing import BinaryIO

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..errors import EncryptionError

__all__ = ['CipherMode', 'EncryptedFile']


class CipherMode(Enum):
    READ = 1
    WRITE_AES256 = 2


class _KeySource(int, Enum):
    RAW = 0
    PASSWORD = 1


class EncryptedFile:
    MAGIC = b'PVCE'
    KEY_SIZE = 32
    SALT_SIZE = 16
    NONCE_SIZE = 12
    HEADER_SIZE = 4 + 1 + 16 + 12
    KDF_ITERATIONS = 200_000

    def __init__(self) -> None:
        self._base: BinaryIO | None = None
        self._mode: CipherMode | None = None
        self._header = b''
        self._cipher: AESGCM | None = None
        self._buf = bytearray()
        self._pos = 0

    @classmethod
    def derive_key(cls, password: str, salt: bytes) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=cls.KEY_SIZE,
            salt=salt,
            iterations=cls.KDF_ITERATIONS)
        return kdf.derive(password.encode('utf-8'))

    @classmethod
    def check_key(cls, key: bytes) -> None:
        if len(key) != cls.KEY_SIZE:
            raise EncryptionError(
                f'Key must be {cls.KEY_SIZE} bytes, got {len(key)}.')

    @staticmethod
    def check_password(password: str) -> None:
        if not password:
            raise EncryptionError('Password must not be empty.')

    def open_and_parse(
        self, base: BinaryIO, key: bytes, mode: CipherMode
    ) -> None:
        """Attach to `base` with a raw 32 byte key.

        In `MODE_READ` the whole payload gets authenticated here,
        so any `EncryptionError` is raised before data is handed out.
        """
        self.check_key(key)
        if mode is CipherMode.READ:
            self.__read_sealed(base, _KeySource.RAW, lambda _: bytes(key))
        else:
            self.__begin_write(
                base, _KeySource.RAW, os.urandom(self.SALT_SIZE), bytes(key))

    def open_and_parse_password(
        self, base: BinaryIO, password: str, mode: CipherMode
    ) -> None:
        """Like `open_and_parse()`, but derives the key from `password`."""
        self.check_password(password)
        if mode is CipherMode.READ:
            self.__read_sealed(
                base, _KeySource.PASSWORD,
                lambda salt: self.derive_key(password, salt))
        else:
            salt = os.urandom(self.SALT_SIZE)
            self.__begin_write(
                base, _KeySource.PASSWORD, salt,
                self.derive_key(password, salt))

    def __begin_write(
        self, base: BinaryIO, source: _KeySource, salt: bytes, key: bytes
    ) -> None:
        self._header = (
            self.MAGIC + bytes([source]) + salt
            + os.urandom(self.NONCE_SIZE))
        self._cipher = AESGCM(key)
        self._base = base
        self._mode = CipherMode.WRITE_AES256

    def __read_sealed(self, base: BinaryIO, source: _KeySource, keygen) -> None:
        header = base.read(self.HEADER_SIZE)
        if len(header) < self.HEADER_SIZE or header[:4] != self.MAGIC:
            raise EncryptionError('Not an encrypted config file.')
        if header[4] != source:
            try:
                found = _KeySource(header[4])
            except ValueError:
                raise EncryptionError(
                    f'Unknown key source {header[4]}.') from None
            raise EncryptionError(
                f'File was sealed with a {found.name.lower()} key, '
                f'not a {source.name.lower()} one.')

        salt = header[5:5 + self.SALT_SIZE]
        nonce = header[5 + self.SALT_SIZE:]
        try:
            plain = AESGCM(keygen(salt)).decrypt(nonce, base.read(), header)
        except InvalidTag:
            raise EncryptionError(
                'Integrity check failed: wrong key or corrupted file.'
            ) from None
        self._buf = bytearray(plain)
        self._base = base
        self._mode = CipherMode.READ

    @property
    def closed(self) -> bool:
        return self._base is None

    def read(self, size: int = -1) -> bytes:
        if self._mode is not CipherMode.READ or self._base is None:
            raise ValueError('EncryptedFile is not open for reading.')
        end = len(self._buf) if size < 0 else self._pos + size
        ret = bytes(self._buf[self._pos:end])
        self._pos += len(ret)
        return ret

    def write(self, data: bytes) -> int:
        if self._mode is not CipherMode.WRITE_AES256 or self._base is None:
            raise ValueError('EncryptedFile is not open for writing.')
        self._buf.extend(data)
        return len(data)

    def close(self) -> None:
        """Seal buffered plaintext into the base file (write mode only).

        The base file object itself is left open for its owner.
        """
        if self._base is None:
            return
        try:
            if self._mode is CipherMode.WRITE_AES256:
                nonce = self._header[5 + self.SALT_SIZE:]
                self._base.write(self._header + self._cipher.encrypt(
                    nonce, bytes(self._buf), self._header))
                self._base.flush()
        finally:
            self._base = None
            self._cipher = None
            self._buf.clear()

    def __enter__(self) -> 'EncryptedFile':
        return self

    def __exit__(self, *_) -> None:
        self.close()
