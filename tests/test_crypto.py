"""Tests for the EncryptedFile wrapper."""

import io
import os

import pytest

from pyvarcfg import CipherMode, EncryptedFile, EncryptionError


@pytest.fixture(autouse=True)
def fast_kdf(monkeypatch):
    monkeypatch.setattr(EncryptedFile, "KDF_ITERATIONS", 1000)


def seal(data, *, key=None, password=None):
    base = io.BytesIO()
    with EncryptedFile() as enc:
        if key is not None:
            enc.open_and_parse(base, key, CipherMode.WRITE_AES256)
        else:
            enc.open_and_parse_password(
                base, password, CipherMode.WRITE_AES256)
        enc.write(data)
    return base.getvalue()


def unseal(blob, *, key=None, password=None):
    enc = EncryptedFile()
    if key is not None:
        enc.open_and_parse(io.BytesIO(blob), key, CipherMode.READ)
    else:
        enc.open_and_parse_password(io.BytesIO(blob), password, CipherMode.READ)
    with enc:
        return enc.read()


class TestRawKey:
    def test_round_trip(self):
        key = os.urandom(32)
        blob = seal(b"secret=1\n", key=key)
        assert blob.startswith(EncryptedFile.MAGIC)
        assert b"secret" not in blob
        assert unseal(blob, key=key) == b"secret=1\n"

    def test_wrong_key(self):
        blob = seal(b"data", key=os.urandom(32))
        with pytest.raises(EncryptionError, match="Integrity check failed"):
            unseal(blob, key=os.urandom(32))

    @pytest.mark.parametrize("size", [0, 16, 31, 33])
    def test_key_size_checked(self, size):
        with pytest.raises(EncryptionError, match="32 bytes"):
            EncryptedFile().open_and_parse(
                io.BytesIO(), b"k" * size, CipherMode.WRITE_AES256)

    def test_nonce_is_fresh(self):
        key = os.urandom(32)
        assert seal(b"same", key=key) != seal(b"same", key=key)


class TestPassword:
    def test_round_trip(self):
        blob = seal(b"pw data", password="pw")
        assert unseal(blob, password="pw") == b"pw data"

    def test_wrong_password(self):
        blob = seal(b"pw data", password="pw")
        with pytest.raises(EncryptionError):
            unseal(blob, password="wrong-pw")

    def test_empty_password(self):
        with pytest.raises(EncryptionError, match="empty"):
            EncryptedFile().open_and_parse_password(
                io.BytesIO(), "", CipherMode.WRITE_AES256)

    def test_key_source_mismatch(self):
        blob = seal(b"x", key=os.urandom(32))
        with pytest.raises(EncryptionError, match="raw key"):
            unseal(blob, password="pw")


class TestContainer:
    def test_bad_magic(self):
        with pytest.raises(EncryptionError, match="Not an encrypted"):
            unseal(b"[section]\n\nkey=1\n" * 4, password="pw")

    def test_truncated_header(self):
        with pytest.raises(EncryptionError, match="Not an encrypted"):
            unseal(EncryptedFile.MAGIC + b"\x01", password="pw")

    def test_tampered_header(self):
        blob = bytearray(seal(b"x", password="pw"))
        blob[-30] ^= 0xFF
        with pytest.raises(EncryptionError):
            unseal(bytes(blob), password="pw")

    def test_partial_reads(self):
        key = os.urandom(32)
        enc = EncryptedFile()
        enc.open_and_parse(
            io.BytesIO(seal(b"abcdef", key=key)), key, CipherMode.READ)
        assert enc.read(2) == b"ab"
        assert enc.read() == b"cdef"
        assert enc.read() == b""

    def test_mode_is_enforced(self):
        enc = EncryptedFile()
        enc.open_and_parse(
            io.BytesIO(), os.urandom(32), CipherMode.WRITE_AES256)
        with pytest.raises(ValueError, match="reading"):
            enc.read()

    def test_close_leaves_base_open(self):
        base = io.BytesIO()
        enc = EncryptedFile()
        enc.open_and_parse(base, os.urandom(32), CipherMode.WRITE_AES256)
        enc.close()
        enc.close()
        assert enc.closed
        assert not base.closed
        with pytest.raises(ValueError):
            enc.write(b"late")
