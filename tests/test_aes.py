"""
Tests for the AES helpers.
"""

import pytest

from kryptonite import aes
from kryptonite.errors import DecryptionFailure, IntegrityError, InvalidKey
from kryptonite.rand import strong_random_bytes

MESSAGE = b"Some simple\ntext message."
AUTH_DATA = b"Some random stuff."
PASSWORD = "Some re4lly secUre stuff!"


@pytest.fixture
def key_iv():
    return aes.generate_key(), strong_random_bytes(16)


class TestKeys:

    def test_generate_key_size(self):
        assert len(aes.generate_key()) == 32

    def test_generate_key_random(self):
        assert aes.generate_key() != aes.generate_key()

    def test_derive_key(self):
        key = aes.derive_key(PASSWORD, "S", 2)
        assert len(key) == 32
        assert key == aes.derive_key(PASSWORD, "S", 2)
        assert key != aes.derive_key(PASSWORD, "S", 3)
        assert key != aes.derive_key(PASSWORD, "T", 2)

    def test_derive_key_rounds(self):
        with pytest.raises(ValueError):
            aes.derive_key(PASSWORD, "S", 0)

    @pytest.mark.parametrize("key", [b"", b"x" * 15, b"x" * 64, "x" * 32])
    def test_bad_keys(self, key):
        with pytest.raises(InvalidKey):
            aes.encrypt_ctr(key, bytes(16), MESSAGE)


class TestCBC:

    def test_round_trip(self, key_iv):
        key, iv = key_iv
        cypher = aes.encrypt_cbc(key, iv, MESSAGE)
        assert len(cypher) % 16 == 0
        assert aes.decrypt_cbc(key, iv, cypher) == MESSAGE

    def test_block_aligned_message(self, key_iv):
        key, iv = key_iv
        cypher = aes.encrypt_cbc(key, iv, b"x" * 32)
        assert len(cypher) == 48
        assert aes.decrypt_cbc(key, iv, cypher) == b"x" * 32

    def test_truncated_ciphertext(self, key_iv):
        key, iv = key_iv
        cypher = aes.encrypt_cbc(key, iv, MESSAGE)
        with pytest.raises(DecryptionFailure):
            aes.decrypt_cbc(key, iv, cypher[:-1])


class TestCTR:

    def test_round_trip(self, key_iv):
        key, iv = key_iv
        cypher = aes.encrypt_ctr(key, iv, MESSAGE)
        assert len(cypher) == len(MESSAGE)
        assert aes.decrypt_ctr(key, iv, cypher) == MESSAGE


class TestGCM:

    def test_round_trip(self, key_iv):
        key, iv = key_iv
        cypher, tag = aes.encrypt_gcm(key, iv, AUTH_DATA, MESSAGE)
        assert len(tag) == 16
        assert aes.decrypt_gcm(key, iv, AUTH_DATA, cypher, tag) == MESSAGE

    def test_wrong_key(self, key_iv):
        key, iv = key_iv
        cypher, tag = aes.encrypt_gcm(key, iv, AUTH_DATA, MESSAGE)
        with pytest.raises(IntegrityError):
            aes.decrypt_gcm(aes.generate_key(), iv, AUTH_DATA, cypher, tag)

    def test_garbage(self, key_iv):
        key, iv = key_iv
        with pytest.raises(IntegrityError):
            aes.decrypt_gcm(key, iv, AUTH_DATA, b"bad cypher", b"bad tag")
