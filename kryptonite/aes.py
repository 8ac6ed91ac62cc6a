"""
AES helpers: key generation, hash-chain key derivation and CBC/CTR/GCM modes.

derive_key() is a plain SHA-512 chain, not a password-hardening KDF.
"""

from typing import Tuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .config import get_settings
from .errors import DecryptionFailure, EncryptionFailure, IntegrityError, InvalidKey
from .rand import hash_round, strong_random_bytes

BLOCK_SIZE = 16
GCM_TAG_SIZE = 16
KEY_SIZES = (16, 24, 32)


def check_key(key: bytes) -> bytes:
    if not isinstance(key, (bytes, bytearray)) or len(key) not in KEY_SIZES:
        raise InvalidKey("AES key must be 128, 192 or 256 bits")
    return bytes(key)


def check_iv(iv: bytes) -> bytes:
    if not isinstance(iv, (bytes, bytearray)) or len(iv) != BLOCK_SIZE:
        raise InvalidKey(f"initialization vector must be {BLOCK_SIZE} bytes")
    return bytes(iv)


def generate_key() -> bytes:
    return strong_random_bytes(get_settings().aes_key_size)


def derive_key(password: str, salt: str, rounds: int) -> bytes:
    """Deterministic key from ``password:salt`` hashed ``rounds`` times."""
    if rounds < 1:
        raise ValueError("rounds must be at least 1")
    digest = hash_round(f"{password}:{salt}".encode("utf-8"), rounds)
    return digest[:get_settings().aes_key_size]


def encrypt_cbc(key: bytes, iv: bytes, msg: bytes) -> bytes:
    padder = padding.PKCS7(BLOCK_SIZE * 8).padder()
    padded = padder.update(msg) + padder.finalize()
    enc = Cipher(algorithms.AES(check_key(key)), modes.CBC(check_iv(iv))).encryptor()
    return enc.update(padded) + enc.finalize()


def decrypt_cbc(key: bytes, iv: bytes, cypher: bytes) -> bytes:
    dec = Cipher(algorithms.AES(check_key(key)), modes.CBC(check_iv(iv))).decryptor()
    try:
        padded = dec.update(cypher) + dec.finalize()
        unpadder = padding.PKCS7(BLOCK_SIZE * 8).unpadder()
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as exc:
        raise DecryptionFailure("invalid CBC ciphertext or padding") from exc


def encrypt_ctr(key: bytes, iv: bytes, msg: bytes) -> bytes:
    enc = Cipher(algorithms.AES(check_key(key)), modes.CTR(check_iv(iv))).encryptor()
    return enc.update(msg) + enc.finalize()


def decrypt_ctr(key: bytes, iv: bytes, cypher: bytes) -> bytes:
    dec = Cipher(algorithms.AES(check_key(key)), modes.CTR(check_iv(iv))).decryptor()
    return dec.update(cypher) + dec.finalize()


def encrypt_gcm(key: bytes, iv: bytes, ad: bytes, msg: bytes) -> Tuple[bytes, bytes]:
    """Return ``(ciphertext, tag)``."""
    try:
        sealed = AESGCM(check_key(key)).encrypt(iv, msg, ad)
    except (ValueError, TypeError) as exc:
        raise EncryptionFailure(str(exc)) from exc
    return sealed[:-GCM_TAG_SIZE], sealed[-GCM_TAG_SIZE:]


def decrypt_gcm(key: bytes, iv: bytes, ad: bytes, cypher: bytes, tag: bytes) -> bytes:
    try:
        return AESGCM(check_key(key)).decrypt(iv, cypher + tag, ad)
    except InvalidTag as exc:
        raise IntegrityError("GCM tag does not authenticate the ciphertext") from exc
    except (ValueError, TypeError) as exc:
        raise DecryptionFailure(str(exc)) from exc


__all__ = [
    "BLOCK_SIZE",
    "GCM_TAG_SIZE",
    "KEY_SIZES",
    "check_key",
    "check_iv",
    "generate_key",
    "derive_key",
    "encrypt_cbc",
    "decrypt_cbc",
    "encrypt_ctr",
    "decrypt_ctr",
    "encrypt_gcm",
    "decrypt_gcm",
]
