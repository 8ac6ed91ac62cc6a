"""RSA primitives: signing, verification, and the four encrypt/decrypt directions."""

import logging
import math

from cryptography.exceptions import InvalidSignature as _CryptoInvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding

from .errors import DecryptionFailure, EncryptionFailure, SigningFailure
from .keys import require_private, require_public
from .rand import strong_random_bytes

logger = logging.getLogger(__name__)


def _pss() -> padding.PSS:
    return padding.PSS(
        mgf=padding.MGF1(hashes.SHA256()),
        salt_length=padding.PSS.MAX_LENGTH,
    )


def _oaep() -> padding.OAEP:
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=hashes.SHA256()),
        algorithm=hashes.SHA256(),
        label=None,
    )


def sign_bytes(priv, data: bytes) -> bytes:
    priv = require_private(priv)
    try:
        return priv.sign(data, _pss(), hashes.SHA256())
    except (ValueError, TypeError) as exc:
        raise SigningFailure(str(exc)) from exc


def verify_signature(pub, data: bytes, sig: bytes) -> bool:
    pub = require_public(pub)
    try:
        pub.verify(sig, data, _pss(), hashes.SHA256())
        return True
    except (_CryptoInvalidSignature, ValueError, TypeError):
        return False


def encrypt_public(pub, data: bytes) -> bytes:
    pub = require_public(pub)
    try:
        return pub.encrypt(data, _oaep())
    except (ValueError, TypeError) as exc:
        raise EncryptionFailure(str(exc)) from exc


def decrypt_private(priv, data: bytes) -> bytes:
    priv = require_private(priv)
    try:
        return priv.decrypt(data, _oaep())
    except (ValueError, TypeError) as exc:
        raise DecryptionFailure(str(exc)) from exc


def _blinding_factor(n: int) -> int:
    size = (n.bit_length() + 7) // 8
    while True:
        r = int.from_bytes(strong_random_bytes(size), "big") % n
        if r > 1 and math.gcd(r, n) == 1:
            return r


def _private_op(nums, m: int) -> int:
    """Blinded CRT evaluation of m^d mod n, checked against the public exponent."""
    pub = nums.public_numbers
    n, e = pub.n, pub.e
    r = _blinding_factor(n)
    blinded = (m * pow(r, e, n)) % n
    s1 = pow(blinded, nums.dmp1, nums.p)
    s2 = pow(blinded, nums.dmq1, nums.q)
    s = s2 + nums.q * ((nums.iqmp * (s1 - s2)) % nums.p)
    c = (s * pow(r, -1, n)) % n
    if pow(c, e, n) != m:
        raise EncryptionFailure("private key operation failed its consistency check")
    return c


def encrypt_private(priv, data: bytes) -> bytes:
    """
    Encrypt with the private exponent using a PKCS#1 v1.5 type 1 block.

    Anyone holding the public key can recover the message with
    decrypt_public(); this proves origin, it does not hide the content.
    """
    priv = require_private(priv)
    if not isinstance(data, (bytes, bytearray)):
        raise EncryptionFailure("message must be bytes")
    nums = priv.private_numbers()
    n = nums.public_numbers.n
    k = (n.bit_length() + 7) // 8
    if len(data) > k - 11:
        raise EncryptionFailure(f"message too long for a {k * 8}-bit key")
    block = b"\x00\x01" + b"\xff" * (k - 3 - len(data)) + b"\x00" + bytes(data)
    c = _private_op(nums, int.from_bytes(block, "big"))
    return c.to_bytes(k, "big")


def decrypt_public(pub, data: bytes) -> bytes:
    pub = require_public(pub)
    try:
        return pub.recover_data_from_signature(data, padding.PKCS1v15(), None)
    except (_CryptoInvalidSignature, ValueError, TypeError) as exc:
        raise DecryptionFailure("cannot recover message with this public key") from exc


__all__ = [
    "sign_bytes",
    "verify_signature",
    "encrypt_public",
    "decrypt_private",
    "encrypt_private",
    "decrypt_public",
]
