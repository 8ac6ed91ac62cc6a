"""
Authenticated RSA envelopes.

Encryption signs the ciphertext, so a receiver authenticates before it
decrypts anything. Wire format v1:

    [u32 big-endian signature length][signature][ciphertext]
"""

import logging
import struct
from dataclasses import dataclass
from typing import Optional, Union

from . import rsa as _rsa
from .errors import DeserializationError, InvalidSignature
from .keys import gen_rsa_keypair, require_private, require_public

logger = logging.getLogger(__name__)

_LEN = struct.Struct(">I")


@dataclass(frozen=True)
class Envelope:
    signature: bytes
    ciphertext: bytes

    def to_bytes(self) -> bytes:
        return serialize_envelope(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Envelope":
        return deserialize_envelope(data)


def serialize_envelope(env: Envelope) -> bytes:
    return _LEN.pack(len(env.signature)) + env.signature + env.ciphertext


def deserialize_envelope(data: bytes) -> Envelope:
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise DeserializationError("envelope must be bytes")
    data = bytes(data)
    if len(data) < _LEN.size:
        raise DeserializationError("envelope shorter than its length prefix")
    (sig_len,) = _LEN.unpack_from(data)
    body = data[_LEN.size:]
    if sig_len == 0 or sig_len >= len(body):
        raise DeserializationError(f"declared signature length {sig_len} does not fit {len(body)} bytes")
    return Envelope(signature=body[:sig_len], ciphertext=body[sig_len:])


def new_keypair(bits: Optional[int] = None, public_exponent: int = 65537):
    return gen_rsa_keypair(bits, public_exponent)


def authenticated_encrypt(encrypt_key, sign_key, message: bytes) -> Envelope:
    """Encrypt ``message`` for ``encrypt_key`` and sign the ciphertext with ``sign_key``."""
    require_public(encrypt_key)
    require_private(sign_key)
    ciphertext = _rsa.encrypt_public(encrypt_key, message)
    signature = _rsa.sign_bytes(sign_key, ciphertext)
    logger.debug("sealed envelope: %d byte ciphertext", len(ciphertext))
    return Envelope(signature=signature, ciphertext=ciphertext)


def authenticated_decrypt(decrypt_key, verify_key, envelope: Union[bytes, Envelope]) -> bytes:
    """
    Verify then decrypt a serialized envelope.

    Raises DeserializationError, InvalidSignature or DecryptionFailure, in
    that order of checking. Decryption is never attempted on ciphertext whose
    signature did not verify.
    """
    require_private(decrypt_key)
    require_public(verify_key)
    env = envelope if isinstance(envelope, Envelope) else deserialize_envelope(envelope)
    if not _rsa.verify_signature(verify_key, env.ciphertext, env.signature):
        logger.warning("envelope signature rejected")
        raise InvalidSignature("envelope signature does not match the verification key")
    return _rsa.decrypt_private(decrypt_key, env.ciphertext)


__all__ = [
    "Envelope",
    "serialize_envelope",
    "deserialize_envelope",
    "new_keypair",
    "authenticated_encrypt",
    "authenticated_decrypt",
]
