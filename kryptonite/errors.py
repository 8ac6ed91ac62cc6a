"""Exception hierarchy for the :mod:`kryptonite` package.

None of these are transient: callers should never retry a cryptographic
failure. Provider errors are chained as ``__cause__``.
"""


class KryptoniteError(Exception):
    """Base exception for every failure raised by the package."""


class InvalidKey(KryptoniteError):
    """A key argument does not have the capability the operation needs."""


class KeyGenerationError(KryptoniteError):
    pass


class SigningFailure(KryptoniteError):
    pass


class EncryptionFailure(KryptoniteError):
    pass


class DecryptionFailure(KryptoniteError):
    """Decryption failed, usually because the key does not match the ciphertext."""


class InvalidSignature(KryptoniteError):
    """The signature does not authenticate the signed bytes."""


class DeserializationError(KryptoniteError):
    """Serialized envelope bytes are malformed."""


class IntegrityError(KryptoniteError):
    """Authentication tag mismatch. No plaintext was released."""


class InvalidDataSize(KryptoniteError):
    """Entropy byte length is not a multiple of 4 in [4, 1024]."""


class InvalidWord(KryptoniteError):
    """A mnemonic word is not part of the vocabulary."""


class InvalidChecksum(KryptoniteError):
    pass


class InsufficientEntropy(KryptoniteError):
    """The random source could not produce the requested bytes."""


__all__ = [
    "KryptoniteError",
    "InvalidKey",
    "KeyGenerationError",
    "SigningFailure",
    "EncryptionFailure",
    "DecryptionFailure",
    "InvalidSignature",
    "DeserializationError",
    "IntegrityError",
    "InvalidDataSize",
    "InvalidWord",
    "InvalidChecksum",
    "InsufficientEntropy",
]
