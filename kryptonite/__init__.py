from .errors import (
    KryptoniteError,
    InvalidKey,
    KeyGenerationError,
    SigningFailure,
    EncryptionFailure,
    DecryptionFailure,
    InvalidSignature,
    DeserializationError,
    IntegrityError,
    InvalidDataSize,
    InvalidWord,
    InvalidChecksum,
    InsufficientEntropy,
)
from .keys import gen_rsa_keypair
from .envelope import Envelope, authenticated_encrypt, authenticated_decrypt
from .stream import StreamEncryptor
from .bip39 import MnemonicCodec, MnemonicPhrase, Vocabulary, from_entropy, to_entropy
from .rand import strong_random_bytes

__version__ = "0.2.0"

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
    "gen_rsa_keypair",
    "Envelope",
    "authenticated_encrypt",
    "authenticated_decrypt",
    "StreamEncryptor",
    "MnemonicCodec",
    "MnemonicPhrase",
    "Vocabulary",
    "from_entropy",
    "to_entropy",
    "strong_random_bytes",
]
