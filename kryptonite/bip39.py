"""
Bijective mapping between entropy and checksummed word phrases (BIP-39 layout).

Entropy must be a multiple of 4 bytes between 4 and 1024 bytes. The checksum
is the first ``len(data) * 8 // 32`` bits of SHA-256(data); data and checksum
bits are cut into 11-bit groups, each naming one of 2048 vocabulary words.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from mnemonic import Mnemonic

from .config import get_settings
from .digest import sha256_bytes
from .errors import InvalidChecksum, InvalidDataSize, InvalidWord
from .rand import strong_random_bytes

logger = logging.getLogger(__name__)

VOCABULARY_SIZE = 2048
BITS_PER_WORD = 11
MIN_DATA_SIZE = 4
MAX_DATA_SIZE = 1024


class Vocabulary:
    """Ordered list of exactly 2048 distinct, case-sensitive words."""

    def __init__(self, words: Iterable[str]):
        words = list(words)
        if len(words) != VOCABULARY_SIZE:
            raise ValueError(f"vocabulary needs {VOCABULARY_SIZE} words, got {len(words)}")
        index = {w: i for i, w in enumerate(words)}
        if len(index) != VOCABULARY_SIZE:
            raise ValueError("vocabulary words must be distinct")
        self._words = words
        self._index: Dict[str, int] = index

    @classmethod
    def english(cls) -> "Vocabulary":
        return cls(Mnemonic("english").wordlist)

    @classmethod
    def from_file(cls, path: str) -> "Vocabulary":
        lines = Path(path).read_text(encoding="utf-8").splitlines()
        return cls(line.strip() for line in lines if line.strip())

    def __len__(self) -> int:
        return len(self._words)

    def __getitem__(self, index: int) -> str:
        return self._words[index]

    def index_of(self, word: str) -> Optional[int]:
        return self._index.get(word)


@dataclass(frozen=True)
class MnemonicPhrase:
    data: bytes
    checksum: str  # bitstring of '0'/'1'
    words: str


def valid_data_size(size: int) -> bool:
    return MIN_DATA_SIZE <= size <= MAX_DATA_SIZE and size % 4 == 0


def _bits(data: bytes) -> str:
    return "".join(format(b, "08b") for b in data)


def compute_checksum(data: bytes) -> str:
    return _bits(sha256_bytes(data))[: len(data) * 8 // 32]


class MnemonicCodec:
    def __init__(self, vocabulary: Vocabulary):
        self.vocabulary = vocabulary

    def from_entropy(self, data: bytes) -> MnemonicPhrase:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError("entropy must be bytes")
        data = bytes(data)
        if not valid_data_size(len(data)):
            raise InvalidDataSize(f"entropy must be a multiple of 4 bytes in [4, 1024], got {len(data)}")
        checksum = compute_checksum(data)
        bits = _bits(data) + checksum
        words = [
            self.vocabulary[int(bits[i:i + BITS_PER_WORD], 2)]
            for i in range(0, len(bits), BITS_PER_WORD)
        ]
        return MnemonicPhrase(data=data, checksum=checksum, words=" ".join(words))

    def to_entropy(self, phrase: str) -> MnemonicPhrase:
        """
        Rebuild the entropy behind ``phrase``.

        Stops at the first unknown word with InvalidWord, then checks the
        embedded checksum (InvalidChecksum) and finally the decoded size
        (InvalidDataSize).
        """
        words = phrase.split()
        groups: List[str] = []
        for word in words:
            index = self.vocabulary.index_of(word)
            if index is None:
                raise InvalidWord(f"unknown word {word!r}")
            groups.append(format(index, "011b"))
        bits = "".join(groups)

        total = len(bits)
        checksum_size = (total - total // 33) // 32
        data_size = (total - checksum_size) // 8
        data = int(bits[:data_size * 8], 2).to_bytes(data_size, "big") if data_size else b""
        checksum = bits[data_size * 8:]

        if checksum != compute_checksum(data):
            logger.warning("mnemonic checksum mismatch for %d word phrase", len(words))
            raise InvalidChecksum("mnemonic checksum does not match its data")
        if not valid_data_size(data_size):
            raise InvalidDataSize(f"phrase decodes to {data_size} bytes of entropy")
        return MnemonicPhrase(data=data, checksum=checksum, words=" ".join(words))

    def generate(self, size_in_bytes: int) -> MnemonicPhrase:
        if not valid_data_size(size_in_bytes):
            raise InvalidDataSize(f"entropy must be a multiple of 4 bytes in [4, 1024], got {size_in_bytes}")
        return self.from_entropy(strong_random_bytes(size_in_bytes))


_default_codec: Optional[MnemonicCodec] = None


def default_codec() -> MnemonicCodec:
    """Codec over the configured vocabulary, built on first use."""
    global _default_codec
    if _default_codec is None:
        path = get_settings().wordlist_path
        vocabulary = Vocabulary.from_file(path) if path else Vocabulary.english()
        _default_codec = MnemonicCodec(vocabulary)
    return _default_codec


def from_entropy(data: bytes) -> MnemonicPhrase:
    return default_codec().from_entropy(data)


def to_entropy(phrase: str) -> MnemonicPhrase:
    return default_codec().to_entropy(phrase)


def generate(size_in_bytes: int) -> MnemonicPhrase:
    return default_codec().generate(size_in_bytes)


__all__ = [
    "VOCABULARY_SIZE",
    "Vocabulary",
    "MnemonicPhrase",
    "MnemonicCodec",
    "valid_data_size",
    "compute_checksum",
    "default_codec",
    "from_entropy",
    "to_entropy",
    "generate",
]
