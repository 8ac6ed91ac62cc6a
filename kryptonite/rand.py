"""Random source and entropy helpers."""

import logging
import math
import os
from collections import Counter
from typing import Union

from .digest import sha512_bytes
from .errors import InsufficientEntropy

logger = logging.getLogger(__name__)


def strong_random_bytes(n: int) -> bytes:
    """Return ``n`` bytes from the operating system CSPRNG."""
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise InsufficientEntropy(f"cannot produce {n!r} random bytes")
    try:
        return os.urandom(n)
    except (NotImplementedError, OSError) as exc:
        logger.error("OS random source failed: %s", exc)
        raise InsufficientEntropy("operating system random source unavailable") from exc


def hash_round(digest: bytes, count: int) -> bytes:
    """Hash ``digest`` with SHA-512 over itself ``count`` times."""
    for _ in range(max(count, 0)):
        digest = sha512_bytes(digest)
    return digest


def shannon_entropy(data: Union[bytes, str]) -> float:
    """Shannon index of ``data`` in bits per symbol (bytes or characters)."""
    if not data:
        return 0.0
    length = len(data)
    entropy = 0.0
    for count in Counter(data).values():
        freq = count / length
        entropy -= freq * math.log2(freq)
    return entropy


__all__ = ["strong_random_bytes", "hash_round", "shannon_entropy"]
