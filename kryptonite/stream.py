"""Streaming AES-CTR with one running HMAC-SHA256 tag over ``iv || ciphertext``."""

import logging
import os
import struct
import tempfile
from typing import BinaryIO, Callable, Iterable, List, Optional, Tuple

from cryptography.exceptions import InvalidSignature as _CryptoInvalidSignature
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from .aes import check_iv, check_key
from .config import MAC_MODE_DERIVED, MAC_MODES, get_settings
from .errors import IntegrityError

logger = logging.getLogger(__name__)

MAC_INFO = b"kryptonite/stream/mac"
TAG_SIZE = 32


def _mac_mode(mac_mode: Optional[str]) -> str:
    mode = mac_mode or get_settings().stream_mac_mode
    if mode not in MAC_MODES:
        raise ValueError(f"unknown MAC mode {mode!r}, expected one of {MAC_MODES}")
    return mode


def _check_associated_data(associated_data) -> bytes:
    if not isinstance(associated_data, (bytes, bytearray, memoryview)):
        raise TypeError("associated data must be bytes")
    return bytes(associated_data)


def _start_mac(key: bytes, iv: bytes, associated_data: bytes, mac_mode: Optional[str]) -> hmac.HMAC:
    mode = _mac_mode(mac_mode)
    if mode == MAC_MODE_DERIVED:
        mac_key = HKDF(algorithm=hashes.SHA256(), length=32, salt=None, info=MAC_INFO).derive(key)
        h = hmac.HMAC(mac_key, hashes.SHA256())
        h.update(struct.pack(">Q", len(associated_data)))
        h.update(associated_data)
    else:
        h = hmac.HMAC(associated_data, hashes.SHA256())
    h.update(iv)
    return h


def _ctr(key: bytes, iv: bytes) -> Cipher:
    return Cipher(algorithms.AES(key), modes.CTR(iv))


class StreamEncryptor:
    """Single-use encryption session: counter-mode state plus the running tag."""

    def __init__(self, key: bytes, iv: bytes, associated_data: bytes, mac_mode: Optional[str] = None):
        key = check_key(key)
        iv = check_iv(iv)
        self._cipher = _ctr(key, iv).encryptor()
        self._mac = _start_mac(key, iv, _check_associated_data(associated_data), mac_mode)
        self.bytes_processed = 0

    def update(self, chunk: bytes) -> bytes:
        out = self._cipher.update(chunk)
        self._mac.update(out)
        self.bytes_processed += len(out)
        return out

    def finalize(self) -> bytes:
        self._cipher.finalize()
        return self._mac.finalize()


class _Verifier:
    def __init__(self, key: bytes, iv: bytes, associated_data: bytes, mac_mode: Optional[str]):
        self._mac = _start_mac(key, iv, _check_associated_data(associated_data), mac_mode)

    def update(self, chunk: bytes) -> None:
        self._mac.update(chunk)

    def verify(self, expected_tag: bytes) -> None:
        try:
            self._mac.verify(bytes(expected_tag))
        except _CryptoInvalidSignature:
            logger.warning("stream tag mismatch, discarding ciphertext")
            raise IntegrityError("stream authentication tag does not match") from None


def encrypt_stream(
    chunks: Iterable[bytes],
    key: bytes,
    iv: bytes,
    associated_data: bytes,
    write: Callable[[bytes], object],
    mac_mode: Optional[str] = None,
) -> bytes:
    """Encrypt ``chunks`` in order, passing each ciphertext chunk to ``write``. Returns the tag."""
    session = StreamEncryptor(key, iv, associated_data, mac_mode)
    for chunk in chunks:
        write(session.update(chunk))
    tag = session.finalize()
    logger.debug("encrypted stream of %d bytes", session.bytes_processed)
    return tag


def encrypt(
    chunks: Iterable[bytes],
    key: bytes,
    iv: bytes,
    associated_data: bytes,
    mac_mode: Optional[str] = None,
) -> Tuple[List[bytes], bytes]:
    out: List[bytes] = []
    tag = encrypt_stream(chunks, key, iv, associated_data, out.append, mac_mode)
    return out, tag


def decrypt(
    chunks: Iterable[bytes],
    key: bytes,
    iv: bytes,
    associated_data: bytes,
    expected_tag: bytes,
    mac_mode: Optional[str] = None,
) -> List[bytes]:
    """
    Authenticate the whole ciphertext, then decrypt it.

    The ciphertext is buffered in memory between the two passes. Raises
    IntegrityError before any plaintext exists if the tag does not match.
    """
    key = check_key(key)
    iv = check_iv(iv)
    verifier = _Verifier(key, iv, associated_data, mac_mode)
    buffered: List[bytes] = []
    for chunk in chunks:
        chunk = bytes(chunk)
        verifier.update(chunk)
        buffered.append(chunk)
    verifier.verify(expected_tag)

    dec = _ctr(key, iv).decryptor()
    plain = [dec.update(chunk) for chunk in buffered]
    dec.finalize()
    return plain


def _read_chunks(f: BinaryIO, chunk_size: int) -> Iterable[bytes]:
    while True:
        block = f.read(chunk_size)
        if not block:
            return
        yield block


def encrypt_file(
    src: str,
    dst: str,
    key: bytes,
    iv: bytes,
    associated_data: bytes,
    chunk_size: Optional[int] = None,
    mac_mode: Optional[str] = None,
) -> bytes:
    """Encrypt ``src`` into ``dst``. ``dst`` is replaced only once the whole stream is done."""
    session = StreamEncryptor(key, iv, associated_data, mac_mode)
    chunk_size = chunk_size or get_settings().stream_chunk_size

    fd, tmp_path = tempfile.mkstemp(prefix=".kryptonite-", dir=os.path.dirname(os.path.abspath(dst)))
    try:
        with os.fdopen(fd, "wb") as fout, open(src, "rb") as fin:
            for chunk in _read_chunks(fin, chunk_size):
                fout.write(session.update(chunk))
        tag = session.finalize()
        os.replace(tmp_path, dst)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
    logger.debug("encrypted %s into %s, %d bytes", src, dst, session.bytes_processed)
    return tag


def decrypt_file(
    src: str,
    dst: str,
    key: bytes,
    iv: bytes,
    associated_data: bytes,
    expected_tag: bytes,
    chunk_size: Optional[int] = None,
    mac_mode: Optional[str] = None,
) -> None:
    """
    Two-read verify-then-decrypt of ``src`` into ``dst``.

    The first read only authenticates. The second read decrypts into a
    temporary file beside ``dst`` while hashing again, and the file is
    renamed into place only if that second hash matches too.
    """
    key = check_key(key)
    iv = check_iv(iv)
    chunk_size = chunk_size or get_settings().stream_chunk_size

    verifier = _Verifier(key, iv, associated_data, mac_mode)
    with open(src, "rb") as fin:
        for chunk in _read_chunks(fin, chunk_size):
            verifier.update(chunk)
    verifier.verify(expected_tag)

    fd, tmp_path = tempfile.mkstemp(prefix=".kryptonite-", dir=os.path.dirname(os.path.abspath(dst)))
    try:
        recheck = _Verifier(key, iv, associated_data, mac_mode)
        dec = _ctr(key, iv).decryptor()
        with os.fdopen(fd, "wb") as fout, open(src, "rb") as fin:
            for chunk in _read_chunks(fin, chunk_size):
                recheck.update(chunk)
                fout.write(dec.update(chunk))
            dec.finalize()
        recheck.verify(expected_tag)
        os.replace(tmp_path, dst)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
    logger.debug("decrypted %s into %s", src, dst)


__all__ = [
    "TAG_SIZE",
    "StreamEncryptor",
    "encrypt_stream",
    "encrypt",
    "decrypt",
    "encrypt_file",
    "decrypt_file",
]
