"""Runtime settings: module defaults with KRYPTONITE_* environment overrides."""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional, Tuple

DEFAULT_RSA_BITS = 2048
MIN_RSA_BITS = 1024
ALLOWED_PUBLIC_EXPONENTS: Tuple[int, ...] = (3, 65537)
AES_KEY_SIZE = 32
STREAM_CHUNK_SIZE = 64 * 1024

MAC_MODE_ASSOCIATED_DATA = "associated-data"
MAC_MODE_DERIVED = "derived"
MAC_MODES = (MAC_MODE_ASSOCIATED_DATA, MAC_MODE_DERIVED)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    rsa_bits: int = DEFAULT_RSA_BITS
    min_rsa_bits: int = MIN_RSA_BITS
    allowed_public_exponents: Tuple[int, ...] = ALLOWED_PUBLIC_EXPONENTS
    aes_key_size: int = AES_KEY_SIZE
    stream_chunk_size: int = STREAM_CHUNK_SIZE
    stream_mac_mode: str = MAC_MODE_ASSOCIATED_DATA
    wordlist_path: Optional[str] = None
    log_level: str = "WARNING"


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def load_settings() -> Settings:
    """Build settings from defaults plus environment overrides."""
    mac_mode = os.environ.get("KRYPTONITE_STREAM_MAC_MODE", MAC_MODE_ASSOCIATED_DATA)
    if mac_mode not in MAC_MODES:
        raise ValueError(f"KRYPTONITE_STREAM_MAC_MODE must be one of {MAC_MODES}, got {mac_mode!r}")
    return Settings(
        rsa_bits=_env_int("KRYPTONITE_RSA_BITS", DEFAULT_RSA_BITS),
        stream_chunk_size=_env_int("KRYPTONITE_CHUNK_SIZE", STREAM_CHUNK_SIZE),
        stream_mac_mode=mac_mode,
        wordlist_path=os.environ.get("KRYPTONITE_WORDLIST") or None,
        log_level=os.environ.get("KRYPTONITE_LOG_LEVEL", "WARNING").upper(),
    )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Drop cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure root logging for command-line use. Library code never calls this."""
    level = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    return logging.getLogger("kryptonite")


__all__ = [
    "DEFAULT_RSA_BITS",
    "MIN_RSA_BITS",
    "ALLOWED_PUBLIC_EXPONENTS",
    "AES_KEY_SIZE",
    "STREAM_CHUNK_SIZE",
    "MAC_MODE_ASSOCIATED_DATA",
    "MAC_MODE_DERIVED",
    "MAC_MODES",
    "Settings",
    "load_settings",
    "get_settings",
    "reset_settings",
    "setup_logging",
]
