import pytest

from kryptonite import config
from kryptonite.keys import gen_rsa_keypair


@pytest.fixture(scope="session")
def keys():
    """Two independent 1024-bit key pairs."""
    priv1, pub1 = gen_rsa_keypair(1024)
    priv2, pub2 = gen_rsa_keypair(1024)
    return {"priv1": priv1, "pub1": pub1, "priv2": priv2, "pub2": pub2}


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    for name in (
        "KRYPTONITE_RSA_BITS",
        "KRYPTONITE_CHUNK_SIZE",
        "KRYPTONITE_STREAM_MAC_MODE",
        "KRYPTONITE_WORDLIST",
        "KRYPTONITE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    config.reset_settings()
    yield
    config.reset_settings()
