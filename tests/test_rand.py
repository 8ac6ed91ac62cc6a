import pytest

from kryptonite.digest import hash_bytes, sha256_bytes, sha512_bytes
from kryptonite.errors import InsufficientEntropy
from kryptonite.rand import hash_round, shannon_entropy, strong_random_bytes


class TestRandomBytes:

    @pytest.mark.parametrize("n", [0, 16, 32])
    def test_length(self, n):
        assert len(strong_random_bytes(n)) == n

    def test_random(self):
        assert strong_random_bytes(32) != strong_random_bytes(32)

    @pytest.mark.parametrize("n", [-1, 1.5, "16", None, True])
    def test_bad_argument(self, n):
        with pytest.raises(InsufficientEntropy):
            strong_random_bytes(n)

    def test_os_failure(self, monkeypatch):
        def broken(n):
            raise NotImplementedError("no randomness here")
        monkeypatch.setattr("kryptonite.rand.os.urandom", broken)
        with pytest.raises(InsufficientEntropy):
            strong_random_bytes(8)


class TestHashRound:

    def test_rounds_differ(self):
        assert hash_round(b"Some message.", 1) != hash_round(b"Some message.", 2)

    def test_composes(self):
        m = b"Some message."
        assert hash_round(m, 2) == hash_round(hash_round(m, 1), 1)

    def test_zero_rounds(self):
        assert hash_round(b"m", 0) == b"m"

    def test_digest_size(self):
        assert len(hash_round(b"m", 3)) == 64


class TestShannonEntropy:

    def test_two_symbols(self):
        assert shannon_entropy(b"\xee\x0d") == 1.0

    def test_four_symbols(self):
        assert shannon_entropy(b"\x01\x02\x03\x04") == 2.0

    def test_text(self):
        assert shannon_entropy("1223334444") == pytest.approx(1.8464393446710154)

    def test_empty(self):
        assert shannon_entropy(b"") == 0.0


class TestDigest:

    def test_sha256(self):
        assert sha256_bytes(b"abc").hex().startswith("ba7816bf")

    def test_sha512(self):
        assert len(sha512_bytes(b"abc")) == 64

    def test_by_name(self):
        assert hash_bytes("SHA256", b"abc") == sha256_bytes(b"abc")
        assert len(hash_bytes("sha3-256", b"abc")) == 32

    def test_unknown(self):
        with pytest.raises(ValueError):
            hash_bytes("md5", b"abc")
