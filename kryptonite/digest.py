from cryptography.hazmat.primitives import hashes

_ALGORITHMS = {
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
    "sha3_256": hashes.SHA3_256,
    "sha3_512": hashes.SHA3_512,
}

def hash_bytes(algorithm: str, data: bytes) -> bytes:
    try:
        algo = _ALGORITHMS[algorithm.lower().replace("-", "_")]
    except KeyError:
        raise ValueError(f"Unsupported hash algorithm: {algorithm!r}")
    h = hashes.Hash(algo())
    h.update(data)
    return h.finalize()

def sha256_bytes(data: bytes) -> bytes:
    return hash_bytes("sha256", data)

def sha512_bytes(data: bytes) -> bytes:
    return hash_bytes("sha512", data)

__all__ = ["hash_bytes", "sha256_bytes", "sha512_bytes"]
