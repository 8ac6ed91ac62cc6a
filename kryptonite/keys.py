import logging
from typing import Dict, Optional, Sequence, Tuple

from cryptography.hazmat.primitives.asymmetric import rsa

from .config import get_settings
from .errors import InvalidKey, KeyGenerationError

logger = logging.getLogger(__name__)

PRIVATE_FIELDS = (
    "public_modulus",
    "public_exponent",
    "private_exponent",
    "prime_one",
    "prime_two",
    "exponent_one",
    "exponent_two",
    "coefficient",
)
PUBLIC_FIELDS = ("public_modulus", "public_exponent")


def gen_rsa_keypair(
    bits: Optional[int] = None,
    public_exponent: int = 65537,
    allowed_exponents: Optional[Sequence[int]] = None,
) -> Tuple[rsa.RSAPrivateKey, rsa.RSAPublicKey]:
    """
    Generate an RSA key pair.

    Blocks for a noticeable time at large sizes; run it on a worker thread
    if the caller cannot afford that.
    """
    settings = get_settings()
    if bits is None:
        bits = settings.rsa_bits
    if allowed_exponents is None:
        allowed_exponents = settings.allowed_public_exponents
    if not isinstance(bits, int) or bits < settings.min_rsa_bits:
        raise KeyGenerationError(f"key size must be at least {settings.min_rsa_bits} bits, got {bits!r}")
    if public_exponent not in allowed_exponents:
        raise KeyGenerationError(f"public exponent {public_exponent!r} not in {tuple(allowed_exponents)}")
    try:
        priv = rsa.generate_private_key(public_exponent=public_exponent, key_size=bits)
    except (ValueError, TypeError) as exc:
        raise KeyGenerationError(str(exc)) from exc
    logger.debug("generated %d-bit RSA key pair", bits)
    return priv, priv.public_key()


def require_private(key) -> rsa.RSAPrivateKey:
    if not isinstance(key, rsa.RSAPrivateKey):
        raise InvalidKey("invalid private key")
    return key


def require_public(key) -> rsa.RSAPublicKey:
    if not isinstance(key, rsa.RSAPublicKey):
        raise InvalidKey("invalid public key")
    return key


def public_key(priv) -> rsa.RSAPublicKey:
    return require_private(priv).public_key()


def private_key_fields(priv) -> Dict[str, int]:
    nums = require_private(priv).private_numbers()
    pub = nums.public_numbers
    return {
        "public_modulus": pub.n,
        "public_exponent": pub.e,
        "private_exponent": nums.d,
        "prime_one": nums.p,
        "prime_two": nums.q,
        "exponent_one": nums.dmp1,
        "exponent_two": nums.dmq1,
        "coefficient": nums.iqmp,
    }


def public_key_fields(pub) -> Dict[str, int]:
    nums = require_public(pub).public_numbers()
    return {"public_modulus": nums.n, "public_exponent": nums.e}


def private_key_from_fields(fields: Dict[str, int]) -> rsa.RSAPrivateKey:
    missing = [f for f in PRIVATE_FIELDS if f not in fields]
    if missing:
        raise InvalidKey(f"missing private key fields: {', '.join(missing)}")
    pub = rsa.RSAPublicNumbers(e=fields["public_exponent"], n=fields["public_modulus"])
    nums = rsa.RSAPrivateNumbers(
        p=fields["prime_one"],
        q=fields["prime_two"],
        d=fields["private_exponent"],
        dmp1=fields["exponent_one"],
        dmq1=fields["exponent_two"],
        iqmp=fields["coefficient"],
        public_numbers=pub,
    )
    try:
        return nums.private_key()
    except (ValueError, TypeError) as exc:
        raise InvalidKey("inconsistent private key fields") from exc


def public_key_from_fields(fields: Dict[str, int]) -> rsa.RSAPublicKey:
    missing = [f for f in PUBLIC_FIELDS if f not in fields]
    if missing:
        raise InvalidKey(f"missing public key fields: {', '.join(missing)}")
    try:
        return rsa.RSAPublicNumbers(e=fields["public_exponent"], n=fields["public_modulus"]).public_key()
    except (ValueError, TypeError) as exc:
        raise InvalidKey("invalid public key fields") from exc


__all__ = [
    "PRIVATE_FIELDS",
    "PUBLIC_FIELDS",
    "gen_rsa_keypair",
    "require_private",
    "require_public",
    "public_key",
    "private_key_fields",
    "public_key_fields",
    "private_key_from_fields",
    "public_key_from_fields",
]
