"""HKDF-SHA256 extract and expand (RFC 5869) as separate steps."""

from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.kdf.hkdf import HKDFExpand

HASH_SIZE = 32


def extract(salt: bytes, ikm: bytes) -> bytes:
    """PRK = HMAC-SHA256(salt, ikm)."""
    mac = hmac.HMAC(salt or bytes(HASH_SIZE), hashes.SHA256())
    mac.update(ikm)
    return mac.finalize()


def expand(prk: bytes, info: bytes, length: int) -> bytes:
    """Expand a pseudorandom key to `length` bytes bound to `info`."""
    if len(prk) < HASH_SIZE:
        raise ValueError(f"PRK must be at least {HASH_SIZE} bytes, got {len(prk)}")
    return HKDFExpand(
        algorithm=hashes.SHA256(),
        length=length,
        info=info,
    ).derive(prk)
