"""AES-GCM seal/open with errors surfaced as AeadError."""

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .exceptions import AeadError

AES_GCM_NONCE_SIZE = 12
AES_GCM_TAG_SIZE = 16


def seal(key: bytes, nonce: bytes, plaintext: bytes, aad: bytes = b"") -> bytes:
    """Encrypt and authenticate; the 16-byte tag is appended to the output."""
    if len(nonce) != AES_GCM_NONCE_SIZE:
        raise AeadError(f"AES-GCM nonce must be {AES_GCM_NONCE_SIZE} bytes, got {len(nonce)}")
    try:
        return AESGCM(key).encrypt(nonce, plaintext, aad or None)
    except (ValueError, OverflowError) as e:
        raise AeadError(f"AES-GCM seal failed: {e}") from e


def open(key: bytes, nonce: bytes, ciphertext: bytes, aad: bytes = b"") -> bytes:
    """Authenticate and decrypt."""
    if len(nonce) != AES_GCM_NONCE_SIZE:
        raise AeadError(f"AES-GCM nonce must be {AES_GCM_NONCE_SIZE} bytes, got {len(nonce)}")
    try:
        return AESGCM(key).decrypt(nonce, ciphertext, aad or None)
    except InvalidTag as e:
        raise AeadError("AES-GCM authentication failed") from e
    except (ValueError, OverflowError) as e:
        raise AeadError(f"AES-GCM open failed: {e}") from e
