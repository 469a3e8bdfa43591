"""Long-term signing identities and the signable-object contract."""

from __future__ import annotations

import logging
import secrets
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from ..codec import (
    Cursor,
    decode_opaque_u8,
    decode_opaque_u16,
    encode_opaque_u8,
    encode_opaque_u16,
    from_bytes,
    to_bytes,
)
from ..config import get_config
from ..exceptions import DecodingError
from .constants import (
    ED25519_PRIVATE_KEY_SIZE,
    ED25519_PUBLIC_KEY_SIZE,
    ED25519_SECRET_KEY_SIZE,
    ED25519_SIGNATURE_SIZE,
)
from .exceptions import InvalidKeyError, KeyErasedError
from .secret import SecretBytes

if TYPE_CHECKING:
    from .credential import BasicCredential

logger = logging.getLogger(__name__)


def verify_signature(public_key: bytes, payload: bytes, signature: bytes) -> bool:
    """Verify an Ed25519 signature over the exact payload bytes.

    Returns False for a bad signature or a malformed key; never raises.
    """
    if len(signature) != ED25519_SIGNATURE_SIZE:
        return False
    try:
        Ed25519PublicKey.from_public_bytes(bytes(public_key)).verify(bytes(signature), payload)
        return True
    except (InvalidSignature, ValueError):
        return False


def _derive_public_key(private_key: bytes) -> bytes:
    signing_key = Ed25519PrivateKey.from_private_bytes(private_key)
    return signing_key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


def _split_private_key(private_key: bytes) -> tuple[bytes, bytes]:
    """Return (seed, public key) for a 32-byte seed or a 64-byte seed || public key."""
    if len(private_key) == ED25519_PRIVATE_KEY_SIZE:
        seed = bytes(private_key)
        return seed, _derive_public_key(seed)
    if len(private_key) == ED25519_SECRET_KEY_SIZE:
        seed = bytes(private_key[:ED25519_PRIVATE_KEY_SIZE])
        public_key = _derive_public_key(seed)
        if bytes(private_key[ED25519_PRIVATE_KEY_SIZE:]) != public_key:
            raise InvalidKeyError("Ed25519 secret key does not end with its own public key")
        return seed, public_key
    raise InvalidKeyError(
        f"Ed25519 private key must be {ED25519_PRIVATE_KEY_SIZE} or {ED25519_SECRET_KEY_SIZE} bytes, "
        f"got {len(private_key)}",
    )


class Identity:
    """A user's long-term Ed25519 signing identity.

    `id` is a locally chosen label, not derived from the key. The private key
    is held in a SecretBytes guard; erase() zeroes the private key, the public
    key and the label.
    """

    def __init__(self, id: bytes, public_key: bytes, private_key: SecretBytes):
        if len(private_key) != ED25519_PRIVATE_KEY_SIZE:
            raise InvalidKeyError(
                f"Ed25519 private key must be {ED25519_PRIVATE_KEY_SIZE} bytes, got {len(private_key)}",
            )
        if len(public_key) != ED25519_PUBLIC_KEY_SIZE:
            raise InvalidKeyError(
                f"Ed25519 public key must be {ED25519_PUBLIC_KEY_SIZE} bytes, got {len(public_key)}",
            )
        self._id = bytearray(id)
        self._public_key = bytearray(public_key)
        self._private_key = private_key

    @classmethod
    def random(cls, id_size: int | None = None) -> Identity:
        """Generate a fresh keypair and a random label.

        Args:
            id_size: Label length; defaults to the configured identity_id_size
        """
        if id_size is None:
            id_size = get_config().identity_id_size
        signing_key = Ed25519PrivateKey.generate()
        private_key = SecretBytes(
            signing_key.private_bytes(
                encoding=serialization.Encoding.Raw,
                format=serialization.PrivateFormat.Raw,
                encryption_algorithm=serialization.NoEncryption(),
            )
        )
        public_key = signing_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        identity = cls(secrets.token_bytes(id_size), public_key, private_key)
        logger.debug(f"Generated identity {identity.id.hex()} with key {public_key[:4].hex()}...")
        return identity

    @classmethod
    def from_private_key(cls, private_key: bytes, id: bytes = b"") -> Identity:
        """Load an identity from an Ed25519 private key.

        Accepts the 32-byte seed or the 64-byte seed || public key form. In
        the 64-byte form the second half must be the seed's public key.

        Raises:
            InvalidKeyError: On any other length or a mismatched public half
        """
        seed, public_key = _split_private_key(private_key)
        return cls(id, public_key, SecretBytes(seed))

    @property
    def id(self) -> bytes:
        return bytes(self._id)

    @property
    def public_key(self) -> bytes:
        return bytes(self._public_key)

    @property
    def erased(self) -> bool:
        return self._private_key.erased

    def sign(self, payload: bytes) -> bytes:
        """Sign the exact payload bytes. No hashing or context is added."""
        if self._private_key.erased:
            raise KeyErasedError("Cannot sign with an erased identity")
        signing_key = Ed25519PrivateKey.from_private_bytes(self._private_key.reveal())
        return signing_key.sign(payload)

    def verify(self, payload: bytes, signature: bytes) -> bool:
        return verify_signature(self._public_key, payload, signature)

    def credential(self) -> BasicCredential:
        """Public, shareable view of this identity."""
        from .credential import BasicCredential

        return BasicCredential(identity=self.id, public_key=self.public_key)

    def erase(self) -> None:
        self._private_key.erase()
        for buffer in (self._public_key, self._id):
            for i in range(len(buffer)):
                buffer[i] = 0

    def __enter__(self) -> Identity:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.erase()

    def __del__(self) -> None:
        # _private_key zeroes itself when collected
        for name in ("_public_key", "_id"):
            buffer = getattr(self, name, None)
            if buffer is not None:
                buffer[:] = bytes(len(buffer))

    def __copy__(self) -> Identity:
        raise TypeError("Identity cannot be copied")

    def __deepcopy__(self, memo: dict) -> Identity:
        raise TypeError("Identity cannot be copied")

    def __repr__(self) -> str:
        return f"Identity(id={self.id.hex()}, public_key={self.public_key.hex()})"

    def encode(self, buffer: bytearray) -> None:
        """Serialize including the private key, for local persistence only.

        The private key is written in its 64-byte seed || public key form.
        """
        encode_opaque_u8(buffer, self._id)
        encode_opaque_u16(buffer, self._public_key)
        encode_opaque_u16(buffer, self._private_key.reveal() + bytes(self._public_key))

    @classmethod
    def decode(cls, cursor: Cursor) -> Identity:
        id = decode_opaque_u8(cursor)
        public_key = decode_opaque_u16(cursor)
        private_key = decode_opaque_u16(cursor)
        if len(private_key) != ED25519_SECRET_KEY_SIZE or len(public_key) != ED25519_PUBLIC_KEY_SIZE:
            raise DecodingError(
                "Identity key has wrong length",
                {"public_key_length": len(public_key), "private_key_length": len(private_key)},
            )
        try:
            seed, derived = _split_private_key(private_key)
        except InvalidKeyError as e:
            raise DecodingError(f"Identity private key is inconsistent: {e.message}") from e
        if derived != public_key:
            raise DecodingError("Identity public key does not match its private key")
        return cls(id, public_key, SecretBytes(seed))

    def to_bytes(self) -> bytes:
        return to_bytes(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> Identity:
        return from_bytes(cls, data)


# =============================================================================
# SIGNABLE CONTRACT
# =============================================================================


@runtime_checkable
class Signable(Protocol):
    """A structure that can serialize itself without its signature field."""

    def unsigned_payload(self) -> bytes: ...


@runtime_checkable
class Verifier(Protocol):
    """Anything holding a signature public key: an Identity or a credential."""

    def verify(self, payload: bytes, signature: bytes) -> bool: ...


def sign(signable: Signable, identity: Identity) -> bytes:
    """Sign the canonical unsigned payload of a structure."""
    return identity.sign(signable.unsigned_payload())


def verify(signable: Signable, verifier: Verifier, signature: bytes) -> bool:
    """Check a signature against the canonical unsigned payload of a structure."""
    return verifier.verify(signable.unsigned_payload(), signature)
