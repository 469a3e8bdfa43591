"""X25519 key material for HPKE init keys and ephemeral encapsulation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import x25519

from ..codec import Cursor, decode_opaque_u16, encode_opaque_u16, from_bytes, to_bytes
from ..exceptions import DecodingError
from .constants import X25519_PRIVATE_KEY_SIZE, X25519_PUBLIC_KEY_SIZE
from .exceptions import DhZeroError, InvalidKeyError
from .secret import SecretBytes

logger = logging.getLogger(__name__)


def _raw_public_bytes(public_key: x25519.X25519PublicKey) -> bytes:
    return public_key.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


@dataclass(frozen=True)
class X25519PublicKey:
    """A 32-byte Curve25519 point. Equality and hashing are byte-exact."""

    data: bytes

    def __post_init__(self) -> None:
        if len(self.data) != X25519_PUBLIC_KEY_SIZE:
            raise InvalidKeyError(
                f"X25519 public key must be {X25519_PUBLIC_KEY_SIZE} bytes, got {len(self.data)}",
            )
        object.__setattr__(self, "data", bytes(self.data))

    @classmethod
    def from_slice(cls, data: bytes) -> X25519PublicKey:
        return cls(bytes(data))

    def to_slice(self) -> bytes:
        return self.data

    def encode(self, buffer: bytearray) -> None:
        encode_opaque_u16(buffer, self.data)

    @classmethod
    def decode(cls, cursor: Cursor) -> X25519PublicKey:
        data = decode_opaque_u16(cursor)
        if len(data) != X25519_PUBLIC_KEY_SIZE:
            raise DecodingError(
                "X25519 public key has wrong length",
                {"length": len(data)},
            )
        return cls(data)

    def to_bytes(self) -> bytes:
        return to_bytes(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> X25519PublicKey:
        return from_bytes(cls, data)

    def __repr__(self) -> str:
        return f"X25519PublicKey({self.data.hex()})"


class X25519PrivateKey:
    """A 32-byte Curve25519 scalar, zeroed when erased or collected."""

    def __init__(self, secret: SecretBytes):
        if len(secret) != X25519_PRIVATE_KEY_SIZE:
            raise InvalidKeyError(
                f"X25519 private key must be {X25519_PRIVATE_KEY_SIZE} bytes, got {len(secret)}",
            )
        self._secret = secret

    @classmethod
    def from_slice(cls, data: bytes) -> X25519PrivateKey:
        return cls(SecretBytes(data))

    def to_bytes(self) -> bytes:
        """Export the raw scalar. The caller owns the returned copy."""
        return self._secret.reveal()

    def _load(self) -> x25519.X25519PrivateKey:
        return x25519.X25519PrivateKey.from_private_bytes(self._secret.reveal())

    def derive_public_key(self) -> X25519PublicKey:
        """Compute the public key by fixed-base scalar multiplication."""
        return X25519PublicKey(_raw_public_bytes(self._load().public_key()))

    def shared_secret(self, peer: X25519PublicKey) -> bytes:
        """Compute the X25519 shared secret with a peer public key.

        Raises:
            DhZeroError: If the result is the all-zero value (low-order peer point)
        """
        peer_key = x25519.X25519PublicKey.from_public_bytes(peer.data)
        try:
            return self._load().exchange(peer_key)
        except ValueError as e:
            raise DhZeroError("X25519 produced an all-zero shared secret", {"peer": peer.data.hex()}) from e

    @property
    def erased(self) -> bool:
        return self._secret.erased

    def erase(self) -> None:
        self._secret.erase()

    def __enter__(self) -> X25519PrivateKey:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.erase()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, X25519PrivateKey):
            return NotImplemented
        return self._secret == other._secret

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return "X25519PrivateKey(<redacted>)"

    def encode(self, buffer: bytearray) -> None:
        encode_opaque_u16(buffer, self._secret.reveal())

    @classmethod
    def decode(cls, cursor: Cursor) -> X25519PrivateKey:
        data = decode_opaque_u16(cursor)
        if len(data) != X25519_PRIVATE_KEY_SIZE:
            raise DecodingError(
                "X25519 private key has wrong length",
                {"length": len(data)},
            )
        return cls.from_slice(data)


class X25519KeyPair:
    """An X25519 keypair owning its private key.

    The public key is always derived from the private key; use as a context
    manager to erase the private key on every exit path.
    """

    def __init__(self, private_key: X25519PrivateKey, public_key: X25519PublicKey):
        self.private_key = private_key
        self.public_key = public_key

    @classmethod
    def generate_random(cls) -> X25519KeyPair:
        """Generate a fresh keypair from the system CSPRNG."""
        private = x25519.X25519PrivateKey.generate()
        private_key = X25519PrivateKey.from_slice(
            private.private_bytes(
                encoding=serialization.Encoding.Raw,
                format=serialization.PrivateFormat.Raw,
                encryption_algorithm=serialization.NoEncryption(),
            )
        )
        public_key = X25519PublicKey(_raw_public_bytes(private.public_key()))
        logger.debug(f"Generated X25519 keypair {public_key.data[:4].hex()}...")
        return cls(private_key, public_key)

    @classmethod
    def derive_from_seed(cls, seed: bytes) -> X25519KeyPair:
        """Build a keypair deterministically from a 32-byte secret.

        The seed is used as the scalar as-is; it must be uniformly random or
        derived from a protocol secret such as a tree node secret.
        """
        if len(seed) != X25519_PRIVATE_KEY_SIZE:
            raise InvalidKeyError(f"Seed must be {X25519_PRIVATE_KEY_SIZE} bytes, got {len(seed)}")
        private_key = X25519PrivateKey.from_slice(seed)
        return cls(private_key, private_key.derive_public_key())

    def erase(self) -> None:
        self.private_key.erase()

    def __enter__(self) -> X25519KeyPair:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.erase()

    def __repr__(self) -> str:
        return f"X25519KeyPair(public_key={self.public_key!r})"
