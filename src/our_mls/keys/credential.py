"""Credentials binding an identity label to a signature key."""

from __future__ import annotations

from dataclasses import dataclass

from ..codec import (
    Cursor,
    decode_opaque_u8,
    decode_opaque_u16,
    encode_opaque_u8,
    encode_opaque_u16,
    from_bytes,
    to_bytes,
)
from ..exceptions import DecodingError
from .constants import ED25519_PUBLIC_KEY_SIZE
from .identity import verify_signature
from .types import CredentialType


@dataclass(frozen=True)
class BasicCredential:
    """A named identity claim carrying only public material."""

    identity: bytes
    public_key: bytes

    @property
    def credential_type(self) -> CredentialType:
        return CredentialType.BASIC

    def verify(self, payload: bytes, signature: bytes) -> bool:
        """Verify a signature made by the holder of this credential."""
        return verify_signature(self.public_key, payload, signature)

    def encode(self, buffer: bytearray) -> None:
        encode_opaque_u8(buffer, self.identity)
        encode_opaque_u16(buffer, self.public_key)

    @classmethod
    def decode(cls, cursor: Cursor) -> BasicCredential:
        identity = decode_opaque_u8(cursor)
        public_key = decode_opaque_u16(cursor)
        if len(public_key) != ED25519_PUBLIC_KEY_SIZE:
            raise DecodingError(
                "Credential public key has wrong length",
                {"length": len(public_key)},
            )
        return cls(identity=identity, public_key=public_key)

    def to_bytes(self) -> bytes:
        return to_bytes(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> BasicCredential:
        return from_bytes(cls, data)
