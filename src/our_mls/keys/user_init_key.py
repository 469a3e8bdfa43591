"""UserInitKey: a signed advertisement of a user's init keys.

Other members fetch a UserInitKey to add its owner to a group. Wire layout:

    opaque   cipher_suites<0..255>    (u16 ids)
    opaque   init_keys<0..2^16-1>     (one u16-prefixed key per suite)
    uint16   algorithm
    opaque   identity_key<0..2^16-1>
    opaque   signature<0..2^16-1>

Everything but the signature is the signed payload.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from typing import Any

from ..codec import (
    Cursor,
    decode_opaque_u16,
    decode_u16,
    decode_vec_u8,
    decode_vec_u16,
    encode_opaque_u16,
    encode_u16,
    encode_vec_u8,
    encode_vec_u16,
    from_bytes,
    to_bytes,
)
from ..config import get_config
from ..exceptions import DecodingError
from .constants import ED25519_PUBLIC_KEY_SIZE, ED25519_SIGNATURE_SIZE
from .exceptions import InvalidKeyError
from .identity import Identity, sign, verify_signature
from .types import CipherSuite, SignatureScheme
from .x25519 import X25519KeyPair, X25519PrivateKey, X25519PublicKey

logger = logging.getLogger(__name__)


def _reject(reason: str, **details: Any) -> DecodingError:
    logger.warning(f"Rejected UserInitKey: {reason}")
    return DecodingError(reason, details)


# Each implemented suite consumes its own key payload from the key-suite block.
# A decoder returns the usable key, or None when the suite is declared but
# unimplemented and its payload is skipped.


def _skip_p256_key(cursor: Cursor) -> None:
    decode_opaque_u16(cursor)
    return None


def _decode_x25519_key(cursor: Cursor) -> X25519PublicKey:
    return X25519PublicKey.decode(cursor)


_KEY_DECODERS: dict[CipherSuite, Callable[[Cursor], X25519PublicKey | None]] = {
    CipherSuite.AES128GCM_P256_SHA256: _skip_p256_key,
    CipherSuite.AES128GCM_CURVE25519_SHA256: _decode_x25519_key,
}


@dataclass(frozen=True)
class UserInitKey:
    """A signed offer of one DH public key per declared ciphersuite.

    Instances are immutable; produce a changed copy with dataclasses.replace
    and re-sign it with resign() before use.
    """

    cipher_suites: tuple[int, ...]
    init_keys: tuple[X25519PublicKey, ...]
    algorithm: int
    identity_key: bytes
    signature: bytes = bytes(ED25519_SIGNATURE_SIZE)

    def __post_init__(self) -> None:
        object.__setattr__(self, "cipher_suites", tuple(self.cipher_suites))
        object.__setattr__(self, "init_keys", tuple(self.init_keys))

    @classmethod
    def create(cls, init_keys: Sequence[X25519PublicKey], identity: Identity) -> UserInitKey:
        """Build and sign a UserInitKey for the X25519 ciphersuite.

        Args:
            init_keys: The single X25519 public init key to advertise
            identity: Signing identity of the owner

        Returns:
            A UserInitKey whose signature covers its unsigned payload

        Raises:
            InvalidKeyError: If init_keys does not hold exactly one key
        """
        if len(init_keys) != 1:
            raise InvalidKeyError(
                f"UserInitKey carries exactly one X25519 init key, got {len(init_keys)}",
                {"init_key_count": len(init_keys)},
            )
        unsigned = cls(
            cipher_suites=(CipherSuite.AES128GCM_CURVE25519_SHA256,),
            init_keys=tuple(init_keys),
            algorithm=SignatureScheme.ED25519,
            identity_key=identity.public_key,
        )
        return unsigned.resign(identity)

    def resign(self, identity: Identity) -> UserInitKey:
        """Return a copy signed by `identity` over the current fields."""
        unsigned = replace(self, identity_key=identity.public_key)
        return replace(unsigned, signature=sign(unsigned, identity))

    def unsigned_payload(self) -> bytes:
        buffer = bytearray()
        encode_vec_u8(buffer, self.cipher_suites, encode_u16)
        encode_vec_u16(buffer, self.init_keys, lambda b, key: key.encode(b))
        encode_u16(buffer, self.algorithm)
        encode_opaque_u16(buffer, self.identity_key)
        return bytes(buffer)

    def self_verify(self) -> bool:
        """Check the stored signature against the stored identity key."""
        return verify_signature(self.identity_key, self.unsigned_payload(), self.signature)

    def encode(self, buffer: bytearray) -> None:
        buffer += self.unsigned_payload()
        encode_opaque_u16(buffer, self.signature)

    @classmethod
    def decode(cls, cursor: Cursor) -> UserInitKey:
        """Decode and validate a UserInitKey.

        Rejects, in order: an empty suite list, an unrecognized suite id, a
        suite list without exactly one X25519 key, and any signature algorithm
        other than Ed25519. The signature itself is not checked here; call
        self_verify() on the result.

        Raises:
            DecodingError: On malformed or unsupported content
        """
        cipher_suites = decode_vec_u8(cursor, decode_u16)
        if not cipher_suites:
            raise _reject("Empty ciphersuite list")

        key_block = cursor.sub_cursor_u16()
        x25519_key: X25519PublicKey | None = None

        for suite_id in cipher_suites:
            try:
                suite = CipherSuite(suite_id)
            except ValueError:
                raise _reject(f"Unknown ciphersuite 0x{suite_id:04x}", suite=suite_id) from None

            key = _KEY_DECODERS[suite](key_block)
            if key is None:
                continue
            if x25519_key is not None:
                raise _reject("Duplicate X25519 init key")
            x25519_key = key

        if x25519_key is None:
            raise _reject("No X25519 init key among declared ciphersuites", suites=cipher_suites)

        if get_config().strict_decoding and not key_block.is_empty():
            raise _reject("Unconsumed bytes in key-suite block", trailing=key_block.remaining)

        algorithm = decode_u16(cursor)
        if algorithm != SignatureScheme.ED25519:
            raise _reject(f"Unsupported signature algorithm 0x{algorithm:04x}", algorithm=algorithm)

        identity_key = decode_opaque_u16(cursor)
        if len(identity_key) != ED25519_PUBLIC_KEY_SIZE:
            raise _reject("Identity key has wrong length", length=len(identity_key))
        signature = decode_opaque_u16(cursor)
        if len(signature) != ED25519_SIGNATURE_SIZE:
            raise _reject("Signature has wrong length", length=len(signature))

        logger.debug(f"Decoded UserInitKey for identity key {identity_key[:4].hex()}...")
        return cls(
            cipher_suites=tuple(cipher_suites),
            init_keys=(x25519_key,),
            algorithm=SignatureScheme(algorithm),
            identity_key=identity_key,
            signature=signature,
        )

    def to_bytes(self) -> bytes:
        return to_bytes(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> UserInitKey:
        return from_bytes(cls, data)


class UserInitKeyBundle:
    """A UserInitKey together with the private keys for its init keys.

    private_keys[i] belongs to init_key.init_keys[i].
    """

    def __init__(self, init_key: UserInitKey, private_keys: Sequence[X25519PrivateKey]):
        if len(private_keys) != len(init_key.init_keys):
            raise InvalidKeyError(
                f"Bundle has {len(private_keys)} private key(s) for {len(init_key.init_keys)} init key(s)"
            )
        self.init_key = init_key
        self._private_keys = list(private_keys)

    @classmethod
    def create(cls, identity: Identity) -> UserInitKeyBundle:
        """Generate a fresh X25519 init keypair and sign its UserInitKey."""
        key_pair = X25519KeyPair.generate_random()
        init_key = UserInitKey.create([key_pair.public_key], identity)
        return cls(init_key, [key_pair.private_key])

    @property
    def private_keys(self) -> list[X25519PrivateKey]:
        return list(self._private_keys)

    def private_key_for(self, public_key: X25519PublicKey) -> X25519PrivateKey:
        """Find the private key matching one of the advertised init keys."""
        for key, private_key in zip(self.init_key.init_keys, self._private_keys):
            if key == public_key:
                return private_key
        raise KeyError(f"No private key for init key {public_key.data.hex()}")

    def erase(self) -> None:
        for private_key in self._private_keys:
            private_key.erase()

    def __enter__(self) -> UserInitKeyBundle:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.erase()

    def encode(self, buffer: bytearray) -> None:
        self.init_key.encode(buffer)
        encode_vec_u16(buffer, self._private_keys, lambda b, key: key.encode(b))

    @classmethod
    def decode(cls, cursor: Cursor) -> UserInitKeyBundle:
        init_key = UserInitKey.decode(cursor)
        private_keys = decode_vec_u16(cursor, X25519PrivateKey.decode)
        if len(private_keys) != len(init_key.init_keys):
            for private_key in private_keys:
                private_key.erase()
            raise DecodingError(
                "Private key count does not match init keys",
                {"private_keys": len(private_keys), "init_keys": len(init_key.init_keys)},
            )
        for public_key, private_key in zip(init_key.init_keys, private_keys):
            if private_key.derive_public_key() != public_key:
                for key in private_keys:
                    key.erase()
                raise DecodingError("Private key does not match its init key")
        return cls(init_key, private_keys)

    def to_bytes(self) -> bytes:
        return to_bytes(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> UserInitKeyBundle:
        return from_bytes(cls, data)

    def __repr__(self) -> str:
        return f"UserInitKeyBundle(init_key={self.init_key!r})"
