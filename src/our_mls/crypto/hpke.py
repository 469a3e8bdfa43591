"""Hybrid public-key encryption, base mode, for X25519 + AES-128-GCM.

The symmetric key and nonce are expanded from the DH shared secret with a
serialized HpkeContext appended to the label, so every (enc, recipient, info)
triple yields its own key/nonce pair:

    secret = Extract(zeros(32), zz)
    key    = Expand(secret, "hpke key"   || context, Nk)
    nonce  = Expand(secret, "hpke nonce" || context, Nn)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum

from ..codec import (
    Cursor,
    decode_opaque_u8,
    decode_u8,
    decode_u16,
    encode_opaque_u8,
    encode_u8,
    encode_u16,
    from_bytes,
    to_bytes,
)
from ..exceptions import DecodingError
from ..keys.constants import X25519_PUBLIC_KEY_SIZE
from ..keys.exceptions import DhZeroError
from ..keys.x25519 import X25519KeyPair, X25519PrivateKey, X25519PublicKey
from . import aesgcm, hkdf
from .exceptions import AeadError, KemError

logger = logging.getLogger(__name__)

# AEAD key (Nk) and nonce (Nn) sizes in bytes
NK_AES_GCM_128 = 16
NN_AES_GCM_128 = 12

NK_AES_GCM_256 = 32
NN_AES_GCM_256 = 12

NK_CHACHA20POLY1305 = 32
NN_CHACHA20POLY1305 = 12

LABEL_KEY = b"hpke key"
LABEL_NONCE = b"hpke nonce"


class HpkeMode(IntEnum):
    """HPKE modes. Only BASE is implemented."""

    BASE = 0x00
    PSK = 0x01
    AUTH = 0x02


class HpkeCipherSuite(IntEnum):
    """HPKE ciphersuite ids (u16 in the context)."""

    P256_SHA256_AES128GCM = 0x0001
    P521_SHA512_AES256GCM = 0x0002
    X25519_SHA256_AES128GCM = 0x0003
    X448_SHA512_AES256GCM = 0x0004


@dataclass(frozen=True)
class HpkeContext:
    """Binding context serialized into every key and nonce derivation."""

    ciphersuite: int
    mode: int
    kem_context: bytes
    info: bytes

    def encode(self, buffer: bytearray) -> None:
        encode_u16(buffer, self.ciphersuite)
        encode_u8(buffer, self.mode)
        encode_opaque_u8(buffer, self.kem_context)
        encode_opaque_u8(buffer, self.info)

    @classmethod
    def decode(cls, cursor: Cursor) -> HpkeContext:
        ciphersuite = decode_u16(cursor)
        mode = decode_u8(cursor)
        kem_context = decode_opaque_u8(cursor)
        info = decode_opaque_u8(cursor)
        return cls(ciphersuite=ciphersuite, mode=mode, kem_context=kem_context, info=info)

    def to_bytes(self) -> bytes:
        return to_bytes(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> HpkeContext:
        return from_bytes(cls, data)


def setup_core(mode: HpkeMode, secret: bytes, kem_context: bytes, info: bytes) -> tuple[bytes, bytes]:
    """Derive (key, nonce) for X25519/SHA-256/AES-128-GCM from an extracted secret."""
    context = HpkeContext(
        ciphersuite=HpkeCipherSuite.X25519_SHA256_AES128GCM,
        mode=mode,
        kem_context=kem_context,
        info=info,
    ).to_bytes()

    key = hkdf.expand(secret, LABEL_KEY + context, NK_AES_GCM_128)
    nonce = hkdf.expand(secret, LABEL_NONCE + context, NN_AES_GCM_128)
    return key, nonce


def setup_base(
    recipient_public_key: X25519PublicKey,
    shared_secret: bytes,
    enc: bytes,
    info: bytes = b"",
) -> tuple[bytes, bytes]:
    """SetupBase(pkR, zz, enc, info) -> (key, nonce).

    Base mode takes no external salt; the shared secret is extracted with an
    all-zero salt.
    """
    kem_context = bytes(enc) + recipient_public_key.to_slice()
    secret = hkdf.extract(bytes(hkdf.HASH_SIZE), shared_secret)
    return setup_core(HpkeMode.BASE, secret, kem_context, info)


@dataclass(frozen=True)
class HpkeCiphertext:
    """Output of one HPKE seal: the ephemeral public key and the AEAD output."""

    ephemeral_public_key: X25519PublicKey
    content: bytes

    @classmethod
    def encrypt(cls, public_key: X25519PublicKey, enc: bytes, info: bytes = b"") -> HpkeCiphertext:
        """Seal `enc` to a recipient under a freshly generated ephemeral key.

        The ephemeral private key is erased before returning, on success or
        failure.

        Raises:
            KemError: If the DH result is degenerate or the AEAD seal fails
            EncodingError: If enc is too long for the u8 kem_context field
        """
        with X25519KeyPair.generate_random() as key_pair:
            return cls.encrypt_with_ephemeral(public_key, enc, key_pair, info)

    @classmethod
    def encrypt_with_ephemeral(
        cls,
        public_key: X25519PublicKey,
        enc: bytes,
        key_pair: X25519KeyPair,
        info: bytes = b"",
    ) -> HpkeCiphertext:
        """Seal `enc` using a caller-supplied ephemeral keypair (deterministic).

        Raises:
            KemError: If the DH result is degenerate or the AEAD seal fails
            EncodingError: If enc is too long for the u8 kem_context field
        """
        try:
            zz = key_pair.private_key.shared_secret(public_key)
        except DhZeroError as e:
            logger.warning(f"HPKE encapsulation to {public_key.data[:4].hex()}... hit a zero DH result")
            raise KemError("Degenerate Diffie-Hellman result during encapsulation") from e

        key, nonce = setup_base(public_key, zz, enc, info)
        try:
            # No associated data; enc is already bound through kem_context
            content = aesgcm.seal(key, nonce, enc)
        except AeadError as e:
            logger.warning(f"HPKE seal failed: {e}")
            raise KemError("AEAD seal failed during encapsulation") from e

        logger.debug(f"Sealed {len(enc)} bytes to {public_key.data[:4].hex()}...")
        return cls(ephemeral_public_key=key_pair.public_key, content=content)

    def decrypt(self, private_key: X25519PrivateKey, enc: bytes, info: bytes = b"") -> bytes:
        """Open this ciphertext with the recipient's private key.

        The recipient must know `enc`, since it is bound into the key schedule.

        Raises:
            KemError: If the DH result is degenerate or authentication fails
        """
        try:
            zz = private_key.shared_secret(self.ephemeral_public_key)
        except DhZeroError as e:
            raise KemError("Degenerate Diffie-Hellman result during decapsulation") from e

        key, nonce = setup_base(private_key.derive_public_key(), zz, enc, info)
        try:
            return aesgcm.open(key, nonce, self.content)
        except AeadError as e:
            logger.warning(f"HPKE open failed: {e}")
            raise KemError("AEAD open failed during decapsulation") from e

    def to_bytes(self) -> bytes:
        """External representation: ephemeral public key followed by AEAD output."""
        return self.ephemeral_public_key.to_slice() + self.content

    @classmethod
    def from_bytes(cls, data: bytes) -> HpkeCiphertext:
        if len(data) < X25519_PUBLIC_KEY_SIZE + aesgcm.AES_GCM_TAG_SIZE:
            raise DecodingError(
                "HPKE ciphertext too short",
                {"length": len(data)},
            )
        return cls(
            ephemeral_public_key=X25519PublicKey(data[:X25519_PUBLIC_KEY_SIZE]),
            content=bytes(data[X25519_PUBLIC_KEY_SIZE:]),
        )
