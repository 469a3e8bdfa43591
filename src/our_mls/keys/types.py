"""Wire identifiers for MLS key material."""

from enum import IntEnum


class CipherSuite(IntEnum):
    """Ciphersuite ids carried in a UserInitKey (u16 on the wire)."""

    AES128GCM_P256_SHA256 = 0x0000  # Declared but not implemented
    AES128GCM_CURVE25519_SHA256 = 0x0001


class SignatureScheme(IntEnum):
    """TLS signature scheme ids (u16 on the wire)."""

    ECDSA_SECP256R1_SHA256 = 0x0403
    ED25519 = 0x0807


class CredentialType(IntEnum):
    """Kind of credential binding an identity to a signature key."""

    BASIC = 0
    X509 = 1
    DEFAULT = 255
