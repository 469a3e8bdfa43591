"""Key material and signed init keys for MLS group messaging.

Key concepts:
- X25519KeyPair: DH keys for HPKE init keys and ephemeral encapsulation
- Identity: long-term Ed25519 signing key with a local label
- Signable: structures signed over a canonical payload without the signature
- UserInitKey: signed advertisement of a user's init keys and ciphersuites

Security properties:
- Private key bytes are zeroed on erase(), on leaving a `with` block and on collection
- UserInitKey decoding rejects unsupported or incomplete content before any
  signature check
"""

# Constants
from .constants import (
    ED25519_PRIVATE_KEY_SIZE,
    ED25519_SECRET_KEY_SIZE,
    ED25519_PUBLIC_KEY_SIZE,
    ED25519_SIGNATURE_SIZE,
    X25519_PRIVATE_KEY_SIZE,
    X25519_PUBLIC_KEY_SIZE,
)

# Data classes
from .credential import BasicCredential

# Exceptions
from .exceptions import (
    DhZeroError,
    InvalidKeyError,
    KeyErasedError,
    KeyMaterialError,
)

# Identity and signing
from .identity import Identity, Signable, Verifier, sign, verify, verify_signature
from .secret import SecretBytes

# Types (enums)
from .types import CipherSuite, CredentialType, SignatureScheme
from .user_init_key import UserInitKey, UserInitKeyBundle
from .x25519 import X25519KeyPair, X25519PrivateKey, X25519PublicKey

__all__ = [
    # Constants
    "X25519_PRIVATE_KEY_SIZE",
    "X25519_PUBLIC_KEY_SIZE",
    "ED25519_PRIVATE_KEY_SIZE",
    "ED25519_SECRET_KEY_SIZE",
    "ED25519_PUBLIC_KEY_SIZE",
    "ED25519_SIGNATURE_SIZE",
    # Exceptions
    "KeyMaterialError",
    "InvalidKeyError",
    "KeyErasedError",
    "DhZeroError",
    # Types
    "CipherSuite",
    "SignatureScheme",
    "CredentialType",
    # Key material
    "SecretBytes",
    "X25519PublicKey",
    "X25519PrivateKey",
    "X25519KeyPair",
    # Identity and signing
    "Identity",
    "Signable",
    "Verifier",
    "sign",
    "verify",
    "verify_signature",
    "BasicCredential",
    # Init keys
    "UserInitKey",
    "UserInitKeyBundle",
]
