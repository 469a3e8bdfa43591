"""Symmetric primitives and HPKE for MLS group messaging."""

from .exceptions import AeadError, CryptoError, KemError
from .hpke import (
    NK_AES_GCM_128,
    NK_AES_GCM_256,
    NK_CHACHA20POLY1305,
    NN_AES_GCM_128,
    NN_AES_GCM_256,
    NN_CHACHA20POLY1305,
    HpkeCipherSuite,
    HpkeCiphertext,
    HpkeContext,
    HpkeMode,
    setup_base,
    setup_core,
)

__all__ = [
    # Exceptions
    "CryptoError",
    "AeadError",
    "KemError",
    # Constants
    "NK_AES_GCM_128",
    "NN_AES_GCM_128",
    "NK_AES_GCM_256",
    "NN_AES_GCM_256",
    "NK_CHACHA20POLY1305",
    "NN_CHACHA20POLY1305",
    # Types
    "HpkeMode",
    "HpkeCipherSuite",
    # HPKE
    "HpkeContext",
    "HpkeCiphertext",
    "setup_base",
    "setup_core",
]
