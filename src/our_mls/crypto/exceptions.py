"""Exceptions for symmetric primitives and HPKE."""

from ..exceptions import MLSException


class CryptoError(MLSException):
    """Base exception for primitive failures."""

    pass


class AeadError(CryptoError):
    """AEAD seal or open failed (bad key/nonce size or authentication failure)."""

    pass


class KemError(CryptoError):
    """HPKE encapsulation or decapsulation failed."""

    pass
