"""Exceptions for MLS key material."""

from ..exceptions import MLSException


class KeyMaterialError(MLSException):
    """Base exception for key material errors."""

    pass


class InvalidKeyError(KeyMaterialError):
    """Raw key bytes have the wrong size or form."""

    pass


class KeyErasedError(KeyMaterialError):
    """Private key material was used after it was erased."""

    pass


class DhZeroError(KeyMaterialError):
    """Diffie-Hellman produced the degenerate all-zero result."""

    pass
