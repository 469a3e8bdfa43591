"""Owned secret byte buffers that are zeroed when released."""

from __future__ import annotations

import hmac
import logging
from typing import Any

from .exceptions import KeyErasedError

logger = logging.getLogger(__name__)


class SecretBytes:
    """Exclusive owner of a secret byte string.

    The bytes live in a private bytearray that is overwritten with zeros by
    erase(), on leaving a `with` block, and when the object is collected.
    Copying and pickling are refused so the secret never gains a second
    long-lived owner.
    """

    __slots__ = ("_buffer", "_erased")

    def __init__(self, data: bytes | bytearray):
        self._buffer = bytearray(data)
        self._erased = False

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def erased(self) -> bool:
        return self._erased

    def reveal(self) -> bytes:
        """Return a temporary copy of the secret for a single operation."""
        if self._erased:
            raise KeyErasedError("Secret has been erased")
        return bytes(self._buffer)

    def erase(self) -> None:
        """Overwrite the secret with zeros. Safe to call more than once."""
        for i in range(len(self._buffer)):
            self._buffer[i] = 0
        if not self._erased:
            logger.debug(f"Erased {len(self._buffer)} bytes of secret material")
        self._erased = True

    def __enter__(self) -> SecretBytes:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.erase()

    def __del__(self) -> None:
        # __init__ may have failed before the buffer existed
        if hasattr(self, "_buffer"):
            for i in range(len(self._buffer)):
                self._buffer[i] = 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecretBytes):
            return NotImplemented
        return hmac.compare_digest(self._buffer, other._buffer)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        state = "erased" if self._erased else "redacted"
        return f"SecretBytes(<{len(self._buffer)} bytes {state}>)"

    def __copy__(self) -> SecretBytes:
        raise TypeError("SecretBytes cannot be copied")

    def __deepcopy__(self, memo: dict) -> SecretBytes:
        raise TypeError("SecretBytes cannot be copied")

    def __reduce__(self) -> Any:
        raise TypeError("SecretBytes cannot be pickled")
