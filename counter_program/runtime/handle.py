"""
counter_program.runtime.handle — the host-provided storage capability.

An AccountHandle binds, for one invocation:

- address:     the account's 32-byte address (its Ed25519 public key)
- data:        the account's backing bytes, as a mutable bytearray
- credential:  the signature presented for this call (or None)
- allocatable: whether the host granted the create-on-first-Init capability

The processor borrows the handle exclusively for the whole call via
`borrow()`. A second borrow while one is active raises AccountInUse, the
same way a host refuses two mutable borrows of one account.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from counter_program.auth import Credential
from counter_program.errors import AccountInUse, CorruptRecord


class AccountHandle:
    def __init__(
        self,
        address: bytes,
        data: bytearray | bytes = b"",
        *,
        credential: Optional[Credential] = None,
        allocatable: bool = False,
    ) -> None:
        if not isinstance(address, (bytes, bytearray, memoryview)):
            raise TypeError("address must be bytes-like")
        self.address = bytes(address)
        self.data = data if isinstance(data, bytearray) else bytearray(data)
        self.credential = credential
        self.allocatable = allocatable
        self._borrowed = False

    @property
    def is_borrowed(self) -> bool:
        return self._borrowed

    @property
    def is_empty(self) -> bool:
        return len(self.data) == 0

    @contextmanager
    def borrow(self) -> Iterator[bytearray]:
        """Hold the account exclusively for the duration of the scope."""
        if self._borrowed:
            raise AccountInUse(address=self.address.hex())
        self._borrowed = True
        try:
            yield self.data
        finally:
            self._borrowed = False

    def allocate(self, size: int) -> None:
        """
        Create `size` zeroed bytes of account space.

        Only valid once, on an empty handle the host marked allocatable.
        """
        if not self.allocatable:
            raise CorruptRecord("account not allocated", expected=size, got=len(self.data))
        if not self.is_empty:
            raise ValueError("account already allocated")
        self.data.extend(bytes(size))
        self.allocatable = False

    def __repr__(self) -> str:
        return (
            f"AccountHandle(address={self.address.hex()[:16]}…, "
            f"len={len(self.data)}, signed={self.credential is not None})"
        )


__all__ = ["AccountHandle"]
