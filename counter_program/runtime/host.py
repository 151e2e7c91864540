"""
counter_program.runtime.host — an in-memory host for tests and local runs.

The real host (validator runtime, test VM) is an external collaborator. This
module plays its part just far enough to drive the processor:

- accounts live in a dict keyed by 32-byte address
- `create_account` allocates zeroed space for an account up front
- `invoke` runs one instruction against one account and returns an
  InvocationResult; ProgramErrors become FAILED results, never exceptions
- each invocation works on a *copy* of the account bytes and persists it
  only on success, so even a misbehaving processor cannot leave a partial
  write behind

Unknown accounts are handed to the processor as empty, allocatable handles,
which is how the first `Init` creates a record without a separate
allocation step.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from counter_program import logging as clog
from counter_program.auth import Credential
from counter_program.codec.record import RECORD_SIZE, Record, decode_record
from counter_program.config import ProgramConfig, load_config
from counter_program.errors import (AccountExists, ProgramError,
                                    error_to_result_fields)

from .handle import AccountHandle
from .processor import process_instruction

log = clog.get_logger(__name__)


class InvocationStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"

    @property
    def is_success(self) -> bool:
        return self is InvocationStatus.SUCCESS

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


@dataclass(frozen=True)
class InvocationResult:
    """
    Outcome of one `InMemoryHost.invoke`.

    `record` is the committed record on success and None on failure;
    `error` is the ProgramError's dict form on failure.
    """
    status: InvocationStatus
    record: Optional[Record] = None
    error: Optional[Dict[str, Any]] = None

    @property
    def is_success(self) -> bool:
        return self.status.is_success

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"status": self.status.value}
        if self.record is not None:
            out["count"] = self.record.count
        if self.error is not None:
            out["error"] = self.error
        return out


class InMemoryHost:
    def __init__(self, *, config: Optional[ProgramConfig] = None) -> None:
        self._config = config or load_config()
        self._accounts: Dict[bytes, bytearray] = {}

    # ---- accounts ---- #

    def create_account(self, address: bytes, space: int = RECORD_SIZE) -> None:
        """Allocate `space` zeroed bytes for `address`."""
        addr = bytes(address)
        if addr in self._accounts:
            raise AccountExists(address=addr.hex())
        if space < 0:
            raise ValueError("space must be non-negative")
        self._accounts[addr] = bytearray(space)
        log.debug("account created", extra={"account": addr.hex(), "space": space})

    def has_account(self, address: bytes) -> bool:
        return bytes(address) in self._accounts

    def get_data(self, address: bytes) -> Optional[bytes]:
        data = self._accounts.get(bytes(address))
        return None if data is None else bytes(data)

    def get_record(self, address: bytes) -> Optional[Record]:
        """Decode the account's record; None if the account does not exist."""
        data = self.get_data(address)
        return None if data is None else decode_record(data)

    # ---- execution ---- #

    def invoke(
        self,
        address: bytes,
        instruction_data: bytes,
        credential: Optional[Credential] = None,
    ) -> InvocationResult:
        addr = bytes(address)
        existing = self._accounts.get(addr)
        handle = AccountHandle(
            addr,
            bytearray(existing) if existing is not None else bytearray(),
            credential=credential,
            allocatable=existing is None,
        )

        with clog.trace_scope():
            clog.bind(account=addr.hex())
            try:
                record = process_instruction(handle, instruction_data, config=self._config)
            except ProgramError as e:
                fields = error_to_result_fields(e)
                return InvocationResult(
                    status=InvocationStatus(fields["status"]), error=fields["error"]
                )

        self._accounts[addr] = handle.data
        return InvocationResult(status=InvocationStatus.SUCCESS, record=record)


__all__ = ["InvocationStatus", "InvocationResult", "InMemoryHost"]
