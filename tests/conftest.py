"""
Shared pytest fixtures:
- Clean COUNTER_* environment and a fresh cached config per test
- Deterministic Ed25519 keypairs for the account owner and a stranger
- An in-memory host and a helper that builds signed instruction buffers
- Logger handler cleanup so CLI runs don't leak closed streams
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

import pytest

from counter_program.auth import Credential, Keypair, sign_request
from counter_program.codec.instruction import Instruction, encode_instruction
from counter_program.config import load_config
from counter_program.runtime.host import InMemoryHost

OWNER_SEED = bytes(range(32))
STRANGER_SEED = bytes(range(32, 64))


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "COUNTER_STRICT_INSTRUCTION",
        "COUNTER_SIGN_DOMAIN",
        "COUNTER_LOG_LEVEL",
        "COUNTER_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    load_config.cache_clear()
    yield
    load_config.cache_clear()


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger("counter_program")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def owner() -> Keypair:
    return Keypair.from_seed(OWNER_SEED)


@pytest.fixture
def stranger() -> Keypair:
    return Keypair.from_seed(STRANGER_SEED)


@pytest.fixture
def host() -> InMemoryHost:
    return InMemoryHost()


SignFn = Callable[..., Tuple[bytes, Optional[Credential]]]


@pytest.fixture
def signed(owner: Keypair) -> SignFn:
    """signed(ix, keypair=owner, unsigned=False) -> (instruction bytes, credential)."""

    def _sign(
        ix: Instruction, keypair: Optional[Keypair] = None, *, unsigned: bool = False
    ) -> Tuple[bytes, Optional[Credential]]:
        data = encode_instruction(ix)
        if unsigned:
            return data, None
        kp = keypair or owner
        return data, sign_request(kp, data, account=owner.address)

    return _sign
