"""
tests.property package bootstrap.

Shared Hypothesis configuration for the property suites.

What this does on import:
- Registers named profiles (dev/ci/stress).
- Selects the active profile from HYPOTHESIS_PROFILE, otherwise "ci" when
  the CI env var is truthy and "dev" locally.
- Re-exports `given`, `st` and a few wire-level strategies.

Usage in tests:
    from tests.property import given, st, u32

    @given(u32)
    def test_something(n):
        ...
"""
from __future__ import annotations

import os
from typing import Final

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from counter_program.codec.instruction import Instruction, Op
from counter_program.codec.record import U32_MAX, Record

settings.register_profile(
    "dev",
    settings(max_examples=100, deadline=None, suppress_health_check=[HealthCheck.too_slow]),
)
settings.register_profile(
    "ci",
    settings(
        max_examples=300,
        deadline=None,
        suppress_health_check=[HealthCheck.too_slow],
        derandomize=True,
    ),
)
settings.register_profile(
    "stress",
    settings(max_examples=2000, deadline=None, suppress_health_check=[HealthCheck.too_slow]),
)


def _env_truthy(name: str) -> bool:
    return (os.getenv(name) or "").lower() not in ("", "0", "false", "no", "off")


_active: Final[str] = os.getenv("HYPOTHESIS_PROFILE") or ("ci" if _env_truthy("CI") else "dev")
settings.load_profile(_active)


# ---- strategies --------------------------------------------------------------

u32 = st.integers(min_value=0, max_value=U32_MAX)

records = st.builds(Record, u32)


def _instruction(op: Op) -> st.SearchStrategy[Instruction]:
    if op.takes_operand:
        return st.builds(Instruction, st.just(op), u32)
    return st.just(Instruction(op))


instructions = st.sampled_from(list(Op)).flatmap(_instruction)


__all__ = ["given", "st", "u32", "records", "instructions"]
