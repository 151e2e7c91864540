"""
counter_program.config — decoding strictness, signing domain and logging knobs.

This module centralizes configuration for the counter program. It has NO
third-party deps and is safe to import very early.

Configuration precedence:
  1) Environment variables (COUNTER_*)
  2) Hardcoded safe defaults below

Key env vars (case-insensitive where boolean):
  - COUNTER_STRICT_INSTRUCTION  (bool)   default: true
  - COUNTER_SIGN_DOMAIN         (str)    default: "counter/invoke"
  - COUNTER_LOG_LEVEL           (str)    default: "INFO"
  - COUNTER_LOG_FORMAT          (str)    default: unset (json when not a TTY)

Changing COUNTER_SIGN_DOMAIN invalidates every credential signed under the
old domain; clients and the program must agree on it.

Usage:
    from counter_program.config import load_config
    CFG = load_config()
    if CFG.strict_instruction_length: ...
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional
import os


DEFAULT_SIGN_DOMAIN = "counter/invoke"
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


# ----------------------------- helpers ---------------------------------------


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    return val in ("1", "true", "t", "yes", "y", "on")


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _env_choice(name: str, choices: tuple, default: Optional[str]) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip()
    for c in choices:
        if val.lower() == c.lower():
            return c
    return default


# ------------------------------- config --------------------------------------


@dataclass(frozen=True)
class ProgramConfig:
    # Decoding
    strict_instruction_length: bool

    # Authorization
    sign_domain: str

    # Logging
    log_level: str
    log_format: Optional[str]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "strict_instruction_length": self.strict_instruction_length,
            "sign_domain": self.sign_domain,
            "log_level": self.log_level,
            "log_format": self.log_format,
        }


@lru_cache(maxsize=1)
def load_config() -> ProgramConfig:
    """
    Build and cache a ProgramConfig from environment + safe defaults.

    Call `load_config.cache_clear()` after changing the environment.
    """
    return ProgramConfig(
        strict_instruction_length=_env_bool("COUNTER_STRICT_INSTRUCTION", True),
        sign_domain=_env_str("COUNTER_SIGN_DOMAIN", DEFAULT_SIGN_DOMAIN),
        log_level=_env_choice("COUNTER_LOG_LEVEL", _LOG_LEVELS, "INFO") or "INFO",
        log_format=_env_choice("COUNTER_LOG_FORMAT", ("json", "text"), None),
    )


__all__ = ["ProgramConfig", "load_config", "DEFAULT_SIGN_DOMAIN"]
