"""
piggybank.config: parameter limits, amount width and logging level.

This module centralizes configuration for the contract host. It has NO
third-party deps and is safe to import very early.

Configuration precedence:
  1) Environment variables (PIGGYBANK_*)
  2) Hardcoded safe defaults below

Key env vars (case-insensitive where boolean):
  - PIGGYBANK_STRICT                (bool)  default: true
        reject trailing bytes after a decoded receive parameter
  - PIGGYBANK_MAX_PARAMETER_BYTES   (int)   default: 1024
  - PIGGYBANK_MAX_AMOUNT_BITS       (int)   default: 64
  - PIGGYBANK_LOG_LEVEL             (str)   default: WARNING

Usage:
    from piggybank.config import load_config
    CFG = load_config()
    if CFG.strict_mode: ...
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict

_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "t", "yes", "y", "on")


def _env_int(name: str, default: int, *, min_v: int, max_v: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        v = int(raw, 0)
    except ValueError:
        return default
    if v < min_v:
        return min_v
    if v > max_v:
        return max_v
    return v


def _env_level(name: str, default: str) -> str:
    raw = (os.getenv(name) or "").strip().upper()
    return raw if raw in _LEVELS else default


@dataclass(frozen=True)
class BankConfig:
    strict_mode: bool
    max_parameter_bytes: int
    max_amount_bits: int
    log_level: str

    @property
    def max_amount(self) -> int:
        return (1 << self.max_amount_bits) - 1

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "strict_mode": self.strict_mode,
            "max_parameter_bytes": self.max_parameter_bytes,
            "max_amount_bits": self.max_amount_bits,
            "log_level": self.log_level,
        }


@lru_cache(maxsize=1)
def load_config() -> BankConfig:
    """
    Build and cache a BankConfig from environment + safe defaults.
    """
    return BankConfig(
        strict_mode=_env_bool("PIGGYBANK_STRICT", True),
        max_parameter_bytes=_env_int("PIGGYBANK_MAX_PARAMETER_BYTES", 1024, min_v=1, max_v=65_535),
        max_amount_bits=_env_int("PIGGYBANK_MAX_AMOUNT_BITS", 64, min_v=8, max_v=256),
        log_level=_env_level("PIGGYBANK_LOG_LEVEL", "WARNING"),
    )


# Module-level singleton for convenience; load_config() stays the canonical
# accessor (cached).
CFG: BankConfig = load_config()

__all__ = ["BankConfig", "load_config", "CFG"]
