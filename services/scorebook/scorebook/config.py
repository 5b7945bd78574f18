"""Configuration loader for the scorebook engine and service."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional


def _get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(key)
    if value is not None:
        value = value.strip()
        if value == "":
            return default
        return value
    return default


def _get_int(key: str, default: int) -> int:
    value = _get_env(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Environment variable {key} must be an integer") from exc


def _get_float(key: str, default: float) -> float:
    value = _get_env(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"Environment variable {key} must be a number") from exc


def _get_fraction(key: str, default: float) -> float:
    value = _get_float(key, default)
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"Environment variable {key} must be between 0 and 1")
    return value


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Tuning constants for one parse.

    Every distance is a fraction of the page dimension it is measured along.
    The values were tuned against Mark 5 scans and are not derived from the
    printed form, so they stay overridable.
    """

    row_threshold: float = 0.015
    header_buffer: float = 0.005
    column_tolerance: float = 0.05
    foul_confidence_drop: float = 0.15
    blank_min_chars: int = 15
    default_scoring_left: float = 0.55


@dataclass(slots=True)
class AppConfig:
    engine: EngineConfig = field(default_factory=EngineConfig)
    log_level: str = "INFO"


def load_engine_config() -> EngineConfig:
    defaults = EngineConfig()
    return EngineConfig(
        row_threshold=_get_fraction("SCOREBOOK_ROW_THRESHOLD", defaults.row_threshold),
        header_buffer=_get_fraction("SCOREBOOK_HEADER_BUFFER", defaults.header_buffer),
        column_tolerance=_get_fraction("SCOREBOOK_COLUMN_TOLERANCE", defaults.column_tolerance),
        foul_confidence_drop=_get_fraction(
            "SCOREBOOK_FOUL_CONFIDENCE_DROP", defaults.foul_confidence_drop
        ),
        blank_min_chars=max(0, _get_int("SCOREBOOK_BLANK_MIN_CHARS", defaults.blank_min_chars)),
        default_scoring_left=_get_fraction(
            "SCOREBOOK_DEFAULT_SCORING_LEFT", defaults.default_scoring_left
        ),
    )


def load_config() -> AppConfig:
    return AppConfig(
        engine=load_engine_config(),
        log_level=(_get_env("LOG_LEVEL", "INFO") or "INFO").upper(),
    )
