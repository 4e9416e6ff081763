"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


DEFAULT_TARGET_THRESHOLD = 40_000.0
DEFAULT_TARGET_MULTIPLIER = 7.0
DEFAULT_MILESTONE_THRESHOLD = 15_000.0
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_OUTPUT_DIR = "output"
LOG_LEVELS: tuple[str, ...] = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid {name}: {raw}") from exc
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def _env_log_level(name: str, default: str) -> str:
    raw = (os.getenv(name) or default).strip().upper()
    if raw not in LOG_LEVELS:
        raise ValueError(f"{name} must be one of {', '.join(LOG_LEVELS)}, got {raw}")
    return raw


def _env_path(name: str) -> Path | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return Path(raw.strip())


@dataclass(frozen=True)
class Settings:
    """Thresholds and paths shared by the CLI and the report service.

    ``target_threshold`` gates the target-revenue multiplier while
    ``milestone_threshold`` only drives the milestone flag in the summary.
    They are compared against different revenue figures and are kept apart.
    """

    target_threshold: float = DEFAULT_TARGET_THRESHOLD
    target_multiplier: float = DEFAULT_TARGET_MULTIPLIER
    milestone_threshold: float = DEFAULT_MILESTONE_THRESHOLD
    log_level: str = DEFAULT_LOG_LEVEL
    reference_path: Path | None = None
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)


def load_settings() -> Settings:
    output_dir = _env_path("ROLLUP_OUTPUT_DIR") or Path(DEFAULT_OUTPUT_DIR)
    return Settings(
        target_threshold=_env_float("ROLLUP_TARGET_THRESHOLD", DEFAULT_TARGET_THRESHOLD),
        target_multiplier=_env_float("ROLLUP_TARGET_MULTIPLIER", DEFAULT_TARGET_MULTIPLIER),
        milestone_threshold=_env_float("ROLLUP_MILESTONE_THRESHOLD", DEFAULT_MILESTONE_THRESHOLD),
        log_level=_env_log_level("ROLLUP_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        reference_path=_env_path("ROLLUP_REFERENCE_PATH"),
        output_dir=output_dir,
    )
