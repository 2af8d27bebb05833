"""Run settings resolved from CLI flags, environment variables and defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from karel.render.live_renderer import DEFAULT_ANIMATION_STEPS

DEFAULT_LOG_LEVEL = "WARNING"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class RunSettings:
    headless: bool = False
    speed: float | None = None
    animation_steps: int = DEFAULT_ANIMATION_STEPS
    csv_output: bool = False
    prompt: bool = False
    csv_dir: Path = Path(".")
    wait_on_close: bool = True
    log_level: str = DEFAULT_LOG_LEVEL


def resolve_settings(
    *,
    headless: bool | None = None,
    speed: float | None = None,
    animation_steps: int | None = None,
    csv_output: bool = False,
    prompt: bool = False,
    csv_dir: Path | None = None,
    wait_on_close: bool | None = None,
    log_level: str | None = None,
) -> RunSettings:
    if headless is None:
        headless = _env_flag("KAREL_HEADLESS")
    if speed is None:
        speed = _env_float("KAREL_SPEED")
    if animation_steps is None:
        animation_steps = _env_int("KAREL_ANIMATION_STEPS", DEFAULT_ANIMATION_STEPS)
    if csv_dir is None:
        csv_dir = Path(os.getenv("KAREL_CSV_DIR") or ".")
    if wait_on_close is None:
        wait_on_close = not headless
    return RunSettings(
        headless=headless,
        speed=speed,
        animation_steps=animation_steps,
        csv_output=csv_output,
        prompt=prompt,
        csv_dir=csv_dir,
        wait_on_close=wait_on_close,
        log_level=(log_level or os.getenv("KAREL_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
    )


def _env_flag(name: str) -> bool:
    return (os.getenv(name) or "").strip().lower() in _TRUTHY


def _env_float(name: str) -> float | None:
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
