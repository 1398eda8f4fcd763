"""Batcher configuration — a frozen dataclass loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

ENV_FLUSH_AT_SIZE = "HB_FLUSH_AT_SIZE"
ENV_FLUSH_INTERVAL_MS = "HB_FLUSH_INTERVAL_MS"
ENV_SKIP_EMPTY = "HB_SKIP_EMPTY"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class BatcherConfig:
    """Flush policies to attach when building a batcher.

    ``None`` leaves the corresponding policy off. Values are validated by
    the policies themselves when passed to ``Batcher.from_config``.
    """

    flush_at_size: int | None = None
    flush_interval_ms: float | None = None
    skip_empty: bool = False


def load_config_from_env(environ: Mapping[str, str] | None = None) -> BatcherConfig:
    """Build a BatcherConfig from ``HB_*`` environment variables.

    Pass ``environ`` for testability; when None, ``os.environ`` is read.
    Unset or blank variables keep the dataclass defaults.

    Raises:
        ValueError: If a numeric variable cannot be parsed.
    """
    env = os.environ if environ is None else environ

    raw_size = env.get(ENV_FLUSH_AT_SIZE, "").strip()
    raw_interval = env.get(ENV_FLUSH_INTERVAL_MS, "").strip()
    raw_skip_empty = env.get(ENV_SKIP_EMPTY, "").strip()

    try:
        flush_at_size = int(raw_size) if raw_size else BatcherConfig.flush_at_size
    except ValueError:
        raise ValueError(f"{ENV_FLUSH_AT_SIZE} must be an integer, got {raw_size!r}") from None
    try:
        flush_interval_ms = (
            float(raw_interval) if raw_interval else BatcherConfig.flush_interval_ms
        )
    except ValueError:
        raise ValueError(f"{ENV_FLUSH_INTERVAL_MS} must be a number, got {raw_interval!r}") from None

    return BatcherConfig(
        flush_at_size=flush_at_size,
        flush_interval_ms=flush_interval_ms,
        skip_empty=_parse_bool(raw_skip_empty) if raw_skip_empty else BatcherConfig.skip_empty,
    )
