"""Runtime configuration — env-driven.

Reads ``PROGRESS_*`` environment variables (and an optional ``.env`` file).
``PROGRESS_STEP_ID`` is the variable a parent job sets so that a child
process reports as one of its sub-steps.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class ProgressSettings(BaseSettings):
    """Settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export PROGRESS_STEP_ID=build.compile
        export PROGRESS_SQUELCH=0.05
        export PROGRESS_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PROGRESS_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Writer defaults; squelch/precision left unset derive from each other
    step_id: str | None = None
    squelch: float | None = None
    precision: int | None = None

    # Logging
    log_level: str = "WARNING"

    # Live watch refresh rate in Hz
    refresh_hz: float = 2.0
