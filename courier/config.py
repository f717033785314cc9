"""Runtime configuration — env-driven.

Centralized settings using pydantic-settings.  Reads from a .env file and
COURIER_* environment variables; CLI options override individual fields.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CourierSettings(BaseSettings):
    """Courier configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export COURIER_LOG_LEVEL=DEBUG
        export COURIER_IDLE_INTERVAL_SECONDS=0.25
        export COURIER_QUEUE_DB_PATH=/data/queue.db

    Or via .env file::

        COURIER_DEBUG=true
        COURIER_NODE_CAPACITY=100
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="COURIER_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"
    debug: bool = False

    # Dispatch loop
    idle_interval_seconds: float = Field(default=1.0, ge=0)

    # Queue source
    queue_db_path: Path = Path(".courier/queue.db")
    max_local_queue: int = Field(default=1024, gt=0)

    # Local file sink
    outbox_path: Path = Path(".courier/outbox")
    node_capacity: int = Field(default=0, ge=0)  # 0 = unlimited

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level.upper()
