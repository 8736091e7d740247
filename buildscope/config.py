"""Dashboard configuration — env-driven.

Centralized config using pydantic-settings for environment variable
support.  Reads from a .env file and BUILDSCOPE_* environment variables.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class DashboardConfig(BaseSettings):
    """Dashboard configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export BUILDSCOPE_LOG_LEVEL=DEBUG
        export BUILDSCOPE_SNAPSHOT_PATH=/data/build.json
        export BUILDSCOPE_STATUS_CATALOG_PATH=/etc/buildscope/statuses.json
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BUILDSCOPE_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Rendering
    task_link_prefix: str = "/task/"
    refresh_hz: float = 2.0
    status_catalog_path: Path | None = None

    # Data sources
    snapshot_path: Path = Path("build.json")
    history_path: Path = Path("build_history.json")

    # Dashboard server
    host: str = "0.0.0.0"
    port: int = 8501

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"


def configure_logging(cfg: DashboardConfig) -> None:
    """Apply the configured log level to the root logger."""
    level = logging.DEBUG if cfg.debug else cfg.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Module-level singleton: import as `from buildscope.config import config`
config = DashboardConfig()
