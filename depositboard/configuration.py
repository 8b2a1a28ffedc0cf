"""Mini README: Runtime configuration for the deposit board service.

Structure:
    * DepositBoardSettings - Pydantic settings model read from the environment.
    * get_settings - cached accessor shared by the CLI and the web factory.

Usage:
    Every field can be overridden with a ``DEPOSITBOARD_`` prefixed
    environment variable or a ``.env`` file next to the working directory.
    Validation happens once per process thanks to the cache.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DepositBoardSettings(BaseSettings):
    """Runtime configuration for the deposit board."""

    model_config = SettingsConfigDict(
        env_prefix="DEPOSITBOARD_",
        env_file=".env",
        case_sensitive=False,
    )

    environment: str = Field(
        "development",
        description="Environment label; development-style values switch logging to DEBUG.",
    )
    data_directory: Path = Field(
        Path("data"),
        description="Directory holding the persisted credentials file.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the web service to bind to.",
    )
    interface_port: int = Field(
        3000,
        description="Port the web service exposes.",
        ge=1,
        le=65535,
    )
    master_account: str = Field(
        "Esther",
        description="Name of the single account allowed to run irreversible admin actions.",
    )
    master_password: str = Field(
        "1705",
        description="Password seeded for the master account when no credentials file exists.",
    )
    sink_queue_size: int = Field(
        64,
        description=(
            "Pending live-update messages buffered per browser before the"
            " connection is dropped as too slow."
        ),
        ge=1,
    )
    keepalive_seconds: float = Field(
        15.0,
        description="Idle interval after which an SSE keep-alive comment is sent.",
        gt=0,
    )

    @field_validator("data_directory", mode="before")
    @classmethod
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Ensure configured paths expand user directories and exist."""

        path = Path(value).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def credentials_file(self) -> Path:
        """Location of the JSON credentials store."""

        return self.data_directory / "credentials.json"


@lru_cache()
def get_settings() -> DepositBoardSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return DepositBoardSettings()
