import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Orchestrator settings, read once at startup."""

    model_config = SettingsConfigDict(env_prefix="BUILDGRAPH_", env_file=".env", extra="ignore")

    # Output tree; a relative root is anchored at PROJECT_DIR
    OUTPUT_ROOT: str = "../build"
    PROJECT_DIR: str = "."

    # Declared project set
    PROJECTS_FILE: str = "projects.json"
    PRIMARY_PROJECT: Optional[str] = None

    LOG_LEVEL: str = "INFO"

    # Plugin and repository declarations, handed through uninterpreted
    PASSTHROUGH: Dict[str, Any] = {}

    @field_validator("LOG_LEVEL")
    @classmethod
    def known_log_level(cls, v: str) -> str:
        if not isinstance(logging.getLevelName(v.upper()), int):
            raise ValueError(f"unknown log level: {v}")
        return v.upper()

    def project_dir(self) -> Path:
        return Path(self.PROJECT_DIR).absolute()

    def projects_file(self) -> Path:
        path = Path(self.PROJECTS_FILE)
        return path if path.is_absolute() else self.project_dir() / path


def get_settings(**overrides: Any) -> Settings:
    return Settings(**overrides)
