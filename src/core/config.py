"""
Central configuration: rules variant, version control defaults, storage locations and logging.

Values come from environment variables (CHECKERS_*), falling back to the defaults below.
"""

import logging
import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


class RulesSettings(BaseModel):
    """Rules variant"""

    captures_mandatory: bool = Field(
        default=False, description="Only allow captures when any piece can capture"
    )


class VcsSettings(BaseModel):
    default_branch_name: str = Field(
        default="default", min_length=1, description="Branch a fresh history starts on"
    )


class StorageSettings(BaseModel):
    database_url: str = Field(
        default="sqlite:///checkers.db", description="SQLAlchemy database URL"
    )
    vcs_directory: str = Field(
        default="vcs_data", description="Directory for file based version control storage"
    )


class LoggingSettings(BaseModel):
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, value: object) -> str:
        level = str(value).upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {VALID_LOG_LEVELS}")
        return level


class CheckersConfig(BaseModel):
    rules: RulesSettings = Field(default_factory=RulesSettings)
    vcs: VcsSettings = Field(default_factory=VcsSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_env(cls) -> "CheckersConfig":
        """Create configuration from environment variables."""
        return cls(
            rules=RulesSettings(
                captures_mandatory=os.getenv("CHECKERS_MANDATORY", "false").lower()
                == "true",
            ),
            vcs=VcsSettings(
                default_branch_name=os.getenv("CHECKERS_DEFAULT_BRANCH", "default"),
            ),
            storage=StorageSettings(
                database_url=os.getenv("CHECKERS_DATABASE_URL", "sqlite:///checkers.db"),
                vcs_directory=os.getenv("CHECKERS_VCS_DIR", "vcs_data"),
            ),
            logging=LoggingSettings(
                log_level=os.getenv("CHECKERS_LOG_LEVEL", "INFO"),
            ),
        )


# Global configuration instance
_config: Optional[CheckersConfig] = None


def get_config() -> CheckersConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = CheckersConfig.from_env()
    return _config


def reset_config() -> None:
    """Forget the global configuration. The next get_config() reads the environment again."""
    global _config
    _config = None


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """Apply the configured level to the root logger (call once, at application start)"""
    settings = settings or get_config().logging
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(settings.log_level)
