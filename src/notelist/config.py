"""Configuration module for NoteList."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

from notelist import __version__
from notelist.exceptions import ConfigurationError

# Load environment variables from the project root .env file.
# Anchored to __file__ so it works regardless of the process CWD.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

DEFAULT_DIR_NAME = ".notelist"


def _user_env_path() -> Optional[Path]:
    """User-level config lives alongside the collections, if a home exists."""
    try:
        return Path.home() / DEFAULT_DIR_NAME / ".env"
    except (RuntimeError, KeyError):
        return None


_USER_ENV = _user_env_path()
if _USER_ENV is not None:
    load_dotenv(_USER_ENV)

NOTES_FILE_NAME = "notes.json"
CATEGORIES_FILE_NAME = "categories.json"


def _env_int(name: str, default: int) -> int:
    """Read an integer setting from the environment."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{name} must be an integer, got {raw!r}", config_key=name
        ) from e


class NoteListConfig(BaseModel):
    """Configuration for the NoteList backend."""

    # Injected storage root. When unset the root is ~/<dir_name>.
    data_dir: Optional[Path] = Field(
        default_factory=lambda: (
            Path(os.getenv("NOTELIST_DATA_DIR"))
            if os.getenv("NOTELIST_DATA_DIR")
            else None
        )
    )
    # Hidden directory created under the home directory
    dir_name: str = Field(
        default_factory=lambda: os.getenv("NOTELIST_DIR_NAME", DEFAULT_DIR_NAME)
    )
    notes_file: str = Field(default=NOTES_FILE_NAME)
    categories_file: str = Field(default=CATEGORIES_FILE_NAME)
    # Pretty-print indentation of the rewritten collection files
    json_indent: int = Field(
        default_factory=lambda: _env_int("NOTELIST_JSON_INDENT", 2)
    )
    # Logging configuration
    log_level: str = Field(
        default_factory=lambda: os.getenv("NOTELIST_LOG_LEVEL", "INFO")
    )
    log_dir: Optional[Path] = Field(
        default_factory=lambda: (
            Path(os.getenv("NOTELIST_LOG_DIR"))
            if os.getenv("NOTELIST_LOG_DIR")
            else None
        )
    )
    # Server configuration
    server_name: str = Field(default=os.getenv("NOTELIST_SERVER_NAME", "notelist"))
    server_version: str = Field(default=__version__)

    model_config = {"validate_assignment": True}

    @model_validator(mode="after")
    def _validate_storage_config(self) -> "NoteListConfig":
        """Validate storage settings."""
        if self.json_indent < 0:
            raise ConfigurationError(
                "json_indent must be >= 0", config_key="json_indent"
            )
        if not self.dir_name.strip():
            raise ConfigurationError(
                "dir_name cannot be empty", config_key="dir_name"
            )
        if "/" in self.dir_name or "\\" in self.dir_name:
            raise ConfigurationError(
                "dir_name must be a single path component", config_key="dir_name"
            )
        return self


# Create a global config instance
config = NoteListConfig()
