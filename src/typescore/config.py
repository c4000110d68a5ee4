"""Configuration management for typescore."""

import os
import sys
import tempfile
from pathlib import Path

import toml
from pydantic import BaseModel, Field, ValidationError, field_validator

CONFIG_DIR = Path(os.environ.get("TYPESCORE_HOME", Path.home() / ".typescore")).expanduser()
CONFIG_FILE = CONFIG_DIR / "config.toml"

# Matches the time-limit default of the browser version of the test
DEFAULT_TIME_LIMIT_SECONDS = 60


class LoggingConfig(BaseModel):
    """Session logging settings."""

    enabled: bool = True
    # Events buffered in memory before flushing to disk
    buffer_size: int = Field(default=10, ge=1)


class TypescoreConfig(BaseModel):
    """Main configuration model."""

    time_limit_seconds: int = Field(default=DEFAULT_TIME_LIMIT_SECONDS, gt=0)
    # Recognition language passed to whatever transcriber supplies the reference
    language: str = "en-US"
    output_format: str = "text"
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        """Ensure output format is one the formatters support."""
        if v not in ("text", "markdown", "json"):
            raise ValueError(f"Unknown output format: {v}")
        return v


def load_config() -> TypescoreConfig:
    """Load configuration from file, or create defaults."""
    if CONFIG_FILE.exists():
        try:
            data = toml.load(CONFIG_FILE)
            config = TypescoreConfig(**data)
        except (toml.TomlDecodeError, TypeError) as e:
            print(f"Warning: Failed to load config ({e}), using defaults", file=sys.stderr)
            config = TypescoreConfig()
        except ValidationError as e:
            print(f"Warning: Config validation failed ({e}), using defaults", file=sys.stderr)
            config = TypescoreConfig()
    else:
        config = TypescoreConfig()
        save_config(config)

    return config


def save_config(config: TypescoreConfig) -> None:
    """Save configuration to file with atomic write."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    data = config.model_dump()

    # Write to temporary file first (atomic operation)
    temp_fd, temp_path = tempfile.mkstemp(dir=CONFIG_DIR, prefix=".config_", suffix=".toml.tmp")
    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            toml.dump(data, f)

        os.chmod(temp_path, 0o600)
        os.replace(temp_path, CONFIG_FILE)
    except Exception:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise
