"""Configuration management for the XSD graph loader."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .logger import LogLevel


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: LogLevel = LogLevel.INFO
    format: str = "json"
    destination: str = "stderr"


@dataclass
class Config:
    """Main configuration for loading schema graphs."""

    # Root directory of the local mirror used when a local copy is requested
    cache_dir: Path = field(default_factory=lambda: Path("./xsd-cache"))
    local_copy: bool = False
    timeout: int = 30

    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> List[str]:
        """Validate configuration and return any errors."""
        errors = []

        if self.cache_dir.exists() and not self.cache_dir.is_dir():
            errors.append(f"Cache directory is not a directory: {self.cache_dir}")

        if self.timeout < 1:
            errors.append("timeout must be at least 1 second")

        if self.logging.destination not in {"stdout", "stderr"}:
            errors.append(f"Unknown logging destination: {self.logging.destination}")

        return errors

    @classmethod
    def from_cli_args(cls, **kwargs) -> "Config":
        """Create config from CLI arguments."""
        config = cls()

        for key, value in kwargs.items():
            if hasattr(config, key) and value is not None:
                setattr(config, key, value)

        if isinstance(config.cache_dir, str):
            config.cache_dir = Path(config.cache_dir)

        if kwargs.get("log_level") is not None:
            config.logging.level = LogLevel(kwargs["log_level"])

        return config
