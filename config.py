"""Application configuration."""
import os
from dataclasses import dataclass
from typing import Optional


def _float_or_none(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    return float(value)


@dataclass
class MapperConfig:
    """Mapping engine settings."""

    log_level: str = "WARNING"
    default_locale: str = "en-US"
    batch_timeout: Optional[float] = None  # seconds for a whole apply run
    output_dir: str = "./output"
    rules_dir: str = "./rules"

    @classmethod
    def from_env(cls) -> "MapperConfig":
        """Load config from environment variables."""
        return cls(
            log_level=os.getenv("DATAMAPPER_LOG_LEVEL", "WARNING").upper(),
            default_locale=os.getenv("DATAMAPPER_LOCALE", "en-US"),
            batch_timeout=_float_or_none(os.getenv("DATAMAPPER_BATCH_TIMEOUT")),
            output_dir=os.getenv("DATAMAPPER_OUTPUT_DIR", "./output"),
            rules_dir=os.getenv("DATAMAPPER_RULES_DIR", "./rules"),
        )


@dataclass
class AppConfig:
    """Application configuration."""

    mapper: MapperConfig = None

    def __post_init__(self):
        """Fill in defaults."""
        if self.mapper is None:
            self.mapper = MapperConfig.from_env()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load config from environment variables."""
        return cls(mapper=MapperConfig.from_env())


# Global instance
app_config = AppConfig()
