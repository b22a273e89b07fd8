"""Configuration management for the PayE engine."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_BASIC_SALARY_RATIO = 0.7


@dataclass(frozen=True)
class SplitConfig:
    """
    Salary splitting configuration.

    When enabled, piece-rate earnings that reach the basic salary are
    converted into a basic part and an allowance part.

    Attributes:
        enabled: Whether splitting applies at all. Default False.
        basic_salary_ratio: Share of converted earnings that becomes basic
            salary. Must lie strictly between 0 and 1. Default 0.7.
    """

    enabled: bool = False
    basic_salary_ratio: float = DEFAULT_BASIC_SALARY_RATIO

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not 0 < self.basic_salary_ratio < 1:
            raise ValueError(
                f"basic_salary_ratio must be between 0 and 1 exclusive, "
                f"got {self.basic_salary_ratio}"
            )

    @property
    def allowance_ratio(self) -> float:
        return 1 - self.basic_salary_ratio

    @classmethod
    def from_ratio(cls, enabled: bool, ratio: float | None = None) -> SplitConfig:
        """Build a config, falling back to the default ratio when out of range."""
        if ratio is None:
            ratio = DEFAULT_BASIC_SALARY_RATIO
        elif not 0 < ratio < 1:
            logger.warning(
                "Invalid basic salary ratio %s, using default %s",
                ratio,
                DEFAULT_BASIC_SALARY_RATIO,
            )
            ratio = DEFAULT_BASIC_SALARY_RATIO
        return cls(enabled=enabled, basic_salary_ratio=ratio)


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    split_enabled: bool
    basic_salary_ratio: float
    engine_version: str
    host: str
    port: int
    debug: bool
    log_level: str

    def split_config(self) -> SplitConfig:
        """Return the process-wide split configuration."""
        return SplitConfig.from_ratio(self.split_enabled, self.basic_salary_ratio)

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        return cls(
            split_enabled=os.getenv("PAYE_SPLIT_ENABLED", "false").lower() == "true",
            basic_salary_ratio=_ratio_from_env(),
            engine_version=os.getenv("ENGINE_VERSION", "1.0.0"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def _ratio_from_env() -> float:
    """Read PAYE_BASIC_SALARY_RATIO; unparseable values use the default."""
    raw = os.getenv("PAYE_BASIC_SALARY_RATIO")
    if raw is None:
        return DEFAULT_BASIC_SALARY_RATIO
    try:
        return float(raw)
    except ValueError:
        logger.warning(
            "Invalid basic salary ratio %r, using default %s",
            raw,
            DEFAULT_BASIC_SALARY_RATIO,
        )
        return DEFAULT_BASIC_SALARY_RATIO


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for CLI and server entry points."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
