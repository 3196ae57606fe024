"""
Runtime settings read from the environment.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from ..diagnostics import parse_level

ENV_PREFIX = "MOCKTEMPLATES_"


@dataclass(frozen=True)
class Settings:
    config_dir: str = "configs"
    log_level: str = "INFO"
    log_format: str = "human"

    @property
    def log_level_value(self) -> int:
        return parse_level(self.log_level)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Read MOCKTEMPLATES_CONFIG_DIR, MOCKTEMPLATES_LOG_LEVEL and MOCKTEMPLATES_LOG_FORMAT."""
        environ = os.environ if environ is None else environ
        settings = cls(
            config_dir=environ.get(ENV_PREFIX + "CONFIG_DIR", cls.config_dir),
            log_level=environ.get(ENV_PREFIX + "LOG_LEVEL", cls.log_level),
            log_format=environ.get(ENV_PREFIX + "LOG_FORMAT", cls.log_format).lower(),
        )
        parse_level(settings.log_level)
        if settings.log_format not in ("human", "json"):
            raise ValueError(f"Unknown log format: {settings.log_format}")
        return settings
