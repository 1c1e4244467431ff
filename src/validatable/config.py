"""Runtime configuration for validatable."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from validatable.localization import LocalizationFactory, YamlLocalizationService

logger = logging.getLogger(__name__)


@dataclass
class ValidatableConfig:
    """Configuration for rule tables, localization and logging.

    Attributes:
        rules_path: Rule table file or directory
        locale_path: Optional YAML message catalog for localization keys
        log_level: Logging level name used by the CLI
    """

    rules_path: Path
    locale_path: Path | None = None
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> ValidatableConfig:
        """Create config from environment variables.

        Resolution order for each setting:
        1. VALIDATABLE_RULES_PATH / VALIDATABLE_LOCALE_PATH / VALIDATABLE_LOG_LEVEL
        2. Default: {base_path or cwd}/rules, no catalog, WARNING
        """
        base = base_path or Path.cwd()

        rules_path = os.environ.get("VALIDATABLE_RULES_PATH")
        locale_path = os.environ.get("VALIDATABLE_LOCALE_PATH")

        return cls(
            rules_path=Path(rules_path) if rules_path else base / "rules",
            locale_path=Path(locale_path) if locale_path else None,
            log_level=os.environ.get("VALIDATABLE_LOG_LEVEL", "WARNING").upper(),
        )


def configure(config: ValidatableConfig) -> None:
    """Install process-wide services described by the config."""
    if config.locale_path is not None:
        LocalizationFactory.initialize(YamlLocalizationService(config.locale_path))
        logger.debug("Loaded localization catalog %s", config.locale_path)
