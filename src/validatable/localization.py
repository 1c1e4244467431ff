"""Localization collaborator for rule failure messages.

Rules that carry a localization key ask the process-wide service for text
before synthesizing their message. A blank or missing lookup falls back to
the rule's static failure text.

Usage:
    from validatable.localization import LocalizationFactory, YamlLocalizationService

    # At application startup
    LocalizationFactory.initialize(YamlLocalizationService(Path("locale/en.yaml")))
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

import yaml

logger = logging.getLogger(__name__)


class LocalizationService(Protocol):
    """Protocol for looking up localized message text by key."""

    def lookup(self, key: str) -> str:
        """Return the text for key, or an empty string if there is none."""
        ...


class MappingLocalizationService:
    """Localization backed by an in-memory mapping."""

    def __init__(self, messages: Mapping[str, str] | None = None):
        self.messages = dict(messages or {})

    def lookup(self, key: str) -> str:
        return self.messages.get(key, "")


class YamlLocalizationService(MappingLocalizationService):
    """Localization backed by a flat YAML catalog.

    Nested mappings are flattened with dots, so the catalog

        user:
          email_required: E-Mail can not be left blank.

    answers the key ``user.email_required``.
    """

    def __init__(self, catalog_path: Path):
        self.catalog_path = catalog_path
        with open(catalog_path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Localization catalog {catalog_path} must be a mapping")
        super().__init__(self._flatten(data))

    def _flatten(self, data: dict, prefix: str = "") -> dict[str, str]:
        flat: dict[str, str] = {}
        for key, value in data.items():
            name = f"{prefix}{key}"
            if isinstance(value, dict):
                flat.update(self._flatten(value, f"{name}."))
            elif value is not None:
                flat[name] = str(value)
        return flat


class LocalizationFactory:
    """Holds the process-wide localization service.

    There is no service until one is installed; rules then use their static
    failure text.
    """

    _service: LocalizationService | None = None

    @classmethod
    def initialize(cls, service: LocalizationService) -> None:
        cls._service = service

    @classmethod
    def create_service(cls) -> LocalizationService | None:
        return cls._service

    @classmethod
    def reset(cls) -> None:
        """Remove the installed service. Primarily for testing."""
        cls._service = None


def localize(key: str | None, fallback: str) -> str:
    """Return the localized text for key, or fallback on a blank or missing lookup."""
    if not key:
        return fallback

    service = LocalizationFactory.create_service()
    if service is None:
        return fallback

    text = service.lookup(key)
    if not text or not text.strip():
        logger.warning("No localized text for key '%s', using static message", key)
        return fallback
    return text
