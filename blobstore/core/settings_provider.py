"""Settings provider protocol and implementations.

The storage facade reads its connection settings through a SettingsProvider
so hosts can supply them from their own configuration store. Values are
plain strings; None means the setting is absent.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol

from pydantic import SecretStr

if TYPE_CHECKING:
    from blobstore.core.config import Settings


class SettingsProvider(Protocol):
    """Protocol for named string setting lookups."""

    async def get_setting(self, name: str) -> str | None:
        """Return the setting value or None if absent."""
        ...


class StaticSettingsProvider:
    """Settings from a fixed mapping (embedding hosts and tests)."""

    def __init__(self, values: Mapping[str, str | None] | None = None) -> None:
        self._values = dict(values or {})

    async def get_setting(self, name: str) -> str | None:
        value = self._values.get(name)
        return value or None


class EnvironmentSettingsProvider:
    """Settings backed by the pydantic-settings Settings instance.

    Secret fields are unwrapped; empty strings are reported as absent.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        from blobstore.core.config import get_settings

        self._settings = settings or get_settings()

    async def get_setting(self, name: str) -> str | None:
        value = getattr(self._settings, name, None)
        if isinstance(value, SecretStr):
            value = value.get_secret_value()
        if value is None or value == "":
            return None
        return str(value)
