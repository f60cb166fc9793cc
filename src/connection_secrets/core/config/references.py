"""Named references to other configuration objects."""

from __future__ import annotations

from dataclasses import dataclass

from connection_secrets.core.config.serialization import wire_field
from connection_secrets.core.exceptions import InvalidConfigError

DEFAULT_STORE_CONFIG_NAME = "default"
"""Name of the store config used when a resource does not reference one."""


@dataclass(frozen=True)
class Reference:
    """Reference to an object of an implied kind, by exact name."""

    name: str = wire_field("name")
    """Name of the referenced object (required, case-sensitive)"""

    def __post_init__(self) -> None:
        if not self.name:
            raise InvalidConfigError("name is required", field="name")


@dataclass(frozen=True)
class ConfigReference:
    """Reference to a configuration object of an explicit kind."""

    api_version: str = wire_field("apiVersion")
    """API version of the referenced config"""

    kind: str = wire_field("kind")
    """Kind of the referenced config"""

    name: str = wire_field("name")
    """Name of the referenced config"""

    def __str__(self) -> str:
        return f"{self.api_version}/{self.kind}/{self.name}"
