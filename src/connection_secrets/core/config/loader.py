"""Configuration loaders.

Resolver settings are snake_case dataclasses loaded with dataconf from
HOCON files, strings, or environment variables.  Persisted store
configuration is parsed as JSON, or with pyhocon for hand-written
HOCON, and decoded through the camelCase wire codec.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, TypeVar, cast

import dataconf
from pyhocon import ConfigFactory

from connection_secrets.core.config.connection import PublishConnectionDetailsTo
from connection_secrets.core.config.serialization import from_wire
from connection_secrets.core.config.store import SecretStoreConfig
from connection_secrets.core.exceptions import InvalidConfigError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def load_from_file(path: str, config_class: type[T]) -> T:
    """Load settings from a HOCON file.

    Example:
        >>> settings = load_from_file("resolver.conf", ResolverSettings)
    """
    return cast(T, dataconf.file(path, config_class))


def load_from_string(hocon_str: str, config_class: type[T]) -> T:
    """Load settings from a HOCON string.

    Example:
        >>> settings = load_from_string('default_namespace: "crossplane-system"', ResolverSettings)
    """
    return cast(T, dataconf.string(hocon_str, config_class))


def load_from_env(prefix: str, config_class: type[T]) -> T:
    """Load settings from environment variables.

    Example:
        >>> # With CSS_DEFAULT_NAMESPACE=crossplane-system
        >>> settings = load_from_env("CSS_", ResolverSettings)
    """
    return cast(T, dataconf.env(prefix, config_class))


def _parse_document(text: str, source: str) -> dict[str, Any]:
    # Persisted documents are JSON; label keys contain dots that HOCON would split.
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        pass
    else:
        if not isinstance(data, dict):
            raise InvalidConfigError(f"Cannot parse {source}: expected an object")
        return data

    try:
        tree = ConfigFactory.parse_string(text)
    except Exception as exc:  # pyhocon surfaces pyparsing errors unwrapped
        raise InvalidConfigError(f"Cannot parse {source}: {exc}") from exc
    return cast(dict[str, Any], tree.as_plain_ordered_dict())


def load_wire_from_string(text: str, config_class: type[T]) -> T:
    """Decode a persisted JSON/HOCON document into *config_class*.

    Raises:
        InvalidConfigError: If the document cannot be parsed or decoded.
    """
    return from_wire(config_class, _parse_document(text, "configuration string"))


def load_wire_from_file(path: str | Path, config_class: type[T]) -> T:
    """Decode a persisted JSON/HOCON file into *config_class*.

    Raises:
        InvalidConfigError: If the file cannot be parsed or decoded.
        OSError: If the file cannot be read.
    """
    text = Path(path).read_text()
    logger.debug("Loaded %s from %s", config_class.__name__, path)
    return from_wire(config_class, _parse_document(text, str(path)))


def load_store_config(path: str | Path) -> SecretStoreConfig:
    """Load a :class:`SecretStoreConfig` from a JSON/HOCON file."""
    return load_wire_from_file(path, SecretStoreConfig)


def load_publish_config(path: str | Path) -> PublishConnectionDetailsTo:
    """Load a :class:`PublishConnectionDetailsTo` from a JSON/HOCON file."""
    return load_wire_from_file(path, PublishConnectionDetailsTo)
