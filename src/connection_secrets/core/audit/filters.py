"""Redaction of credential locators in dumped configuration."""

from __future__ import annotations

from typing import Any

SENSITIVE_KEYS: frozenset[str] = frozenset({"secretRef", "env", "fs"})
"""Wire keys whose values point at credentials."""


class ConfigFilter:
    """Redact credential selectors from wire-format configuration.

    Selectors are not secret values themselves, but they reveal where
    credentials live, so summaries printed for operators hide them.
    """

    @classmethod
    def scrub(
        cls,
        data: dict[str, Any],
        replacement: str = "***REDACTED***",
    ) -> dict[str, Any]:
        """Recursively replace selector values in *data*."""
        result: dict[str, Any] = {}
        for k, v in data.items():
            if k in SENSITIVE_KEYS:
                result[k] = replacement
            elif isinstance(v, dict):
                result[k] = cls.scrub(v, replacement)
            elif isinstance(v, list):
                result[k] = [cls.scrub(item, replacement) if isinstance(item, dict) else item for item in v]
            else:
                result[k] = v
        return result
