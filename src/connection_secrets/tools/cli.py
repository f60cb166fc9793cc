"""Command-line interface for checking secret store configurations."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from connection_secrets.core.audit.filters import ConfigFilter
from connection_secrets.core.config.base import LogFormat
from connection_secrets.core.config.loader import load_from_file, load_store_config
from connection_secrets.core.config.serialization import to_wire
from connection_secrets.core.config.settings import LoggingConfig, ResolverSettings
from connection_secrets.core.config.validator import validate_store_config
from connection_secrets.core.exceptions import SecretStoreError
from connection_secrets.core.secrets.dispatch import (
    KubernetesStoreHandle,
    StoreHandle,
    VaultKubernetesAuth,
    VaultStoreHandle,
)
from connection_secrets.core.secrets.factory import build_dispatcher

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_RESOLUTION_FAILED = 2

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(config: LoggingConfig, level: str | None = None) -> None:
    """Configure root logging from *config*, optionally overriding the level."""
    if config.output == "stdout":
        handler: logging.Handler = logging.StreamHandler(sys.stdout)
    elif config.output == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    else:
        handler = logging.FileHandler(config.output)
    if config.format is LogFormat.JSON:
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))
    logging.basicConfig(level=getattr(logging, level or config.level.value), handlers=[handler], force=True)


def describe_handle(handle: StoreHandle) -> str:
    """One-line summary of a dispatched store; never includes credential values."""
    if isinstance(handle, KubernetesStoreHandle):
        kubeconfig = f"{len(handle.kubeconfig)} bytes" if handle.kubeconfig else "in-cluster"
        return f"Kubernetes store (scope={handle.default_scope}, kubeconfig={kubeconfig})"
    if isinstance(handle, VaultStoreHandle):
        if isinstance(handle.auth, VaultKubernetesAuth):
            auth = f"Kubernetes role={handle.auth.role}"
        else:
            auth = "Token"
        return (
            f"Vault store (scope={handle.default_scope}, server={handle.server}, "
            f"mountPath={handle.mount_path}, version={handle.version.value}, auth={auth})"
        )
    return f"Plugin store (scope={handle.default_scope}, endpoint={handle.endpoint}, configRef={handle.config_ref})"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="css-check",
        description="Validate a secret store configuration and optionally resolve its credentials.",
    )
    parser.add_argument(
        "config",
        help="Path to the store configuration (JSON or HOCON).",
    )
    parser.add_argument(
        "--settings",
        default=None,
        help="Path to a HOCON resolver settings file.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=False,
        help="Treat configuration blocks ignored by the selected type as errors.",
    )
    parser.add_argument(
        "--resolve",
        action="store_true",
        default=False,
        help="Resolve every credential the selected backend needs.",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Override the logging level from the settings.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint.

    Args:
        argv: Command-line arguments. Defaults to ``sys.argv[1:]``.

    Returns:
        Exit code: 0 when valid (and resolved, with ``--resolve``), 1 for
        an invalid configuration, 2 when credential resolution fails.
    """
    args = _build_parser().parse_args(argv)

    try:
        settings = load_from_file(args.settings, ResolverSettings) if args.settings else ResolverSettings()
    except Exception as exc:
        logging.basicConfig(level=logging.INFO, format=_TEXT_FORMAT)
        logger.error("Failed to load settings: %s", exc)
        return EXIT_INVALID
    configure_logging(settings.logging, args.log_level)

    try:
        config = load_store_config(args.config)
    except (SecretStoreError, OSError) as exc:
        logger.error("Failed to load store config: %s", exc)
        return EXIT_INVALID

    result = validate_store_config(config, strict=args.strict)
    for warning in result.warnings:
        print(f"WARNING: {warning}", file=sys.stderr)
    for error in result.errors:
        location = f" [{error.field}]" if error.field else ""
        print(f"ERROR{location}: {error.message}", file=sys.stderr)
    if not result.is_valid:
        return EXIT_INVALID

    print(json.dumps(ConfigFilter.scrub(to_wire(config)), indent=2))

    if args.resolve:
        try:
            handle = build_dispatcher(settings).dispatch(config)
        except SecretStoreError as exc:
            logger.error("Credential resolution failed: %s", exc)
            return EXIT_RESOLUTION_FAILED
        print(describe_handle(handle))

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
