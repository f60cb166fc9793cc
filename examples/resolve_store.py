"""Example of validating and dispatching a secret store configuration."""

import sys
from pathlib import Path

from connection_secrets.core.config import (
    ResolverSettings,
    load_from_file,
    load_store_config,
    validate_store_config,
)
from connection_secrets.core.exceptions import SecretStoreError
from connection_secrets.core.secrets import build_dispatcher
from connection_secrets.tools import describe_handle


def main() -> int:
    """Load the sample store config, validate it and resolve its credentials."""
    here = Path(__file__).parent
    store_path = sys.argv[1] if len(sys.argv) > 1 else str(here / "kubernetes-store.conf")

    settings = load_from_file(str(here / "resolver.conf"), ResolverSettings)
    config = load_store_config(store_path)

    result = validate_store_config(config)
    for warning in result.warnings:
        print(f"warning: {warning}")
    if not result.is_valid:
        for error in result.errors:
            print(f"error [{error.field}]: {error.message}")
        return 1

    try:
        handle = build_dispatcher(settings).dispatch(config)
    except SecretStoreError as exc:
        print(f"Could not resolve credentials: {exc}")
        return 2

    print(describe_handle(handle))
    return 0


if __name__ == "__main__":
    sys.exit(main())
