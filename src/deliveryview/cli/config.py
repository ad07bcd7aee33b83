"""Registry file lookup for the deliveryview CLI."""

from __future__ import annotations

import os
import sys
from pathlib import Path

# Default registry file in the working directory
DEFAULT_REGISTRY_FILE = "deliveryview.yaml"


def find_registry_file(path: str | None = None) -> Path:
    """Locate the registry definition from --registry, env or the working directory."""
    if path:
        return Path(path)

    env_path = os.environ.get("DELIVERYVIEW_REGISTRY")
    if env_path:
        return Path(env_path)

    default = Path(DEFAULT_REGISTRY_FILE)
    if default.exists():
        return default

    print("Error: No registry definition found", file=sys.stderr)
    print(
        f"Pass --registry, set DELIVERYVIEW_REGISTRY or create {DEFAULT_REGISTRY_FILE}",
        file=sys.stderr,
    )
    sys.exit(1)
