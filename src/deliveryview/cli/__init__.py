"""deliveryview command line interface."""

from deliveryview.cli.main import main

__all__ = ["main"]
