"""Command-line client for the sensor readings API."""

from importlib import import_module
from types import ModuleType


def __getattr__(name: str) -> ModuleType:
    if name == "app":
        return import_module("cli.app")
    raise AttributeError(name)

# The Typer instance stays in ``cli.app`` so that ``cli.app`` keeps resolving
# to the module; tests patch ``cli.app.ApiClient`` through that path.

__all__ = []
