"""Adapters — host environment bindings.

Public re-exports for convenient access.
"""

from formulakit.adapters.base import Environment
from formulakit.adapters.mock import MockEnvironment
from formulakit.adapters.shell.command import ShellEnvironment

__all__ = [
    "Environment",
    "MockEnvironment",
    "ShellEnvironment",
]
