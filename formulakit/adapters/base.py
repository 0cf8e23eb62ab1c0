"""
Environment base — the protocol between a formula and the host system.

Probes and the install routine only talk to the host through this
interface, never directly to ``subprocess``. Tests substitute
MockEnvironment; the CLI uses ShellEnvironment.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from formulakit.core.models.action import Receipt

logger = logging.getLogger(__name__)


class Environment(ABC):
    """Abstract host environment.

    ``run`` NEVER raises for process failures: a missing executable,
    a non-zero exit and a crash are all captured in the Receipt with
    ``status='failed'``.

    To create a new environment:
        1. Subclass Environment
        2. Implement name, run, clt_installed, sdk_path, path_exists
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The environment identifier (e.g., 'shell', 'mock')."""

    @abstractmethod
    def run(
        self,
        cmd: list[str],
        *,
        cwd: str | None = None,
        userpaths: bool = False,
    ) -> Receipt:
        """Run a command to completion and return a receipt.

        Args:
            cmd: Command list (no shell).
            cwd: Working directory.
            userpaths: Use the user's PATH instead of the build PATH.
        """

    @abstractmethod
    def clt_installed(self) -> bool:
        """Whether the system command-line tools (headers, frameworks) are installed."""

    @abstractmethod
    def sdk_path(self) -> str:
        """Path of the platform SDK, used when the command-line tools are absent."""

    @abstractmethod
    def path_exists(self, path: str) -> bool:
        """Whether ``path`` exists on the host."""

    # ── Derived probes ──────────────────────────────────────────

    def quiet_system(self, cmd: list[str], *, userpaths: bool = False) -> bool:
        """Run ``cmd`` for its exit status only. Never raises."""
        receipt = self.run(cmd, userpaths=userpaths)
        if receipt.failed:
            logger.debug("Probe failed: %s (%s)", receipt.command_line, receipt.error)
        return receipt.ok

    def capture(self, cmd: list[str]) -> str | None:
        """Run ``cmd`` and return its stripped stdout, or None on failure."""
        receipt = self.run(cmd)
        return receipt.output.strip() if receipt.ok else None

    def module_importable(self, python: str, module: str) -> bool:
        """Whether ``import <module>`` succeeds in the ``python`` runtime."""
        return self.quiet_system([python, "-c", f"import {module}"])

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
