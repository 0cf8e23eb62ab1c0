"""
Shell environment — run real host commands.

This is the SINGLE PLACE where ``subprocess.run`` is called. Commands
run as argument lists, never through a shell, and block until they
exit: there is no timeout on build steps.
"""

from __future__ import annotations

import logging
import os
import platform
import subprocess
import time
from datetime import UTC, datetime
from pathlib import Path

from formulakit.adapters.base import Environment
from formulakit.core.models.action import Receipt

logger = logging.getLogger(__name__)

# Package receipt that marks the macOS command-line tools as installed
_CLT_PKG_ID = "com.apple.pkg.CLTools_Executables"


class ShellEnvironment(Environment):
    """Execute commands on the host and capture output.

    Args:
        build_path: PATH used for build commands. ``None`` inherits the
            caller's PATH. Probes that ask for ``userpaths`` always see
            the caller's PATH.
    """

    def __init__(self, build_path: str | None = None):
        self._build_path = build_path

    @property
    def name(self) -> str:
        return "shell"

    def _environ(self, userpaths: bool) -> dict[str, str]:
        env = os.environ.copy()
        if self._build_path and not userpaths:
            env["PATH"] = self._build_path
        return env

    def run(
        self,
        cmd: list[str],
        *,
        cwd: str | None = None,
        userpaths: bool = False,
    ) -> Receipt:
        logger.debug("Executing: %s (cwd=%s)", cmd, cwd)
        started_at = datetime.now(UTC).isoformat()
        start = time.monotonic()

        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                env=self._environ(userpaths),
            )
        except FileNotFoundError:
            return Receipt.failure(
                command=cmd,
                started_at=started_at,
                error=f"Executable not found: {cmd[0]}",
                cwd=cwd,
                metadata={"not_found": True},
            )
        except OSError as e:
            return Receipt.failure(
                command=cmd,
                started_at=started_at,
                error=f"Command execution error: {e}",
                cwd=cwd,
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = result.stdout.strip()
        stderr = result.stderr.strip()

        if result.returncode == 0:
            return Receipt.success(
                command=cmd,
                started_at=started_at,
                output=output,
                duration_ms=elapsed_ms,
                cwd=cwd,
                metadata={"stderr": stderr[-2000:]},
            )
        return Receipt.failure(
            command=cmd,
            started_at=started_at,
            error=stderr[-2000:] or f"Command exited with code {result.returncode}",
            return_code=result.returncode,
            output=output[-2000:],
            duration_ms=elapsed_ms,
            cwd=cwd,
        )

    def clt_installed(self) -> bool:
        # Only macOS splits headers and frameworks out of the base system
        if platform.system() != "Darwin":
            return True
        return self.quiet_system(["pkgutil", f"--pkg-info={_CLT_PKG_ID}"])

    def sdk_path(self) -> str:
        return self.capture(["xcrun", "--show-sdk-path"]) or ""

    def path_exists(self, path: str) -> bool:
        return Path(path).expanduser().exists()
