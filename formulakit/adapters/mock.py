"""
Mock environment — universal test double for the host system.

Answers probes from configured tables and records every command
instead of running it. Used by the test-suite.
"""

from __future__ import annotations

from formulakit.adapters.base import Environment
from formulakit.core.models.action import Receipt


class MockEnvironment(Environment):
    """Configurable fake host.

    By default every executable exists, every command succeeds and no
    module is importable.

    Args:
        executables: Names on PATH. ``None`` means "everything".
        modules: Importable modules per runtime executable.
        failures: Substrings; a command whose joined line contains one fails.
        clt: Result of ``clt_installed()``.
        sdk: Result of ``sdk_path()``.
        paths: Paths for which ``path_exists()`` is true.
    """

    def __init__(
        self,
        executables: set[str] | None = None,
        modules: dict[str, set[str]] | None = None,
        failures: set[str] | None = None,
        clt: bool = True,
        sdk: str = "/Applications/Xcode.app/Contents/Developer/Platforms/MacOSX.platform/Developer/SDKs/MacOSX10.9.sdk",
        paths: set[str] | None = None,
    ):
        self._executables = executables
        self._modules = {k: set(v) for k, v in (modules or {}).items()}
        self._failures = set(failures or ())
        self._clt = clt
        self._sdk = sdk
        self._paths = set(paths or ())
        self._call_log: list[Receipt] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def call_log(self) -> list[Receipt]:
        """Every receipt this mock has produced, in order."""
        return self._call_log

    @property
    def commands(self) -> list[list[str]]:
        """Every command this mock was asked to run, in order."""
        return [r.command for r in self._call_log]

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def add_module(self, python: str, module: str) -> None:
        """Make ``module`` importable in ``python`` (e.g. after an install)."""
        self._modules.setdefault(python, set()).add(module)

    def set_failure(self, pattern: str) -> None:
        """Configure commands containing ``pattern`` to fail."""
        self._failures.add(pattern)

    def run(
        self,
        cmd: list[str],
        *,
        cwd: str | None = None,
        userpaths: bool = False,
    ) -> Receipt:
        receipt = self._respond(cmd, cwd)
        receipt.metadata["mock"] = True
        receipt.metadata["userpaths"] = userpaths
        self._call_log.append(receipt)
        return receipt

    def _respond(self, cmd: list[str], cwd: str | None) -> Receipt:
        if self._executables is not None and cmd[0] not in self._executables:
            return Receipt.failure(
                command=cmd, error=f"Executable not found: {cmd[0]}", cwd=cwd,
            )

        line = " ".join(cmd)
        for pattern in self._failures:
            if pattern in line:
                return Receipt.failure(
                    command=cmd, error="Mock failure", return_code=1, cwd=cwd,
                )

        # python -c "import X"
        if len(cmd) == 3 and cmd[1] == "-c" and cmd[2].startswith("import "):
            module = cmd[2][len("import "):].strip()
            if " " not in module and module not in self._modules.get(cmd[0], set()):
                return Receipt.failure(
                    command=cmd,
                    error=f"ModuleNotFoundError: No module named '{module}'",
                    return_code=1,
                    cwd=cwd,
                )

        return Receipt.success(command=cmd, output="[mock] executed", cwd=cwd)

    def clt_installed(self) -> bool:
        return self._clt

    def sdk_path(self) -> str:
        return self._sdk

    def path_exists(self, path: str) -> bool:
        return path in self._paths

    def reset(self) -> None:
        """Clear the call log."""
        self._call_log.clear()
