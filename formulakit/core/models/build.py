"""
Build models — the invoking engine's configuration and the install report.

Loaded from formulakit.yml, BuildConfig carries everything the
package manager hands to a formula: the install prefix, the managed
prefix, build flags, and the runtimes to build for.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from formulakit.core.models.action import Receipt
from formulakit.core.models.formula import BuildOptions


class BuildConfig(BaseModel):
    """Build configuration supplied by the invoking package manager.

    ``None`` means "probe the host" for ``clt_installed``, ``sdk_path``
    and ``python_version``.
    """

    homebrew_prefix: str = "/usr/local"
    prefix: str = ""                      # empty: <homebrew_prefix>/Cellar/<name>/<version>
    options: list[str] = Field(default_factory=list)
    pythons: dict[str, str] = Field(
        default_factory=lambda: {"python": "python", "python3": "python3"}
    )
    cache_dir: str = "~/Library/Caches/Homebrew"
    build_path: str | None = None         # PATH for build commands
    clt_installed: bool | None = None
    sdk_path: str | None = None
    python_version: str | None = None

    def build_options(self) -> BuildOptions:
        """Parse ``options`` into a BuildOptions struct."""
        return BuildOptions.from_flags(self.options)

    def install_prefix(self, name: str, version: str) -> str:
        """The keg prefix this build installs into."""
        if self.prefix:
            return self.prefix
        return f"{self.homebrew_prefix.rstrip('/')}/Cellar/{name}/{version}"

    @property
    def cache_path(self) -> Path:
        return Path(self.cache_dir).expanduser()


class RuntimeReport(BaseModel):
    """What the install routine did for one language runtime."""

    runtime: str                          # e.g. "python3"
    executable: str
    steps: list[Receipt] = Field(default_factory=list)
    installed_files: list[str] = Field(default_factory=list)


class InstallReport(BaseModel):
    """Ordered record of a completed install."""

    formula: str
    version: str
    prefix: str
    patches: list[Receipt] = Field(default_factory=list)
    substitutions: dict[str, int] = Field(default_factory=dict)
    runtimes: list[RuntimeReport] = Field(default_factory=list)

    @property
    def skipped(self) -> list[Receipt]:
        """Every step skipped because it was already satisfied."""
        return [s for r in self.runtimes for s in r.steps if s.status == "skipped"]

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")
