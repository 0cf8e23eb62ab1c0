"""
Formula models — the static package descriptor and its build options.

A formula is pure data: where to fetch the source, how to verify it,
what it depends on, and which auxiliary archives (resources) the
install routine may need. Nothing here touches the host system.
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Activation = Literal["required", "recommended", "optional"]
DependencyKind = Literal["formula", "language", "system", "requirement"]

_VERSION_RE = re.compile(r"-(\d+(?:\.\d+)+[a-z0-9]*)\.(?:tar\.gz|tgz|tar\.bz2|tar\.xz|zip)$")


class Dependency(BaseModel):
    """One declared dependency of a formula.

    ``when`` constrains *our* build options (``{"python3": True}`` means
    "only declared when building with python3"). ``options`` are build
    options requested on the dependency itself, e.g. numpy built
    ``with-python3``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    activation: Activation = "required"
    kind: DependencyKind = "formula"
    tags: list[str] = Field(default_factory=list)       # e.g. ["build"]
    options: list[str] = Field(default_factory=list)
    when: dict[str, bool] = Field(default_factory=dict)
    option: str = ""                                    # toggle name, default: last path segment

    @property
    def option_name(self) -> str:
        """The ``with-<x>``/``without-<x>`` suffix that toggles this dependency."""
        return self.option or self.name.rsplit("/", 1)[-1]

    @property
    def build_only(self) -> bool:
        return "build" in self.tags


class Resource(BaseModel):
    """An auxiliary source archive installed only when not already present."""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    checksum: str                     # "<algo>:<hex>"
    import_name: str                  # module probed to decide whether to install
    install_args: list[str] = Field(default_factory=list)

    @property
    def filename(self) -> str:
        return self.url.rstrip("/").rsplit("/", 1)[-1]


class PackageDescriptor(BaseModel):
    """Immutable formula metadata consumed by the package manager."""

    model_config = ConfigDict(frozen=True)

    name: str
    homepage: str
    url: str
    checksum: str                     # "<algo>:<hex>"
    head: str = ""                    # VCS URL for HEAD builds
    dependencies: list[Dependency] = Field(default_factory=list)
    resources: list[Resource] = Field(default_factory=list)
    patches: list[str] = Field(default_factory=list)   # stable builds only
    test_command: str = ""            # python snippet run by the smoke test

    @property
    def version(self) -> str:
        """Version parsed from the source archive name (``"1.3.1"``)."""
        match = _VERSION_RE.search(self.url)
        return match.group(1) if match else "HEAD"

    def get_resource(self, name: str) -> Resource | None:
        """Look up a resource by name."""
        for res in self.resources:
            if res.name == name:
                return res
        return None

    def patches_for(self, options: BuildOptions) -> list[str]:
        """Patch URLs to apply for this build (none for HEAD builds)."""
        return [] if options.head else list(self.patches)


class BuildOptions(BaseModel):
    """Every build option the formula recognizes.

    Recommended dependencies default to on, optional ones to off.
    Flag strings map onto fields: ``with-tcl-tk`` -> ``with_tcl_tk``,
    ``without-python`` -> ``with_python=False``, ``HEAD`` -> ``head``.
    """

    model_config = ConfigDict(frozen=True)

    head: bool = False
    with_python: bool = True
    with_python3: bool = False
    with_tex: bool = False
    with_cairo: bool = False
    with_ghostscript: bool = False
    with_tcl_tk: bool = False
    with_pyside: bool = False
    with_pyqt: bool = False
    with_pygtk: bool = False

    @classmethod
    def from_flags(cls, flags: list[str] | tuple[str, ...]) -> BuildOptions:
        """Build options from ``with-x`` / ``without-x`` / ``HEAD`` flags.

        Raises:
            ValueError: If a flag names an unrecognized option.
        """
        values: dict[str, bool] = {}
        for flag in flags:
            flag = flag.strip().lstrip("-")
            if flag.upper() == "HEAD":
                values["head"] = True
                continue
            if flag.startswith("without-"):
                option, enabled = flag[len("without-"):], False
            elif flag.startswith("with-"):
                option, enabled = flag[len("with-"):], True
            else:
                raise ValueError(f"Unrecognized build flag: {flag!r}")
            field = _field_name(option)
            if field not in cls.model_fields:
                raise ValueError(
                    f"Unknown build option: {option!r}. "
                    f"Known: {', '.join(cls.known_options())}"
                )
            values[field] = enabled
        return cls(**values)

    @classmethod
    def known_options(cls) -> list[str]:
        """Option names without the ``with-`` prefix (``python3``, ``tcl-tk``, ...)."""
        return [
            name[len("with_"):].replace("_", "-")
            for name in cls.model_fields
            if name.startswith("with_")
        ]

    def with_(self, option: str) -> bool:
        """Whether ``option`` (e.g. ``"python3"``, ``"tcl-tk"``) is enabled."""
        field = _field_name(option)
        if field not in type(self).model_fields:
            raise ValueError(f"Unknown build option: {option!r}")
        return getattr(self, field)

    def to_flags(self) -> list[str]:
        """Flags that differ from the defaults, in field order."""
        defaults = type(self)()
        flags: list[str] = []
        if self.head:
            flags.append("HEAD")
        for option in self.known_options():
            value = self.with_(option)
            if value != defaults.with_(option):
                flags.append(f"with-{option}" if value else f"without-{option}")
        return flags


def _field_name(option: str) -> str:
    return "with_" + option.replace("-", "_")
