"""
L3 Detection — Requirement probes.

Non-fatal environment checks declared as dependencies of kind
``requirement``. Both probe polarities (a toolchain that must be
present, a package that must be absent) are normalized to a single
ProbeResult: ``ok`` means "nothing to warn about".
"""

from __future__ import annotations

import logging
import textwrap
from abc import ABC, abstractmethod

from pydantic import BaseModel

from formulakit.adapters.base import Environment
from formulakit.core.errors import UnsatisfiedRequirementError
from formulakit.core.models.formula import Dependency

logger = logging.getLogger(__name__)


class ProbeResult(BaseModel):
    """Outcome of one requirement probe."""

    name: str
    ok: bool
    advisory: str | None = None
    fatal: bool = False


class Requirement(ABC):
    """A host capability the formula wants.

    Subclasses implement ``satisfied`` and ``message``. ``check`` never
    raises: a probe that cannot run counts as unsatisfied.
    """

    name: str = ""
    fatal: bool = False

    @abstractmethod
    def satisfied(self, env: Environment) -> bool:
        """Whether the host meets this requirement."""

    @property
    @abstractmethod
    def message(self) -> str:
        """Advisory shown when the requirement is not met."""

    def check(self, env: Environment) -> ProbeResult:
        ok = self.satisfied(env)
        if not ok:
            log = logger.error if self.fatal else logger.warning
            log("Requirement %s not satisfied", self.name)
        return ProbeResult(
            name=self.name,
            ok=ok,
            advisory=None if ok else self.message,
            fatal=self.fatal,
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r} fatal={self.fatal}>"


class TexRequirement(Requirement):
    """LaTeX toolchain for PDF/usetex rendering: ``latex`` and ``dvipng``."""

    name = "tex"
    fatal = False
    tools = ("latex", "dvipng")

    def satisfied(self, env: Environment) -> bool:
        # Both tools are looked up on the user's PATH, not the build PATH
        return all(
            env.quiet_system([tool, "-version"], userpaths=True)
            for tool in self.tools
        )

    @property
    def message(self) -> str:
        return textwrap.dedent("""\
            LaTeX not found. This is optional for Matplotlib.
            If you want, https://www.tug.org/mactex/ provides an installer.
        """)


class NoExternalPyCXXPackage(Requirement):
    """An externally installed PyCXX breaks the matplotlib build."""

    name = "no-external-pycxx"
    fatal = False
    module = "CXX"

    def __init__(self, python: str = "python"):
        self.python = python

    def conflict_detected(self, env: Environment) -> bool:
        """True exactly when the conflicting module is importable."""
        return env.module_importable(self.python, self.module)

    def satisfied(self, env: Environment) -> bool:
        return not self.conflict_detected(env)

    @property
    def message(self) -> str:
        return textwrap.dedent(f"""\
            *** Warning, PyCXX detected! ***
            On your system, there is already a PyCXX version installed, that will
            probably make the build of Matplotlib fail. In python you can test if that
            package is available with `import CXX`. To get a hint where that package
            is installed, you can:
                {self.python} -c "import os; import CXX; print(os.path.dirname(CXX.__file__))"
            See also: https://github.com/Homebrew/homebrew-python/issues/56
        """)


def build_requirements(deps: list[Dependency], python: str = "python") -> list[Requirement]:
    """Instantiate the probes for the ``requirement`` dependencies in ``deps``.

    Args:
        deps: Resolved dependencies (see ``resolve_dependencies``).
        python: Runtime the import-based probes should use.
    """
    probes: list[Requirement] = []
    for dep in deps:
        if dep.kind != "requirement":
            continue
        if dep.name == TexRequirement.name:
            probes.append(TexRequirement())
        elif dep.name == NoExternalPyCXXPackage.name:
            probes.append(NoExternalPyCXXPackage(python=python))
        else:
            logger.warning("No probe registered for requirement: %s", dep.name)
    return probes


def check_requirements(
    requirements: list[Requirement],
    env: Environment,
    *,
    raise_on_fatal: bool = False,
) -> list[ProbeResult]:
    """Run every probe in order.

    Raises:
        UnsatisfiedRequirementError: If ``raise_on_fatal`` and a fatal
            probe failed. Non-fatal failures only carry an advisory.
    """
    results = [req.check(env) for req in requirements]
    if raise_on_fatal:
        fatal = [r for r in results if r.fatal and not r.ok]
        if fatal:
            raise UnsatisfiedRequirementError(
                "Unsatisfied requirements: " + ", ".join(r.name for r in fatal)
            )
    return results
