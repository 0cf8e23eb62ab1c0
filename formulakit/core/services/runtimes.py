"""
L3 Detection — Language runtimes a build targets.

The default runtime (``python``) is on unless built ``without-python``;
``python3`` is added by ``with-python3``. Order is fixed: python, then
python3.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from formulakit.adapters.base import Environment
from formulakit.core.models.build import BuildConfig
from formulakit.core.models.formula import BuildOptions

logger = logging.getLogger(__name__)

RUNTIMES: tuple[str, ...] = ("python", "python3")

_VERSION_SNIPPET = "import sys; print('%d.%d' % sys.version_info[:2])"


class Runtime(NamedTuple):
    name: str          # "python" | "python3"
    executable: str    # what to invoke


def each_python(options: BuildOptions, config: BuildConfig) -> list[Runtime]:
    """Runtimes selected by ``options``, in declaration order."""
    runtimes = []
    for name in RUNTIMES:
        if options.with_(name):
            runtimes.append(Runtime(name, config.pythons.get(name, name)))
    if not runtimes:
        logger.warning("No python runtime selected (%s)", options.to_flags())
    return runtimes


def python_version(env: Environment, executable: str) -> str | None:
    """``"major.minor"`` of a runtime, or None if it cannot be run."""
    return env.capture([executable, "-c", _VERSION_SNIPPET])
