"""
Post-install caveats and the smoke-test hook.

Caveats are pure string construction. The smoke test has no
assertions of its own: it passes when the library's test entry point
exits zero in every configured runtime.
"""

from __future__ import annotations

import logging
import textwrap

from formulakit.adapters.base import Environment
from formulakit.core.errors import BuildError
from formulakit.core.models.action import Receipt
from formulakit.core.models.build import BuildConfig
from formulakit.core.models.formula import BuildOptions, PackageDescriptor
from formulakit.core.services.runtimes import each_python

logger = logging.getLogger(__name__)

_WXAGG = textwrap.dedent("""\
    If you want to use the `wxagg` backend, do `brew install wxwidgets`.
    This can be done even after the matplotlib install.
""")


def caveats(
    options: BuildOptions,
    homebrew_prefix: str,
    *,
    managed_python_installed: bool,
    python_version: str = "2.7",
) -> str:
    """Advisory text shown after install.

    Args:
        options: Build options of the install.
        homebrew_prefix: The managed prefix.
        managed_python_installed: Whether the managed ``python`` formula is
            installed. When building for the default runtime without it,
            the system python is in use and PYTHONPATH needs adjusting.
        python_version: ``major.minor`` of the default runtime.
    """
    text = _WXAGG
    if options.with_python and not managed_python_installed:
        site_packages = f"{homebrew_prefix.rstrip('/')}/lib/python{python_version}/site-packages"
        text += textwrap.dedent(f"""\
            If you use system python (that comes - depending on the OS X version -
            with older versions of numpy, scipy and matplotlib), you actually may
            have to set the `PYTHONPATH` in order to make the brewed packages come
            before these shipped packages in Python's `sys.path`.
                export PYTHONPATH={site_packages}
        """)
    return text


def managed_python_installed(env: Environment, homebrew_prefix: str) -> bool:
    """Whether the managed ``python`` formula is linked under the prefix."""
    return env.path_exists(f"{homebrew_prefix.rstrip('/')}/opt/python")


def run_smoke_test(
    descriptor: PackageDescriptor,
    config: BuildConfig,
    env: Environment,
) -> list[Receipt]:
    """Run the descriptor's test snippet in every configured runtime.

    Raises:
        BuildError: On the first runtime whose test exits non-zero.
    """
    logger.warning("This test takes quite a while. Use --verbose to see progress.")
    receipts = []
    for runtime in each_python(config.build_options(), config):
        cmd = [runtime.executable, "-c", descriptor.test_command]
        logger.info("==> %s", " ".join(cmd))
        receipt = env.run(cmd)
        if receipt.failed:
            raise BuildError(receipt)
        receipts.append(receipt)
    return receipts
