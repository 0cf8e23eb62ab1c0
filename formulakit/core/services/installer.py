"""
L5 Orchestration — the formula's install routine.

A linear sequence with no recovery: patch the source tree, point the
build configuration at the managed prefix, then for each runtime
install the missing auxiliary resources and the package itself. Any
failed command raises BuildError and the whole install stops; nothing
is rolled back.
"""

from __future__ import annotations

import logging
from pathlib import Path

from formulakit.adapters.base import Environment
from formulakit.core.errors import BuildError, FormulaError
from formulakit.core.models.action import Receipt
from formulakit.core.models.build import BuildConfig, InstallReport, RuntimeReport
from formulakit.core.models.formula import BuildOptions, PackageDescriptor, Resource
from formulakit.core.services.inreplace import Substitution, inreplace
from formulakit.core.services.runtimes import Runtime, each_python
from formulakit.core.services.staging import cached_file, stage

logger = logging.getLogger(__name__)

# ── Build-configuration fixes ───────────────────────────────────

SETUPEXT = "setupext.py"
RECORD_FILE = "installed.txt"

_DARWIN_DEFAULT = "'darwin': ['/usr/local/', '/usr', '/usr/X11', '/opt/local'],"
_FRAMEWORKS_DEFAULT = "'/System/Library/Frameworks/',"


def prefix_substitutions(homebrew_prefix: str) -> list[Substitution]:
    """Tell matplotlib where the managed prefix lives."""
    return [
        Substitution(
            _DARWIN_DEFAULT,
            f"'darwin': ['{homebrew_prefix}', '/usr', '/usr/X11', '/opt/local'],",
        ),
    ]


def framework_substitutions(sdk_path: str) -> list[Substitution]:
    """Without the command-line tools, frameworks (esp. Tk) live in the SDK."""
    return [
        Substitution(
            _FRAMEWORKS_DEFAULT,
            f"'{sdk_path}/System/Library/Frameworks',",
        ),
    ]


# ── Command helpers ─────────────────────────────────────────────


def _system(env: Environment, cmd: list[str], cwd: str | None = None) -> Receipt:
    """Run a build command; a failure aborts the install."""
    logger.info("==> %s", " ".join(cmd))
    receipt = env.run(cmd, cwd=cwd)
    if receipt.failed:
        logger.error("Build command failed: %s", receipt.error)
        raise BuildError(receipt)
    return receipt


def _read_record(source_dir: Path) -> list[str]:
    record = source_dir / RECORD_FILE
    if not record.is_file():
        logger.debug("No install record at %s", record)
        return []
    return [line for line in record.read_text(encoding="utf-8").splitlines() if line.strip()]


# ── Steps ───────────────────────────────────────────────────────


def apply_patches(
    descriptor: PackageDescriptor,
    options: BuildOptions,
    env: Environment,
    source_dir: Path,
    cache_dir: Path,
) -> list[Receipt]:
    """Apply the descriptor's patches (stable builds only).

    Patch files must already be in ``cache_dir`` under their URL basename.

    Raises:
        StagingError: If a patch file was not fetched.
        BuildError: If ``patch`` fails.
    """
    receipts = []
    for url in descriptor.patches_for(options):
        patch_file = cached_file(cache_dir, url)
        receipts.append(
            _system(env, ["patch", "-p1", "-i", str(patch_file)], cwd=str(source_dir))
        )
    return receipts


def install_resource(
    resource: Resource,
    runtime: Runtime,
    prefix: str,
    env: Environment,
    cache_dir: Path,
) -> Receipt:
    """Install ``resource`` into ``prefix`` unless the runtime already has it.

    Returns:
        A ``skipped`` receipt when the module is importable, otherwise
        the receipt of the ``setup.py install`` run.
    """
    python = runtime.executable
    cmd = [python, "setup.py", "install", f"--prefix={prefix}", *resource.install_args]

    if env.module_importable(python, resource.import_name):
        logger.info("%s already importable by %s, skipping", resource.import_name, python)
        return Receipt.skip(
            command=cmd,
            reason=f"{resource.import_name} already installed",
            metadata={"resource": resource.name, "runtime": runtime.name},
        )

    with stage(resource.url, resource.checksum, cache_dir) as src:
        receipt = _system(env, cmd, cwd=str(src))
    receipt.metadata.update({"resource": resource.name, "runtime": runtime.name})
    return receipt


def install_for_runtime(
    descriptor: PackageDescriptor,
    runtime: Runtime,
    prefix: str,
    env: Environment,
    source_dir: Path,
    cache_dir: Path,
) -> RuntimeReport:
    """Resources, then the package itself, for one runtime."""
    report = RuntimeReport(runtime=runtime.name, executable=runtime.executable)

    for resource in descriptor.resources:
        report.steps.append(install_resource(resource, runtime, prefix, env, cache_dir))

    # The record is per runtime; a leftover one belongs to an earlier run
    (source_dir / RECORD_FILE).unlink(missing_ok=True)
    report.steps.append(_system(
        env,
        [
            runtime.executable, "setup.py", "install",
            f"--prefix={prefix}",
            f"--record={RECORD_FILE}",
            "--single-version-externally-managed",
        ],
        cwd=str(source_dir),
    ))
    report.installed_files = _read_record(source_dir)
    return report


def install(
    descriptor: PackageDescriptor,
    config: BuildConfig,
    env: Environment,
    source_dir: Path,
) -> InstallReport:
    """Run the full install routine against an unpacked source tree.

    Args:
        descriptor: The formula to install.
        config: Prefixes, build options and runtimes from the package manager.
        env: Host environment (real or mock).
        source_dir: Unpacked source tree of ``descriptor``.

    Returns:
        An InstallReport with every step in execution order.

    Raises:
        BuildError: A command exited non-zero.
        InreplaceError: The build configuration did not contain an
            expected pattern.
        StagingError: A resource or patch is missing or corrupt.
    """
    options = config.build_options()
    prefix = config.install_prefix(descriptor.name, descriptor.version)
    cache_dir = config.cache_path
    setupext = source_dir / SETUPEXT

    logger.info("Installing %s %s into %s", descriptor.name, descriptor.version, prefix)
    report = InstallReport(formula=descriptor.name, version=descriptor.version, prefix=prefix)

    report.patches = apply_patches(descriptor, options, env, source_dir, cache_dir)

    subs = prefix_substitutions(config.homebrew_prefix)
    clt = config.clt_installed if config.clt_installed is not None else env.clt_installed()
    if not clt:
        sdk = config.sdk_path or env.sdk_path()
        if not sdk:
            raise FormulaError("Command-line tools missing and no SDK path found")
        subs += framework_substitutions(sdk)
    report.substitutions = inreplace(setupext, subs)

    for runtime in each_python(options, config):
        report.runtimes.append(
            install_for_runtime(descriptor, runtime, prefix, env, source_dir, cache_dir)
        )

    logger.info("Installed %s for %d runtime(s)", descriptor.name, len(report.runtimes))
    return report
