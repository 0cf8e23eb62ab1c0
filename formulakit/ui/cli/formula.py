"""
CLI commands for a formula's lifecycle.

Thin wrappers over ``formulakit.core.services``. The CLI plays the
package manager: inspect → resolve → install → caveats → test.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from formulakit.core.config.loader import ConfigError, load_build_config
from formulakit.core.data import FORMULAS
from formulakit.core.errors import FormulaError
from formulakit.core.models.build import BuildConfig
from formulakit.core.models.formula import PackageDescriptor


def _build_flags(func):
    """Shared ``--with`` / ``--without`` / ``--head`` options."""
    func = click.option("--head", is_flag=True, help="Build from the VCS head.")(func)
    func = click.option(
        "--without", "without_opts", multiple=True, metavar="OPT",
        help="Disable a recommended option (repeatable).",
    )(func)
    func = click.option(
        "--with", "with_opts", multiple=True, metavar="OPT",
        help="Enable an optional option, e.g. python3 (repeatable).",
    )(func)
    func = click.option(
        "--formula", "-f", "formula_name", default="matplotlib",
        type=click.Choice(sorted(FORMULAS)), show_default=True,
        help="Formula to operate on.",
    )(func)
    return func


def _load(
    ctx: click.Context,
    formula_name: str,
    with_opts: tuple[str, ...] = (),
    without_opts: tuple[str, ...] = (),
    head: bool = False,
) -> tuple[PackageDescriptor, BuildConfig]:
    """Resolve the descriptor and the effective config (file + flags)."""
    config = load_build_config(ctx.obj.get("config_path"))
    flags = list(config.options)
    flags += [f"with-{o}" for o in with_opts]
    flags += [f"without-{o}" for o in without_opts]
    if head:
        flags.append("HEAD")
    config = config.model_copy(update={"options": flags})
    try:
        config.build_options()
    except ValueError as e:
        raise ConfigError(str(e)) from e
    return FORMULAS[formula_name], config


def _shell(config: BuildConfig):
    from formulakit.adapters.shell.command import ShellEnvironment

    return ShellEnvironment(build_path=config.build_path)


def _fail(message: str) -> None:
    click.secho(f"❌ {message}", fg="red")
    sys.exit(1)


# ── Inspect ─────────────────────────────────────────────────────


@click.command()
@click.option("--formula", "-f", "formula_name", default="matplotlib",
              type=click.Choice(sorted(FORMULAS)), show_default=True)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def info(formula_name: str, as_json: bool) -> None:
    """Show the formula descriptor."""
    from formulakit.core.services.formula_schema import validate_descriptor

    desc = FORMULAS[formula_name]
    errors = validate_descriptor(desc)

    if as_json:
        data = desc.model_dump(mode="json")
        data["version"] = desc.version
        data["errors"] = errors
        click.echo(json.dumps(data, indent=2))
        sys.exit(1 if errors else 0)

    click.secho(f"\n📦 {desc.name} {desc.version}", fg="cyan", bold=True)
    click.echo(f"   {desc.homepage}")
    click.echo(f"   From: {desc.url}")
    click.echo(f"   {desc.checksum}")
    if desc.head:
        click.echo(f"   HEAD: {desc.head}")
    click.echo(f"   Dependencies: {len(desc.dependencies)} declared")
    for res in desc.resources:
        click.echo(f"   Resource: {res.name} ({res.filename})")
    for patch in desc.patches:
        click.echo(f"   Patch: {patch}")

    if errors:
        click.echo()
        click.secho("❌ Descriptor errors:", fg="red", bold=True)
        for err in errors:
            click.echo(f"   • {err}")
        sys.exit(1)
    click.echo()


@click.command()
@_build_flags
@click.option("--no-build", is_flag=True, help="Hide build-only dependencies.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def deps(
    ctx: click.Context,
    formula_name: str,
    with_opts: tuple[str, ...],
    without_opts: tuple[str, ...],
    head: bool,
    no_build: bool,
    as_json: bool,
) -> None:
    """Resolve dependencies for a set of build options."""
    from formulakit.core.services.dependencies import dependency_summary, resolve_dependencies

    try:
        desc, config = _load(ctx, formula_name, with_opts, without_opts, head)
    except ConfigError as e:
        _fail(str(e))
    options = config.build_options()
    resolved = resolve_dependencies(desc, options, include_build=not no_build)

    if as_json:
        click.echo(json.dumps({
            "formula": desc.name,
            "options": options.to_flags(),
            "dependencies": dependency_summary(resolved),
        }, indent=2))
        return

    click.secho(f"🔗 {desc.name} dependencies ({', '.join(options.to_flags()) or 'defaults'}):",
                fg="cyan", bold=True)
    for dep in resolved:
        extras = []
        if dep.build_only:
            extras.append("build")
        if dep.activation != "required":
            extras.append(dep.activation)
        extras += dep.options
        suffix = f"  ({', '.join(extras)})" if extras else ""
        click.echo(f"   • {dep.name}{suffix}")


@click.command()
@_build_flags
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def requirements(
    ctx: click.Context,
    formula_name: str,
    with_opts: tuple[str, ...],
    without_opts: tuple[str, ...],
    head: bool,
    as_json: bool,
) -> None:
    """Run the formula's requirement probes (never fatal)."""
    from formulakit.core.services.dependencies import resolve_dependencies
    from formulakit.core.services.requirements import build_requirements, check_requirements
    from formulakit.core.services.runtimes import each_python

    try:
        desc, config = _load(ctx, formula_name, with_opts, without_opts, head)
    except ConfigError as e:
        _fail(str(e))
    options = config.build_options()
    runtimes = each_python(options, config)
    python = runtimes[0].executable if runtimes else "python"
    probes = build_requirements(resolve_dependencies(desc, options), python=python)
    results = check_requirements(probes, _shell(config))

    if as_json:
        click.echo(json.dumps([r.model_dump() for r in results], indent=2))
        return

    for r in results:
        if r.ok:
            click.secho(f"✅ {r.name}", fg="green")
        else:
            click.secho(f"⚠️  {r.name}", fg="yellow")
            click.echo(r.advisory or "")


# ── Install ─────────────────────────────────────────────────────


@click.command()
@click.argument("source_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@_build_flags
@click.option("--prefix", default=None, help="Install prefix (default: <homebrew_prefix>/Cellar/<name>/<version>).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output report as JSON.")
@click.pass_context
def install(
    ctx: click.Context,
    source_dir: Path,
    formula_name: str,
    with_opts: tuple[str, ...],
    without_opts: tuple[str, ...],
    head: bool,
    prefix: str | None,
    as_json: bool,
) -> None:
    """Install the formula from an unpacked SOURCE_DIR."""
    from formulakit.core.services.dependencies import resolve_dependencies
    from formulakit.core.services.installer import install as run_install
    from formulakit.core.services.requirements import build_requirements, check_requirements
    from formulakit.core.services.runtimes import each_python

    try:
        desc, config = _load(ctx, formula_name, with_opts, without_opts, head)
    except ConfigError as e:
        _fail(str(e))
    if prefix:
        config = config.model_copy(update={"prefix": prefix})
    env = _shell(config)
    options = config.build_options()

    runtimes = each_python(options, config)
    probes = build_requirements(
        resolve_dependencies(desc, options),
        python=runtimes[0].executable if runtimes else "python",
    )
    try:
        for result in check_requirements(probes, env, raise_on_fatal=True):
            if not result.ok and not as_json:
                click.secho(f"⚠️  {result.name}", fg="yellow")
                click.echo(result.advisory or "")
        report = run_install(desc, config, env, source_dir.resolve())
    except FormulaError as e:
        _fail(str(e))

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    click.secho(f"🍺 {report.prefix}", fg="green", bold=True)
    for rt in report.runtimes:
        installed = sum(1 for s in rt.steps if s.ok)
        skipped = sum(1 for s in rt.steps if s.status == "skipped")
        click.echo(
            f"   {rt.runtime}: {installed} step(s), {skipped} skipped, "
            f"{len(rt.installed_files)} file(s) recorded"
        )


@click.command()
@_build_flags
@click.pass_context
def caveats(
    ctx: click.Context,
    formula_name: str,
    with_opts: tuple[str, ...],
    without_opts: tuple[str, ...],
    head: bool,
) -> None:
    """Print post-install caveats."""
    from formulakit.core.services.caveats import caveats as build_caveats
    from formulakit.core.services.caveats import managed_python_installed
    from formulakit.core.services.runtimes import python_version

    try:
        _desc, config = _load(ctx, formula_name, with_opts, without_opts, head)
    except ConfigError as e:
        _fail(str(e))
    env = _shell(config)
    version = config.python_version or python_version(env, config.pythons.get("python", "python"))

    click.echo(build_caveats(
        config.build_options(),
        config.homebrew_prefix,
        managed_python_installed=managed_python_installed(env, config.homebrew_prefix),
        python_version=version or "2.7",
    ), nl=False)


@click.command("test")
@_build_flags
@click.pass_context
def test_cmd(
    ctx: click.Context,
    formula_name: str,
    with_opts: tuple[str, ...],
    without_opts: tuple[str, ...],
    head: bool,
) -> None:
    """Run the installed library's own test-suite per runtime."""
    from formulakit.core.services.caveats import run_smoke_test

    try:
        desc, config = _load(ctx, formula_name, with_opts, without_opts, head)
        receipts = run_smoke_test(desc, config, _shell(config))
    except (ConfigError, FormulaError) as e:
        _fail(str(e))

    click.secho(f"✅ {desc.name} tests passed ({len(receipts)} runtime(s))", fg="green")


COMMANDS = [info, deps, requirements, install, caveats, test_cmd]
