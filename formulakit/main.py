"""
formulakit — CLI entrypoint.

Usage:
    python -m formulakit.main --help
    python -m formulakit.main deps --with python3
    python -m formulakit.main install ./matplotlib-1.3.1
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from formulakit import __version__
from formulakit.core.observability.logging_config import formula_log_file, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="formulakit")
@click.option("--verbose", "-v", is_flag=True, help="Show build commands as they run.")
@click.option("--quiet", "-q", is_flag=True, help="Only show errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to formulakit.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """formulakit — build and install the matplotlib formula."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("FORMULAKIT_LOG_LEVEL", "WARNING")

    log_file = os.environ.get("FORMULAKIT_LOG_FILE")
    log_dir = os.environ.get("FORMULAKIT_LOG_DIR")
    if not log_file and log_dir:
        log_file = str(formula_log_file(log_dir, "formulakit"))

    setup_logging(
        level=level,
        log_file=log_file,
        log_file_level=os.environ.get("FORMULAKIT_LOG_FILE_LEVEL"),
    )


@cli.group()
def config() -> None:
    """Build configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate formulakit.yml."""
    from formulakit.core.config.loader import ConfigError, find_config_file, load_build_config

    path = ctx.obj.get("config_path") or find_config_file()
    try:
        cfg = load_build_config(path, required=True)
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"valid": False, "errors": [str(e)]}, indent=2))
        else:
            click.secho("❌ Configuration errors:", fg="red", bold=True)
            click.echo(f"   • {e}")
        sys.exit(1)

    if as_json:
        data = cfg.model_dump(mode="json")
        click.echo(json.dumps({"valid": True, "path": str(path), "config": data}, indent=2))
        return

    click.secho("✅ Configuration is valid", fg="green", bold=True)
    click.echo(f"   File: {path}")
    click.echo(f"   Prefix: {cfg.homebrew_prefix}")
    click.echo(f"   Options: {', '.join(cfg.build_options().to_flags()) or 'defaults'}")
    click.echo(f"   Runtimes: {', '.join(f'{k}={v}' for k, v in cfg.pythons.items())}")
    click.echo()


# ── Register formula commands ──────────────────────────────────

from formulakit.ui.cli.formula import COMMANDS  # noqa: E402

for _command in COMMANDS:
    cli.add_command(_command)


if __name__ == "__main__":
    cli()
