"""
lazyomz — CLI entrypoint.

Usage:
    lazyomz
    sudo -E lazyomz --user alice --proxy https://ghproxy.example
    python -m lazyomz --help
"""

from __future__ import annotations

import json
import sys

import click

from lazyomz import __version__
from lazyomz.core.config.loader import ConfigError, load_config
from lazyomz.core.engine.executor import Step, create_context, run_pipeline
from lazyomz.core.models.action import Receipt
from lazyomz.core.observability.logging_config import setup_logging


class BootstrapUsageError(click.UsageError):
    """Usage error that exits with status 1."""

    exit_code = 1


class StrictCommand(click.Command):
    """Command that rejects unknown options and arguments with exit 1."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            raise BootstrapUsageError(e.message, ctx=e.ctx) from e


def _echo_result(step: Step, receipt: Receipt) -> None:
    if receipt.ok:
        click.secho(f"   ✓ {step.title}", fg="green")
        if receipt.detail:
            click.echo(f"     │ {receipt.detail}")
    elif receipt.failed:
        click.secho(f"   ✗ {step.title}", fg="red", err=True)
        for line in receipt.detail.split("\n")[:5]:
            click.echo(f"     │ {line}", err=True)
    else:
        click.secho(f"   ⊘ {step.title} ", fg="yellow", nl=False)
        click.echo(f"({receipt.detail})")


@click.command(cls=StrictCommand)
@click.version_option(version=__version__, prog_name="lazyomz")
@click.option("--user", "user", default=None, help="Target account (default: invoking user).")
@click.option(
    "--proxy",
    "proxy",
    default=None,
    envvar="LAZYOMZ_PROXY",
    help="Base URL prefixed to every GitHub URL.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    envvar="LAZYOMZ_LOG_FILE",
    help="Also write the log to this file.",
)
def cli(
    user: str | None,
    proxy: str | None,
    as_json: bool,
    verbose: bool,
    quiet: bool,
    debug: bool,
    log_file: str | None,
) -> None:
    """lazyomz — install zsh, oh-my-zsh and the lazyomz theme."""
    if debug:
        verbosity = 2
    elif verbose:
        verbosity = 1
    elif quiet:
        verbosity = -1
    else:
        verbosity = 0
    setup_logging(verbosity, log_file=log_file)

    try:
        config = load_config(user=user, proxy=proxy)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    show = not as_json and not quiet
    if show:
        click.secho(f"\n⚡ lazyomz — {config.user} ({config.home})", fg="cyan", bold=True)
        if config.proxy:
            click.secho(f"   Using GitHub proxy: {config.proxy}", fg="yellow")
        click.echo()

    report = run_pipeline(create_context(config), on_result=_echo_result if show else None)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        sys.exit(report.exit_code)

    if not quiet:
        click.echo()
    if report.aborted:
        click.secho("❌ lazyomz install aborted", fg="red", bold=True, err=True)
    elif report.status == "partial":
        click.secho("⚠️  lazyomz installed with errors", fg="yellow", bold=True)
    elif not quiet:
        click.secho("✅ lazyomz installed", fg="green", bold=True)

    sys.exit(report.exit_code)


if __name__ == "__main__":
    cli()
