"""
relpull — CLI entrypoint.

Usage:
    relpull add BurntSushi/ripgrep --alias rg
    relpull list
    relpull update
    relpull remove rg
"""

from __future__ import annotations

import json
import os
import sys

import click

from relpull import __version__
from relpull.core.context import github_token, resolve_paths
from relpull.core.observability.logging_config import resolve_level, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="relpull")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """relpull — pull down releases from GitHub."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get("RELPULL_LOG_FILE"),
        log_file_level=os.environ.get("RELPULL_LOG_FILE_LEVEL"),
    )

    # Tests may inject any of these through CliRunner.invoke(obj=...)
    ctx.obj.setdefault("paths", resolve_paths())
    ctx.obj.setdefault("token", github_token())
    ctx.obj.setdefault("gateway", None)
    ctx.obj.setdefault("platform", None)
    ctx.obj.setdefault("interactive", None)


def _gateway(ctx: click.Context):
    if ctx.obj["gateway"] is None:
        from relpull.adapters.github import GitHubGateway

        ctx.obj["gateway"] = GitHubGateway(token=ctx.obj["token"])
    return ctx.obj["gateway"]


def _platform(ctx: click.Context):
    """Detected platform; an unsupported one ends the invocation."""
    if ctx.obj["platform"] is None:
        from relpull.core.errors import UnsupportedPlatformError
        from relpull.core.models.platform import PlatformDescriptor

        try:
            ctx.obj["platform"] = PlatformDescriptor.detect()
        except UnsupportedPlatformError as e:
            click.secho(f"❌ {e}", fg="red")
            sys.exit(1)
    return ctx.obj["platform"]


# ── Add ─────────────────────────────────────────────────────────


@cli.command()
@click.argument("spec", metavar="OWNER/REPO[@VERSION]")
@click.option("--alias", "-a", default=None, help="Command name (default: repository name).")
@click.option(
    "--asset-pattern", "-p", default=None,
    help="Regex for the release asset; {os} and {arch} are substituted.",
)
@click.option(
    "--file-pattern", "-f", default=None,
    help="Binary file name inside archives (default: alias).",
)
@click.option("--pre-release", is_flag=True, help="Consider pre-releases.")
@click.option("--show", is_flag=True, help="Pick the release from a list.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def add(
    ctx: click.Context,
    spec: str,
    alias: str | None,
    asset_pattern: str | None,
    file_pattern: str | None,
    pre_release: bool,
    show: bool,
    as_json: bool,
) -> None:
    """Add a package from its GitHub releases.

    Examples:

        relpull add BurntSushi/ripgrep --alias rg

        relpull add so-fancy/diff-so-fancy@v1.4.4

        relpull add cli/cli --alias gh -p '{os}_{arch}\\.tar\\.gz$'
    """
    from relpull.core.use_cases.add import run_add
    from relpull.ui.cli.prompts import asset_chooser, prompt_version

    quiet = ctx.obj.get("quiet", False)
    if not as_json and not quiet:
        click.echo(f"Installing {spec.split('@', 1)[0]} ...")

    result = run_add(
        spec,
        paths=ctx.obj["paths"],
        gateway=_gateway(ctx),
        platform=_platform(ctx),
        alias=alias,
        asset_pattern=asset_pattern,
        file_pattern=file_pattern,
        pre_release=pre_release,
        show=show,
        choose_version=prompt_version,
        on_ambiguous=asset_chooser(ctx.obj["interactive"]),
        token=ctx.obj["token"],
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    install = result.install
    if result.already_installed or install is None:
        click.secho(f"ℹ️  {result.alias} is already up to date", fg="blue")
        return

    click.secho(f"✅ Installed {install.package.name} {install.version}", fg="green", bold=True)
    if not quiet:
        click.echo(f"   {install.asset.name} → {install.record.path}")


# ── Remove ──────────────────────────────────────────────────────


@cli.command()
@click.argument("alias")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def remove(ctx: click.Context, alias: str, as_json: bool) -> None:
    """Remove an installed package."""
    from relpull.core.use_cases.remove import run_remove

    result = run_remove(alias, paths=ctx.obj["paths"])

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    click.echo(f"Removed '{alias}'")


# ── List ────────────────────────────────────────────────────────


@cli.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_packages(ctx: click.Context, as_json: bool) -> None:
    """List installed packages."""
    from relpull.core.use_cases.listing import run_list

    result = run_list(paths=ctx.obj["paths"])

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    alias_w = max([len("Alias")] + [len(e.alias) for e in result.entries])
    version_w = max([len("Version")] + [len(e.version) for e in result.entries])
    path_w = max([len("Path")] + [len(e.path) for e in result.entries])

    click.secho("Installed packages:\n", bold=True)
    click.echo(f"  {'Alias':<{alias_w}}  {'Version':<{version_w}}  {'Path':<{path_w}}  Repository")
    click.echo(f"  {'─' * alias_w}  {'─' * version_w}  {'─' * path_w}  {'─' * 10}")
    for e in result.entries:
        click.secho(f"  {e.alias:<{alias_w}}", fg="white", nl=False)
        click.secho(f"  {e.version:<{version_w}}", fg="green", nl=False)
        click.secho(f"  {e.path:<{path_w}}", fg="cyan", nl=False)
        click.secho(f"  {e.repository}", fg="blue")

    if result.orphaned:
        click.echo()
        click.secho("⚠️  Installed without a package config (skipped):", fg="yellow")
        for alias in result.orphaned:
            click.echo(f"   • {alias}")


# ── Update ──────────────────────────────────────────────────────


@cli.command()
@click.argument("alias", required=False)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def update(ctx: click.Context, alias: str | None, as_json: bool) -> None:
    """Update packages to the latest release (all, or just ALIAS)."""
    from relpull.core.use_cases.update import (
        STATUS_UP_TO_DATE,
        STATUS_UPDATED,
        UpdateOutcome,
        run_update,
    )
    from relpull.ui.cli.prompts import asset_chooser

    def _echo_outcome(outcome: UpdateOutcome) -> None:
        if outcome.status == STATUS_UPDATED:
            prev = f"{outcome.previous_version} → " if outcome.previous_version else ""
            click.secho(f"   ✓ {outcome.alias} updated ({prev}{outcome.version})", fg="green")
        elif outcome.status == STATUS_UP_TO_DATE:
            click.secho(f"   ● {outcome.alias} is already up to date!", fg="blue")
        else:
            click.secho(f"   ✗ {outcome.alias}: {outcome.error}", fg="red")

    if not as_json:
        click.echo("Checking for package updates ...\n")

    report = run_update(
        paths=ctx.obj["paths"],
        gateway=_gateway(ctx),
        platform=_platform(ctx),
        only=alias,
        on_ambiguous=asset_chooser(ctx.obj["interactive"]),
        on_outcome=None if as_json else _echo_outcome,
        token=ctx.obj["token"],
    )

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        sys.exit(0 if report.ok else 1)

    if report.error:
        click.secho(f"❌ {report.error}", fg="red")
        sys.exit(1)

    noun = "update" if report.checked == 1 else "updates"
    click.echo(f"\nChecked for {report.checked} {noun} in {report.duration_s:.1f}s")

    if report.failed:
        sys.exit(1)


# ── Short aliases ───────────────────────────────────────────────

cli.add_command(remove, "rm")
cli.add_command(list_packages, "ls")
cli.add_command(update, "up")


if __name__ == "__main__":
    cli()
