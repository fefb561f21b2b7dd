"""
Interactive pickers for the CLI.

Both present a numbered list and return one entry.  When stdin is not
a terminal there is nobody to ask, so the asset picker refuses to
guess and the version picker takes the newest tag.
"""

from __future__ import annotations

import sys

import click

from relpull.core.models.release import Asset
from relpull.core.services.install.selection import Chooser, fail_on_ambiguous


def _pick_index(title: str, labels: list[str]) -> int:
    click.secho(f"\n{title}", fg="cyan", bold=True)
    for i, label in enumerate(labels, start=1):
        click.echo(f"   {i:>3}. {label}")
    choice = click.prompt(
        "   Choose",
        type=click.IntRange(1, len(labels)),
        default=1,
        show_default=True,
    )
    return choice - 1


def prompt_asset(candidates: list[Asset]) -> Asset:
    """Ask the user which of several matching assets to install."""
    index = _pick_index("Several assets match this platform:", [a.name for a in candidates])
    return candidates[index]


def prompt_version(tags: list[str]) -> str:
    """Ask the user which release to install."""
    if not sys.stdin.isatty():
        return tags[0]
    return tags[_pick_index("Available releases:", tags)]


def asset_chooser(interactive: bool | None = None) -> Chooser:
    """Interactive picker on a terminal, refusal otherwise."""
    if interactive is None:
        interactive = sys.stdin.isatty()
    return prompt_asset if interactive else fail_on_ambiguous
