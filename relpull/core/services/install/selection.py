"""
L1 Domain — Asset selection (pure).

Narrows a release's asset list down to the one file to download for
this platform.  Asset naming in the wild is inconsistent (some encode
only the OS, some only the arch, some neither), so selection is a
cascade of filters that degrades toward asking a human instead of
failing:

    1. drop checksum / signature / text files
    2. one left → done
    3. OS filter, or the user's pattern with {os}/{arch} substituted
    4. one left → done
    5. narrow by architecture
    6. narrowing emptied the set → back off to the coarser set
    7. one → done, several → on_ambiguous(), none → None

Every stage is a function from a tuple of assets to a tuple of assets.
No I/O.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence

from relpull.core.errors import AmbiguousAssetError, InvalidAssetPatternError
from relpull.core.models.platform import PlatformDescriptor
from relpull.core.models.release import Asset

logger = logging.getLogger(__name__)

IGNORED_SUFFIXES = (".sha256", ".txt", ".sig")

Candidates = tuple[Asset, ...]
Chooser = Callable[[list[Asset]], Asset]


# ── Choosers ────────────────────────────────────────────────────


def pick_first(candidates: list[Asset]) -> Asset:
    """Non-interactive chooser: first candidate wins."""
    return candidates[0]


def fail_on_ambiguous(candidates: list[Asset]) -> Asset:
    """Non-interactive chooser for batch runs: refuse to guess."""
    raise AmbiguousAssetError([a.name for a in candidates])


# ── Filters ─────────────────────────────────────────────────────


def drop_ignored(assets: Candidates) -> Candidates:
    return tuple(a for a in assets if not a.name.endswith(IGNORED_SUFFIXES))


def compile_user_pattern(user_pattern: str, platform: PlatformDescriptor) -> re.Pattern[str]:
    """Substitute ``{os}`` / ``{arch}`` and compile.

    Raises:
        InvalidAssetPatternError: If the result is not a valid regex.
    """
    expanded = (
        user_pattern
        .replace("{os}", platform.os_pattern)
        .replace("{arch}", platform.arch_pattern)
    )
    try:
        return re.compile(expanded)
    except re.error as e:
        raise InvalidAssetPatternError(user_pattern, str(e)) from e


def filter_platform(assets: Candidates, platform: PlatformDescriptor, user_pattern: str) -> Candidates:
    if not user_pattern:
        return tuple(a for a in assets if platform.is_os_match(a.name))

    regex = compile_user_pattern(user_pattern, platform)
    kept = tuple(a for a in assets if regex.search(a.name))
    for a in kept:
        logger.debug("User pattern matched '%s' against '%s'", regex.pattern, a.name)
    return kept


def filter_arch(assets: Candidates, platform: PlatformDescriptor) -> Candidates:
    return tuple(a for a in assets if platform.is_arch_match(a.name))


# ── Cascade ─────────────────────────────────────────────────────


def select_candidates(
    assets: Sequence[Asset],
    platform: PlatformDescriptor,
    user_pattern: str = "",
) -> Candidates:
    """Run the cascade up to (not including) the final choice.

    Returns a single-element tuple when a stage settled it, otherwise
    the remaining set (possibly empty).
    """
    usable = drop_ignored(tuple(assets))
    if len(usable) == 1:
        logger.debug("Single asset release: %s", usable[0].name)
        return usable

    platform_matches = filter_platform(usable, platform, user_pattern)
    if len(platform_matches) == 1:
        return platform_matches

    narrowed = filter_arch(platform_matches, platform)
    if narrowed:
        return narrowed

    # Over-aggressive filtering: back off rather than report nothing
    if platform_matches:
        logger.debug("Arch filter left nothing, keeping %d OS match(es)", len(platform_matches))
        return platform_matches
    logger.debug("No platform match, falling back to all %d asset(s)", len(usable))
    return usable


def choose_asset(
    assets: Sequence[Asset],
    platform: PlatformDescriptor,
    user_pattern: str = "",
    on_ambiguous: Chooser = fail_on_ambiguous,
) -> Asset | None:
    """Pick the asset to install for ``platform``.

    Args:
        assets: Everything attached to the release.
        platform: Target platform.
        user_pattern: Optional regex with ``{os}`` / ``{arch}`` placeholders.
        on_ambiguous: Called with the remaining candidates when more
            than one survives.  Must return one of them.

    Returns:
        The chosen asset, or None if nothing is left.
    """
    candidates = select_candidates(assets, platform, user_pattern)
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]

    logger.info("%d candidate assets, asking for a choice", len(candidates))
    return on_ambiguous(list(candidates))
