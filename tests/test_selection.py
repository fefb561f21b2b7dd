"""
Tests for the asset selection cascade.
"""

import pytest

from relpull.core.errors import AmbiguousAssetError, InvalidAssetPatternError
from relpull.core.models.platform import Architecture, OperatingSystem, PlatformDescriptor
from relpull.core.models.release import Asset
from relpull.core.services.install.selection import (
    choose_asset,
    drop_ignored,
    pick_first,
    select_candidates,
)


def _assets(*names: str) -> list[Asset]:
    return [Asset(name=n, download_url=f"https://example.invalid/{n}") for n in names]


def _names(assets) -> list[str]:
    return [a.name for a in assets]


class TestDropIgnored:
    def test_checksums_and_text(self):
        kept = drop_ignored(tuple(_assets("a.tar.gz", "a.tar.gz.sha256", "notes.txt", "a.sig")))
        assert _names(kept) == ["a.tar.gz"]


class TestChooseAsset:
    def test_linux_tarball_over_darwin_and_checksum(self, linux_amd64):
        assets = _assets("tool-linux-amd64.tar.gz", "tool-darwin-amd64.tar.gz", "tool.sha256")
        assert choose_asset(assets, linux_amd64).name == "tool-linux-amd64.tar.gz"

    def test_single_asset_short_circuit(self, linux_amd64):
        assets = _assets("tool.tar.gz", "tool.tar.gz.sha256")
        assert choose_asset(assets, linux_amd64).name == "tool.tar.gz"

    def test_single_asset_ignores_bad_pattern(self, linux_amd64):
        assets = _assets("tool-windows.zip")
        assert choose_asset(assets, linux_amd64, user_pattern="([").name == "tool-windows.zip"

    def test_os_filter_settles(self, linux_amd64):
        assets = _assets("tool-linux.tar.gz", "tool-darwin.tar.gz", "tool-windows.zip")
        assert choose_asset(assets, linux_amd64).name == "tool-linux.tar.gz"

    def test_arch_narrowing(self, linux_amd64):
        assets = _assets(
            "tool-linux-amd64.tar.gz",
            "tool-linux-arm64.tar.gz",
            "tool-darwin-amd64.tar.gz",
        )
        assert choose_asset(assets, linux_amd64).name == "tool-linux-amd64.tar.gz"

    def test_rust_triples(self, linux_amd64):
        assets = _assets(
            "rg-14.0.0-x86_64-unknown-linux-gnu.tar.gz",
            "rg-14.0.0-aarch64-unknown-linux-gnu.tar.gz",
            "rg-14.0.0-x86_64-apple-darwin.tar.gz",
            "rg-14.0.0-x86_64-pc-windows-msvc.zip",
            "rg-14.0.0-x86_64-unknown-linux-gnu.tar.gz.sha256",
        )
        assert choose_asset(assets, linux_amd64).name == "rg-14.0.0-x86_64-unknown-linux-gnu.tar.gz"

    def test_arch_filter_backs_off_to_os_matches(self, linux_amd64):
        assets = _assets("tool-linux-gnu.tar.gz", "tool-linux-musl.tar.gz", "tool-darwin.tar.gz")
        candidates = select_candidates(assets, linux_amd64)
        assert _names(candidates) == ["tool-linux-gnu.tar.gz", "tool-linux-musl.tar.gz"]

    def test_no_platform_match_backs_off_to_everything(self, linux_amd64):
        assets = _assets("tool-a.tar.gz", "tool-b.tar.gz", "tool-b.tar.gz.sha256")
        candidates = select_candidates(assets, linux_amd64)
        assert _names(candidates) == ["tool-a.tar.gz", "tool-b.tar.gz"]

    def test_ambiguous_fails_by_default(self, linux_amd64):
        assets = _assets("tool-linux-gnu.tar.gz", "tool-linux-musl.tar.gz")
        with pytest.raises(AmbiguousAssetError) as exc:
            choose_asset(assets, linux_amd64)
        assert exc.value.candidates == ["tool-linux-gnu.tar.gz", "tool-linux-musl.tar.gz"]

    def test_chooser_sees_candidates(self, linux_amd64):
        seen = []

        def chooser(candidates):
            seen.extend(_names(candidates))
            return candidates[-1]

        assets = _assets("tool-linux-gnu.tar.gz", "tool-linux-musl.tar.gz", "tool-darwin.zip")
        assert choose_asset(assets, linux_amd64, on_ambiguous=chooser).name == "tool-linux-musl.tar.gz"
        assert seen == ["tool-linux-gnu.tar.gz", "tool-linux-musl.tar.gz"]

    def test_pick_first(self, linux_amd64):
        assets = _assets("tool-linux-gnu.tar.gz", "tool-linux-musl.tar.gz")
        assert choose_asset(assets, linux_amd64, on_ambiguous=pick_first).name == "tool-linux-gnu.tar.gz"

    def test_checksums_only_is_none(self, linux_amd64):
        assert choose_asset(_assets("a.sha256", "checksums.txt"), linux_amd64) is None

    def test_empty_is_none(self, linux_amd64):
        assert choose_asset([], linux_amd64) is None


class TestUserPattern:
    def test_placeholders_substituted(self, linux_amd64):
        assets = _assets(
            "gh_2.40.0_Linux_x86_64.tar.gz",
            "gh_2.40.0_Linux_arm64.tar.gz",
            "gh_2.40.0_linux_amd64.deb",
            "gh_2.40.0_macOS_amd64.zip",
        )
        chosen = choose_asset(assets, linux_amd64, user_pattern=r"{os}_{arch}\.tar\.gz$")
        assert chosen.name == "gh_2.40.0_Linux_x86_64.tar.gz"

    def test_pattern_replaces_os_filter(self, linux_amd64):
        assets = _assets("tool-static.tar.gz", "tool-linux-amd64.tar.gz")
        assert choose_asset(assets, linux_amd64, user_pattern="static").name == "tool-static.tar.gz"

    def test_invalid_pattern(self, linux_amd64):
        assets = _assets("tool-linux.tar.gz", "tool-darwin.tar.gz")
        with pytest.raises(InvalidAssetPatternError) as exc:
            choose_asset(assets, linux_amd64, user_pattern="tool-(")
        assert exc.value.pattern == "tool-("

    def test_pattern_on_darwin_arm64(self):
        darwin_arm64 = PlatformDescriptor(os=OperatingSystem.DARWIN, arch=Architecture.ARM64)
        assets = _assets("app-darwin-arm64.zip", "app-linux-arm64.zip")

        candidates = select_candidates(assets, darwin_arm64, r"{os}.*{arch}\.zip")
        assert _names(candidates) == ["app-darwin-arm64.zip"]
        assert choose_asset(assets, darwin_arm64, r"{os}.*{arch}\.zip").name == "app-darwin-arm64.zip"
