"""
Tests for committing a located binary to the install dir and the store.
"""

import stat
from pathlib import Path

import pytest

from relpull.core.errors import ConfigError, NoUpdateNeeded
from relpull.core.models.package import InstalledRecord, Package
from relpull.core.models.store import PackageStore
from relpull.core.models.version import SemVer
from relpull.core.services.install.transaction import (
    EXECUTABLE_MODE,
    check_up_to_date,
    commit,
    place_binary,
)


@pytest.fixture
def source(tmp_path: Path) -> Path:
    path = tmp_path / "work" / "tool-1.0" / "tool"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"\x7fELF new")
    return path


def _package(**overrides) -> Package:
    fields = {"name": "o/tool", "alias": "tool"}
    fields.update(overrides)
    return Package(**fields)


class _Recorder:
    def __init__(self):
        self.saved: list[PackageStore] = []

    def __call__(self, store: PackageStore) -> None:
        self.saved.append(store.model_copy(deep=True))


class TestCheckUpToDate:
    def test_v_prefixed_record_matches(self):
        store = PackageStore(
            installed={"tool": InstalledRecord(name="o/tool", version="v1.0.0", path=Path("/x"))}
        )
        with pytest.raises(NoUpdateNeeded) as exc:
            check_up_to_date(store, "tool", SemVer(1, 0, 0))
        assert exc.value.alias == "tool"

    def test_newer_version_passes(self):
        store = PackageStore(
            installed={"tool": InstalledRecord(name="o/tool", version="1.0.0", path=Path("/x"))}
        )
        check_up_to_date(store, "tool", SemVer(1, 1, 0))

    def test_not_installed_passes(self):
        check_up_to_date(PackageStore(), "tool", SemVer(1, 0, 0))


class TestPlaceBinary:
    def test_executable_mode(self, source: Path, tmp_path: Path):
        dest = tmp_path / "bin" / "tool"
        place_binary(source, dest)
        assert dest.read_bytes() == b"\x7fELF new"
        assert stat.S_IMODE(dest.stat().st_mode) == EXECUTABLE_MODE

    def test_replaces_existing(self, source: Path, tmp_path: Path):
        dest = tmp_path / "bin" / "tool"
        dest.parent.mkdir()
        dest.write_bytes(b"old")
        place_binary(source, dest)
        assert dest.read_bytes() == b"\x7fELF new"
        assert [p.name for p in dest.parent.iterdir()] == ["tool"]


class TestCommit:
    def test_first_install(self, source: Path, tmp_path: Path):
        store = PackageStore()
        persist = _Recorder()

        record = commit(
            store, _package(), SemVer(1, 0, 0), source, tmp_path / "bin",
            standalone=False, persist=persist,
        )

        assert record.path == tmp_path / "bin" / "tool"
        assert record.version == "1.0.0"
        assert store.packages["o/tool"].alias == "tool"
        assert store.installed["tool"] == record
        assert len(persist.saved) == 1
        assert persist.saved[0].installed["tool"] == record

    def test_standalone_uses_alias(self, tmp_path: Path):
        asset = tmp_path / "tool-linux-amd64"
        asset.write_bytes(b"\x7fELF")
        store = PackageStore()

        record = commit(
            store, _package(alias="t"), SemVer(1, 0, 0), asset, tmp_path / "bin",
            standalone=True, persist=_Recorder(),
        )
        assert record.path == tmp_path / "bin" / "t"

    def test_extracted_uses_file_name(self, tmp_path: Path):
        found = tmp_path / "x" / "rg"
        found.parent.mkdir()
        found.write_bytes(b"\x7fELF")

        record = commit(
            PackageStore(), _package(name="BurntSushi/ripgrep", alias="ripgrep", file_pattern="rg"),
            SemVer(14, 0, 0), found, tmp_path / "bin",
            standalone=False, persist=_Recorder(),
        )
        assert record.path == tmp_path / "bin" / "rg"

    def test_update_keeps_package_config(self, source: Path, tmp_path: Path):
        original = _package(asset_pattern="musl")
        old_path = tmp_path / "bin" / "tool"
        store = PackageStore(
            packages={"o/tool": original},
            installed={"tool": InstalledRecord(name="o/tool", version="1.0.0", path=old_path)},
        )

        commit(
            store, _package(asset_pattern="gnu"), SemVer(2, 0, 0), source, tmp_path / "bin",
            standalone=False, persist=_Recorder(),
        )

        assert store.packages["o/tool"].asset_pattern == "musl"
        assert store.installed["tool"].version == "2.0.0"

    def test_same_version_short_circuits(self, source: Path, tmp_path: Path):
        store = PackageStore(
            installed={"tool": InstalledRecord(name="o/tool", version="v1.0.0", path=tmp_path / "x")}
        )
        persist = _Recorder()

        with pytest.raises(NoUpdateNeeded):
            commit(
                store, _package(), SemVer(1, 0, 0), source, tmp_path / "bin",
                standalone=False, persist=persist,
            )
        assert persist.saved == []
        assert not (tmp_path / "bin").exists()

    def test_failed_persist_leaves_store_unchanged(self, source: Path, tmp_path: Path):
        store = PackageStore()

        def broken(_store):
            raise ConfigError("disk full")

        with pytest.raises(ConfigError):
            commit(
                store, _package(), SemVer(1, 0, 0), source, tmp_path / "bin",
                standalone=False, persist=broken,
            )
        assert store.packages == {}
        assert store.installed == {}

    def test_renamed_binary_removes_previous(self, tmp_path: Path):
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        old = bin_dir / "tool-v1"
        old.write_bytes(b"old")
        found = tmp_path / "x" / "tool"
        found.parent.mkdir()
        found.write_bytes(b"\x7fELF")

        store = PackageStore(
            packages={"o/tool": _package()},
            installed={"tool": InstalledRecord(name="o/tool", version="1.0.0", path=old)},
        )
        commit(store, _package(), SemVer(2, 0, 0), found, bin_dir, standalone=False, persist=_Recorder())

        assert not old.exists()
        assert (bin_dir / "tool").is_file()
