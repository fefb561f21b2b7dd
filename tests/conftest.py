"""
Shared test fixtures and configuration.
"""

import socket
import threading
from pathlib import Path

import pytest

from relpull.adapters.mock import MockGateway
from relpull.core.context import RelpullPaths
from relpull.core.models.platform import Architecture, OperatingSystem, PlatformDescriptor
from tests.artifacts import ELF_BYTES, ArtifactFactory


@pytest.fixture
def paths(tmp_path: Path) -> RelpullPaths:
    """All relpull directories below the test's tmp dir."""
    return RelpullPaths.under(tmp_path / "relpull")


@pytest.fixture
def linux_amd64() -> PlatformDescriptor:
    return PlatformDescriptor(os=OperatingSystem.LINUX, arch=Architecture.AMD64)


@pytest.fixture
def gateway() -> MockGateway:
    return MockGateway()


@pytest.fixture
def artifacts(tmp_path: Path) -> ArtifactFactory:
    return ArtifactFactory(tmp_path / "assets")


@pytest.fixture
def publish(gateway: MockGateway, artifacts: ArtifactFactory):
    """Register a release whose linux/x86_64 tarball holds ``binary``.

    Returns a callable ``publish(repo_id, tag, binary="tool", ...)``.
    The binary's content ends with the tag, so tests can tell
    versions apart on disk.
    """

    def _publish(
        repo_id: str,
        tag: str,
        binary: str = "tool",
        *,
        prerelease: bool = False,
        extra: dict[str, str] | None = None,
    ):
        repo = repo_id.split("/", 1)[1]
        name = f"{repo}-{tag}-x86_64-unknown-linux-gnu.tar.gz"
        archive = artifacts.tar_gz(
            f"{repo}-{tag}.tar.gz",
            {
                f"{repo}-{tag}/{binary}": ELF_BYTES + tag.encode(),
                f"{repo}-{tag}/README.md": b"docs",
            },
        )
        assets = {name: artifacts.url(archive), f"{name}.sha256": "file:///nonexistent.sha256"}
        assets.update(extra or {})
        return gateway.add_release(repo_id, tag, assets, prerelease=prerelease)

    return _publish


@pytest.fixture
def raw_http_server():
    """Local TCP server answering every request with fixed bytes.

    Returns a callable ``serve(response) -> base_url``; the response is
    sent verbatim, so it can be a malformed status line.
    """
    servers: list[tuple[socket.socket, threading.Thread]] = []
    stop = threading.Event()

    def _answer(listener: socket.socket, response: bytes) -> None:
        while not stop.is_set():
            try:
                conn, _ = listener.accept()
            except TimeoutError:
                continue
            except OSError:
                return
            with conn:
                conn.recv(65536)
                conn.sendall(response)

    def _serve(response: bytes) -> str:
        listener = socket.create_server(("127.0.0.1", 0))
        listener.settimeout(0.1)
        thread = threading.Thread(target=_answer, args=(listener, response), daemon=True)
        thread.start()
        servers.append((listener, thread))
        return f"http://127.0.0.1:{listener.getsockname()[1]}"

    yield _serve

    stop.set()
    for listener, thread in servers:
        thread.join(timeout=5)
        listener.close()


@pytest.fixture(autouse=True)
def _no_proxy(monkeypatch):
    for var in ("http_proxy", "HTTP_PROXY", "https_proxy", "HTTPS_PROXY"):
        monkeypatch.delenv(var, raising=False)
