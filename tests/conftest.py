"""Shared fixtures for SftpPy tests.

The tests never open a real SSH connection. ``LocalSession`` stands in for
``sftppy.Session`` and keeps the "remote" filesystem in a temporary
directory, recording every protocol call so tests can assert on what was
sent to the server and in which order.

Usage:
    def test_something(client, session, server):
        client.mkdir("/data")
        assert (server / "data").is_dir()
        assert ("mkdir", "/data") in session.calls
"""

import os
import posixpath
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

from sftppy import AsyncClient, Client
from sftppy.session import Entry, Listing


class LocalSession:
    """Session double backed by a local directory.

    Attributes:
        root: Directory that plays the remote filesystem root
        calls: Every protocol call as (action, remote path)
        failures: Errors to raise for a given (action, remote path)
        skew: Added to the reported listing total to fake a mismatch
        reverse: List directories in reverse name order
    """

    def __init__(self, root: Path) -> None:
        self.root = root
        self.calls: List[Tuple[str, str]] = []
        self.failures: Dict[Tuple[str, str], Exception] = {}
        self.skew = 0
        self.reverse = False
        self.opened = 0
        self.closed = 0
        self.active = False

    @property
    def connected(self) -> bool:
        return self.active

    def open(self) -> None:
        self.opened += 1
        self.active = True

    def close(self) -> None:
        self.closed += 1
        self.active = False

    def resolve(self, remote: str) -> Path:
        return self.root / remote.lstrip("/")

    def record(self, action: str, remote: str) -> None:
        self.calls.append((action, remote))
        error = self.failures.get((action, remote))
        if error is not None:
            raise error

    def list(self, path: str) -> Listing:
        self.record("list", path)
        target = self.resolve(path)
        if not target.is_dir():
            raise FileNotFoundError(2, "No such file", path)

        entries = [
            Entry(name=".", path=posixpath.join(path, "."), dir=True),
            Entry(name="..", path=posixpath.join(path, ".."), dir=True),
        ]
        for child in sorted(target.iterdir(), key=lambda item: item.name, reverse=self.reverse):
            entries.append(
                Entry(
                    name=child.name,
                    path=posixpath.join(path, child.name),
                    dir=child.is_dir(),
                    size=0 if child.is_dir() else child.stat().st_size,
                )
            )
        return Listing(entries, len(entries) + self.skew)

    def get(self, remote: str, handle) -> None:
        self.record("get", remote)
        handle.write(self.resolve(remote).read_bytes())

    def put(self, handle, remote: str, overwrite: bool = True) -> None:
        self.record("put", remote)
        target = self.resolve(remote)
        if not overwrite and target.exists():
            raise OSError(4, "Failure", remote)
        target.write_bytes(handle.read())

    def remove(self, remote: str) -> None:
        self.record("remove", remote)
        target = self.resolve(remote)
        if not target.is_file():
            raise FileNotFoundError(2, "No such file", remote)
        target.unlink()

    def mkdir(self, remote: str) -> None:
        self.record("mkdir", remote)
        self.resolve(remote).mkdir()

    def rmdir(self, remote: str) -> None:
        self.record("rmdir", remote)
        self.resolve(remote).rmdir()


class StatSession(LocalSession):
    """LocalSession that also offers the stat primitive."""

    def stat(self, remote: str) -> os.stat_result:
        self.record("stat", remote)
        return os.stat(self.resolve(remote))


def snapshot(root: Path) -> Dict[str, Optional[bytes]]:
    """Map every path below root to its bytes, or None for directories."""
    return {
        item.relative_to(root).as_posix(): (None if item.is_dir() else item.read_bytes())
        for item in root.rglob("*")
    }


@pytest.fixture
def server(tmp_path: Path) -> Path:
    root = tmp_path / "server"
    root.mkdir()
    return root


@pytest.fixture
def session(server: Path) -> LocalSession:
    return LocalSession(server)


@pytest.fixture
def client(session: LocalSession) -> Client:
    return Client(session=session)


@pytest.fixture
def aclient(session: LocalSession) -> AsyncClient:
    return AsyncClient(session=session)


@pytest.fixture
def source(tmp_path: Path) -> Path:
    """A small local tree with sub-directories and files created out of order."""
    root = tmp_path / "source"
    (root / "b" / "deep").mkdir(parents=True)
    (root / "a").mkdir()
    (root / "z.txt").write_bytes(b"last")
    (root / "m.txt").write_bytes(b"middle")
    (root / "b" / "y.txt").write_bytes(b"why")
    (root / "b" / "deep" / "x.txt").write_bytes(b"ex")
    (root / "a" / "one.txt").write_bytes(b"1")
    return root


@pytest.fixture
def victim(server: Path) -> Path:
    """A remote tree to delete: /victim/{a.txt, sub/{b.txt, inner/c.txt}}."""
    root = server / "victim"
    (root / "sub" / "inner").mkdir(parents=True)
    (root / "a.txt").write_bytes(b"a")
    (root / "sub" / "b.txt").write_bytes(b"b")
    (root / "sub" / "inner" / "c.txt").write_bytes(b"c")
    return root
