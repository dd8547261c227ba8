"""
Recursive directory transfer and deletion.

Each tree operation is written once, as a generator that walks the tree
depth-first and yields a Step for every thing it needs done: list a remote
directory, move a file, remove an entry, notify a callback. The generator
never talks to the session. A driver takes each Step, performs it against
a client and sends the result back in:

    run(walk, client)          # blocking: calls client methods directly
    await arun(walk, client)   # async: awaits the AsyncClient coroutines

Both drivers see the exact same sequence of steps, so ordering, callback
timing and failure behaviour cannot drift between the blocking and the
async API. The first exception raised by a step (or a callback) ends the
walk at every level; whatever was already transferred stays where it is.

Local filesystem work (creating download targets, enumerating an upload
source) is a "local" step too. The blocking driver calls it in place; the
async driver hands it to a worker thread so the event loop never touches
the disk.
"""

import asyncio
import os
import posixpath
from pathlib import Path
from typing import Any, Generator, List, NamedTuple, Optional, Tuple, Union

from . import callbacks, paths
from .errors import ArgumentError
from .session import Entry

LocalPath = Union[str, "os.PathLike[str]"]


class Step(NamedTuple):
    """One remote operation, local filesystem call or notification requested by a walk.

    Attributes:
        action: Client method to call ("ensure", "list", "mkdir", "download",
                "upload", "remove", "rmdir"), "notify" for a callback or
                "local" for a local filesystem function
        args: Positional arguments for that call; for "notify" and "local"
              the first one is the function itself
    """

    action: str
    args: Tuple[Any, ...] = ()


Walk = Generator[Step, Any, None]


def require(**values: Any) -> None:
    """Reject missing or blank path arguments.

    Raises:
        ArgumentError: Naming the first offending argument
    """
    for name, value in values.items():
        if value is None or not os.fspath(value).strip():
            raise ArgumentError(f"{name} cannot be empty or whitespace")


def makedirs(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def scan(source: Path) -> Tuple[List[Path], List[Path]]:
    """Split a local directory into (sub-directories, files), each sorted by path.

    Raises:
        ArgumentError: If source is not a directory
    """
    if not source.is_dir():
        raise ArgumentError(f"Must be a directory path: {source}")

    children = sorted(source.iterdir(), key=str)
    return (
        [child for child in children if child.is_dir()],
        [child for child in children if child.is_file()],
    )


def upload(
    local: LocalPath,
    remote: str,
    overwrite: bool = True,
    callback: Optional[callbacks.UploadCallback] = None,
) -> Walk:
    """Walk a local directory and push it to a remote directory.

    Sub-directories are handled first, then files, each group sorted by
    full path, so two uploads of the same tree produce the same sequence
    of callbacks.
    """
    require(local=local, remote=remote)
    yield Step("ensure")
    yield from _upload(Path(local), remote, overwrite, callback)


def _upload(
    source: Path,
    remote: str,
    overwrite: bool,
    callback: Optional[callbacks.UploadCallback],
) -> Walk:
    directories, files = yield Step("local", (scan, source))

    yield Step("mkdir", (remote,))

    for directory in directories:
        target = paths.remote(remote, directory.name)
        yield from _upload(directory, target, overwrite, callback)
        if callback is not None:
            yield Step("notify", (callback, directory, str(directory), target))

    for file in files:
        target = paths.remote(remote, file.name)
        yield Step("upload", (str(file), target, overwrite))
        if callback is not None:
            yield Step("notify", (callback, file, str(file), target))


def download(
    remote: str,
    local: LocalPath,
    callback: Optional[callbacks.DownloadCallback] = None,
) -> Walk:
    """Walk a remote directory and pull it into a local directory.

    Entries are visited in the order the server listed them. Local
    directories are created as they are reached.
    """
    require(remote=remote, local=local)
    yield Step("ensure")

    local = os.fspath(local)
    yield Step("local", (makedirs, local))

    yield from _download(remote, local, callback)


def _download(
    remote: str,
    local: str,
    callback: Optional[callbacks.DownloadCallback],
) -> Walk:
    listing = yield Step("list", (remote,))

    for entry in paths.visible(listing.entries):
        target = paths.local(local, entry.name)
        if entry.dir:
            yield Step("local", (makedirs, target))
            yield from _download(entry.path, target, callback)
        else:
            yield Step("download", (entry.path, target))

        if callback is not None:
            yield Step("notify", (callback, entry, target, entry.path))


def remove(
    remote: str,
    callback: Optional[callbacks.DeleteCallback] = None,
) -> Walk:
    """Walk a remote directory and delete it with everything below it.

    Every entry is reported after it is gone, so a child is always reported
    before its parent. The directory the walk started from is reported last.
    """
    require(remote=remote)
    yield from _remove(remote, callback)

    if callback is not None:
        yield Step("notify", (callback, root(remote), remote))


def _remove(
    remote: str,
    callback: Optional[callbacks.DeleteCallback],
) -> Walk:
    listing = yield Step("list", (remote,))

    for entry in paths.visible(listing.entries):
        if entry.dir:
            yield from _remove(entry.path, callback)
        else:
            yield Step("remove", (entry.path,))

        if callback is not None:
            yield Step("notify", (callback, entry, entry.path))

    yield Step("rmdir", (remote,))


def root(remote: str) -> Entry:
    """Describe the starting directory of a walk, which no listing returns."""
    name = posixpath.basename(remote.rstrip("/")) or remote
    return Entry(name=name, path=remote, dir=True)


def run(walk: Walk, client: Any) -> None:
    """Drive a walk to completion against a blocking Client."""
    result = None
    try:
        while True:
            try:
                step = walk.send(result)
            except StopIteration:
                return

            if step.action == "notify":
                result = callbacks.fire(*step.args)
            elif step.action == "local":
                function, *args = step.args
                result = function(*args)
            else:
                result = getattr(client, step.action)(*step.args)
    finally:
        walk.close()


async def arun(walk: Walk, client: Any) -> None:
    """Drive a walk to completion against an AsyncClient.

    Steps are awaited one at a time; nothing inside a single walk runs
    concurrently.
    """
    result = None
    try:
        while True:
            try:
                step = walk.send(result)
            except StopIteration:
                return

            if step.action == "notify":
                result = await callbacks.wait(*step.args)
            elif step.action == "local":
                result = await asyncio.to_thread(*step.args)
            else:
                result = await getattr(client, step.action)(*step.args)
    finally:
        walk.close()
