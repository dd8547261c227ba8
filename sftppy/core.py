import asyncio
import inspect
import logging
import os
import stat
import tempfile
import warnings
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Iterable,
    Optional,
    TypeVar,
)

from . import callbacks, paths, tree
from .config import Config
from .errors import ConfigurationError
from .session import Listing, Session

# Enhanced type definitions for improved type safety and clarity
T = TypeVar("T")
ClientType = TypeVar("ClientType", bound="Client")
AsyncClientType = TypeVar("AsyncClientType", bound="AsyncClient")
HookType = Callable[..., Any]
LocalPath = tree.LocalPath

logger = logging.getLogger(__name__)


def pull(session: Session, remote: str, local: LocalPath) -> None:
    """Stream a remote file into a local file, replacing it."""
    with open(local, "wb") as handle:
        session.get(remote, handle)
        handle.flush()


def push(session: Session, local: LocalPath, remote: str, overwrite: bool) -> None:
    with open(local, "rb") as handle:
        session.put(handle, remote, overwrite)


async def settle(operations: Iterable[Awaitable[Any]]) -> None:
    """Run operations concurrently and wait for all of them to finish.

    Raises:
        Exception: The first failure in submission order, once every
                   operation has either completed or failed
    """
    results = await asyncio.gather(*operations, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result


class Base:
    """
    Session ownership shared by the blocking and the async client.

    A client holds at most one Session, built lazily from its Config the first
    time something needs the network, or handed in explicitly. The session is
    never shared with another client.
    """

    def __init__(
        self,
        session: Optional[Session] = None,
        hooks: Optional[Dict[str, HookType]] = None,
    ) -> None:
        self.config: Optional[Config] = None
        self.session: Optional[Session] = session
        self.hooks: Dict[str, HookType] = hooks or {}

    @property
    def connected(self) -> bool:
        """Whether the client holds a session that is currently open."""
        return self.session is not None and self.session.connected

    def using(self: T, session: Session) -> T:
        """Use an explicit session instead of building one from the config.

        Args:
            session: Session to use for every following operation

        Returns:
            This same client, for chaining
        """
        self.session = session
        return self

    def build(self) -> Session:
        """Create a session from the held configuration.

        Raises:
            ConfigurationError: If there is no configuration or it has no credential
        """
        if self.config is None:
            raise ConfigurationError("No configuration provided. Pass a Config to connect().")
        return Session(self.config)


class Client(Base):
    """
    Blocking SFTP client with directory-aware operations.

    On top of the usual one-file operations this can push a whole local
    directory tree up, pull a remote tree down, or delete a remote tree,
    calling you back after every item so you can show progress or keep a
    log. Every operation connects on demand, so you rarely need to call
    connect() yourself.

    Example:
        with Client(Config(host="example.com", user="me", key="~/.ssh/id_ed25519")) as client:
            client.upload_directory("site", "/var/www/site")
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        session: Optional[Session] = None,
        hooks: Optional[Dict[str, HookType]] = None,
    ) -> None:
        """Set up the client and connect straight away if the config asks for it.

        Args:
            config: Connection settings. With ``connect=True`` (the default)
                    the session is opened here.
            session: Ready-made session to use instead of building one
            hooks: Callbacks for "connect" and "close" events. They receive
                   the client; failures are reported as warnings.
        """
        super().__init__(session=session, hooks=hooks)
        if config is not None:
            self.configure(config)

    def configure(self: ClientType, config: Config, skip: bool = False) -> ClientType:
        """Replace the configuration.

        Args:
            config: New connection settings
            skip: Don't auto-connect even if the config asks for it

        Returns:
            This same client, for chaining
        """
        self.config = config
        if config.connect and not skip:
            self.connect()
        return self

    def connect(self: ClientType, config: Optional[Config] = None) -> ClientType:
        """Open the session, building it first if there isn't one yet.

        Calling this on a client that is already connected is safe; the
        session just stays open.

        Args:
            config: Optional settings that replace the held ones. Replacing
                    the config here never triggers auto-connect on its own.

        Returns:
            This same client, for chaining

        Raises:
            ConfigurationError: If neither a password nor a private key is configured
        """
        if config is not None:
            self.configure(config, skip=True)

        if self.session is None:
            self.session = self.build()

        opened = self.session.connected
        self.session.open()

        if not opened:
            self.hook("connect")
        return self

    def ensure(self) -> None:
        """Connect if the session isn't open yet."""
        if not self.connected:
            self.connect()

    def close(self) -> None:
        """Disconnect and release the session. Does nothing if there never was one."""
        if self.session is None:
            return

        self.hook("close")
        try:
            self.session.close()
        finally:
            self.session = None

    def hook(self, name: str) -> None:
        if name not in self.hooks:
            return
        try:
            self.hooks[name](self)
        except Exception as error:
            warnings.warn(f"{name.capitalize()} hook failed: {error}")

    def __enter__(self: ClientType) -> ClientType:
        return self

    def __exit__(self, type, value, trace) -> None:
        self.close()

    def list(
        self, path: str, callback: Optional[callbacks.ListCallback] = None
    ) -> Listing:
        """List one remote directory.

        Args:
            path: Remote directory to list
            callback: Called with the entries and the protocol's own count

        Returns:
            Listing of (entries, total). The two can disagree if the
            directory changes while it is being read; that is passed on as is.

        Raises:
            IOError: If the directory is missing or not readable
        """
        self.ensure()
        listing = self.session.list(path)
        logger.debug("Listed %s: %d entries, %d reported", path, len(listing.entries), listing.total)
        callbacks.fire(callback, listing.entries, listing.total)
        return listing

    def download(self, remote: str, local: LocalPath) -> None:
        """Download one remote file, replacing the local file if it exists."""
        self.ensure()
        logger.debug("Downloading %s to %s", remote, local)
        pull(self.session, remote, local)

    def upload(self, local: LocalPath, remote: str, overwrite: bool = True) -> None:
        """Upload one local file.

        Args:
            local: Local file to read
            remote: Remote file to write
            overwrite: Replace an existing remote file. When False the server
                       refuses and the call raises; nothing is checked up front.
        """
        self.ensure()
        logger.debug("Uploading %s to %s", local, remote)
        push(self.session, local, remote, overwrite)

    def remove(self, remote: str) -> None:
        """Delete one remote file. Raises if it is missing or protected."""
        self.ensure()
        logger.debug("Removing %s", remote)
        self.session.remove(remote)

    def remove_files(self, remotes: Iterable[str]) -> None:
        for remote in remotes:
            self.remove(remote)

    def rmdir(self, remote: str) -> None:
        """Delete one empty remote directory."""
        self.ensure()
        logger.debug("Removing directory %s", remote)
        self.session.rmdir(remote)

    def mkdir(self, remote: str) -> None:
        """Create a remote directory unless it is already there.

        Root-like paths (".", "..", "/", "\\" and "") are ignored without
        touching the server, so callers can pass them blindly.
        """
        if paths.reserved(remote):
            return

        self.ensure()
        if not self.isdir(remote):
            logger.debug("Creating directory %s", remote)
            self.session.mkdir(remote)

    def isdir(self, remote: str) -> bool:
        """Check whether a remote directory exists by trying to list it.

        Returns:
            bool: True if the listing worked, False if it failed for any reason
        """
        self.ensure()
        try:
            self.session.list(remote)
            return True
        except Exception:
            return False

    def exists(self, remote: str) -> bool:
        """Check whether a remote file exists.

        Uses the session's stat call when it has one. Sessions without stat
        are checked by downloading the file to a temporary location, which
        costs a full transfer, so prefer a session that can stat.

        Returns:
            bool: True if the path is there and is not a directory
        """
        self.ensure()
        lookup = getattr(self.session, "stat", None)
        if lookup is None:
            return self.downloadable(remote)

        try:
            attrs = lookup(remote)
        except Exception:
            return False
        return not stat.S_ISDIR(attrs.st_mode or 0)

    def downloadable(self, remote: str) -> bool:
        """Check a remote file by downloading it to a throwaway file."""
        descriptor, temporary = tempfile.mkstemp()
        os.close(descriptor)
        try:
            self.download(remote, temporary)
            return True
        except Exception:
            return False
        finally:
            os.remove(temporary)

    def upload_directory(
        self,
        local: LocalPath,
        remote: str,
        overwrite: bool = True,
        callback: Optional[callbacks.UploadCallback] = None,
    ) -> None:
        """Upload a local directory tree, creating remote directories as needed.

        Within each directory, sub-directories are uploaded first and then
        files, both in sorted order, so the callback sequence is the same
        every time for the same tree. A directory is reported after
        everything inside it has been uploaded.

        Args:
            local: Local directory to upload
            remote: Remote directory to upload into (created if missing)
            overwrite: Replace remote files that already exist
            callback: Called as ``callback(path, local, remote)`` after each item

        Raises:
            ArgumentError: If a path is blank or ``local`` is not a directory
            IOError: If the server rejects any operation; the rest is skipped
        """
        tree.run(tree.upload(local, remote, overwrite, callback), self)

    def download_directory(
        self,
        remote: str,
        local: LocalPath,
        callback: Optional[callbacks.DownloadCallback] = None,
    ) -> None:
        """Download a remote directory tree into a local directory.

        The local directory and its sub-directories are created as needed.
        Entries are processed in the order the server lists them.

        Args:
            remote: Remote directory to download
            local: Local directory to download into
            callback: Called as ``callback(entry, local, remote)`` after each item

        Raises:
            ArgumentError: If a path is blank
            IOError: If the server rejects any operation; the rest is skipped
        """
        tree.run(tree.download(remote, local, callback), self)

    def remove_directory(
        self,
        remote: str,
        callback: Optional[callbacks.DeleteCallback] = None,
    ) -> None:
        """Delete a remote directory and everything in it.

        Children are deleted and reported before their parent. The directory
        itself is reported last, after it has been removed.

        Args:
            remote: Remote directory to delete
            callback: Called as ``callback(entry, remote)`` after each deletion

        Raises:
            ArgumentError: If the path is blank
            IOError: If the server rejects any deletion; the rest is skipped
        """
        tree.run(tree.remove(remote, callback), self)

    def remove_directories(
        self,
        remotes: Iterable[str],
        callback: Optional[callbacks.DeleteCallback] = None,
    ) -> None:
        for remote in remotes:
            self.remove_directory(remote, callback)


class AsyncClient(Base):
    """
    Async SFTP client with the same operations as Client.

    Each protocol call runs in a worker thread and is awaited, so the event
    loop stays free while bytes move. Calls on one client go through the
    session one at a time, which lets you gather several operations safely;
    within a single tree operation everything happens in order.

    Example:
        async with AsyncClient(Config(host="example.com", user="me", password=secret)) as client:
            await client.download_directory("/backups/today", "restore")
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        session: Optional[Session] = None,
        hooks: Optional[Dict[str, HookType]] = None,
    ) -> None:
        """Set up the client. Nothing connects until the client is used.

        A config with ``connect=True`` is connected on ``async with`` entry;
        otherwise the first operation connects.

        Args:
            config: Connection settings
            session: Ready-made session to use instead of building one
            hooks: Callbacks for "connect" and "close" events. They receive
                   the client and may be coroutine functions.
        """
        super().__init__(session=session, hooks=hooks)
        self.config = config
        self.lock = asyncio.Lock()

    async def call(self, function: Callable[..., T], *args: Any) -> T:
        """Run a blocking session call in a worker thread, one at a time."""
        async with self.lock:
            return await asyncio.to_thread(function, *args)

    async def configure(
        self: AsyncClientType, config: Config, skip: bool = False
    ) -> AsyncClientType:
        """Replace the configuration, connecting if it asks for auto-connect."""
        self.config = config
        if config.connect and not skip:
            await self.connect()
        return self

    async def connect(
        self: AsyncClientType, config: Optional[Config] = None
    ) -> AsyncClientType:
        """Open the session, building it first if there isn't one yet.

        Args:
            config: Optional settings that replace the held ones without
                    triggering auto-connect

        Returns:
            This same client, for chaining

        Raises:
            ConfigurationError: If neither a password nor a private key is configured
        """
        if config is not None:
            await self.configure(config, skip=True)

        if self.session is None:
            self.session = self.build()

        session = self.session
        async with self.lock:
            if session.connected:
                return self
            await asyncio.to_thread(session.open)

        await self.hook("connect")
        return self

    async def ensure(self) -> None:
        """Connect if the session isn't open yet."""
        if not self.connected:
            await self.connect()

    async def aclose(self) -> None:
        """Disconnect and release the session. Does nothing if there never was one."""
        if self.session is None:
            return

        session = self.session
        await self.hook("close")
        try:
            await self.call(session.close)
        finally:
            self.session = None

    async def hook(self, name: str) -> None:
        if name not in self.hooks:
            return
        try:
            result = self.hooks[name](self)
            if inspect.isawaitable(result):
                await result
        except Exception as error:
            warnings.warn(f"{name.capitalize()} hook failed: {error}")

    async def __aenter__(self: AsyncClientType) -> AsyncClientType:
        if self.config is not None and self.config.connect:
            await self.connect()
        return self

    async def __aexit__(self, type, value, trace) -> None:
        await self.aclose()

    async def list(
        self, path: str, callback: Optional[callbacks.AsyncListCallback] = None
    ) -> Listing:
        """List one remote directory.

        Args:
            path: Remote directory to list
            callback: Awaited with the entries and the protocol's own count

        Returns:
            Listing of (entries, total)

        Raises:
            IOError: If the directory is missing or not readable
        """
        await self.ensure()
        listing = await self.call(self.session.list, path)
        logger.debug("Listed %s: %d entries, %d reported", path, len(listing.entries), listing.total)
        await callbacks.wait(callback, listing.entries, listing.total)
        return listing

    async def download(self, remote: str, local: LocalPath) -> None:
        """Download one remote file, replacing the local file if it exists."""
        await self.ensure()
        logger.debug("Downloading %s to %s", remote, local)
        await self.call(pull, self.session, remote, local)

    async def upload(
        self, local: LocalPath, remote: str, overwrite: bool = True
    ) -> None:
        """Upload one local file; see Client.upload for the overwrite rules."""
        await self.ensure()
        logger.debug("Uploading %s to %s", local, remote)
        await self.call(push, self.session, local, remote, overwrite)

    async def remove(self, remote: str) -> None:
        await self.ensure()
        logger.debug("Removing %s", remote)
        await self.call(self.session.remove, remote)

    async def remove_files(self, remotes: Iterable[str]) -> None:
        """Delete several remote files concurrently.

        Every file is attempted; the first failure is raised once all of
        them have finished.
        """
        await settle(self.remove(remote) for remote in remotes)

    async def rmdir(self, remote: str) -> None:
        await self.ensure()
        logger.debug("Removing directory %s", remote)
        await self.call(self.session.rmdir, remote)

    async def mkdir(self, remote: str) -> None:
        """Create a remote directory unless it is already there or root-like."""
        if paths.reserved(remote):
            return

        await self.ensure()
        if not await self.isdir(remote):
            logger.debug("Creating directory %s", remote)
            await self.call(self.session.mkdir, remote)

    async def isdir(self, remote: str) -> bool:
        """Check whether a remote directory exists by trying to list it."""
        await self.ensure()
        try:
            await self.call(self.session.list, remote)
            return True
        except Exception:
            return False

    async def exists(self, remote: str) -> bool:
        """Check whether a remote file exists (stat, or a trial download)."""
        await self.ensure()
        lookup = getattr(self.session, "stat", None)
        if lookup is None:
            return await self.downloadable(remote)

        try:
            attrs = await self.call(lookup, remote)
        except Exception:
            return False
        return not stat.S_ISDIR(attrs.st_mode or 0)

    async def downloadable(self, remote: str) -> bool:
        descriptor, temporary = tempfile.mkstemp()
        os.close(descriptor)
        try:
            await self.download(remote, temporary)
            return True
        except Exception:
            return False
        finally:
            os.remove(temporary)

    async def upload_directory(
        self,
        local: LocalPath,
        remote: str,
        overwrite: bool = True,
        callback: Optional[callbacks.AsyncUploadCallback] = None,
    ) -> None:
        """Upload a local directory tree. Same order and rules as Client.upload_directory.

        The callback is awaited before the next item starts.
        """
        await tree.arun(tree.upload(local, remote, overwrite, callback), self)

    async def download_directory(
        self,
        remote: str,
        local: LocalPath,
        callback: Optional[callbacks.AsyncDownloadCallback] = None,
    ) -> None:
        """Download a remote directory tree. Same order and rules as Client.download_directory."""
        await tree.arun(tree.download(remote, local, callback), self)

    async def remove_directory(
        self,
        remote: str,
        callback: Optional[callbacks.AsyncDeleteCallback] = None,
    ) -> None:
        """Delete a remote directory tree. Same order and rules as Client.remove_directory."""
        await tree.arun(tree.remove(remote, callback), self)

    async def remove_directories(
        self,
        remotes: Iterable[str],
        callback: Optional[callbacks.AsyncDeleteCallback] = None,
    ) -> None:
        """Delete several remote directory trees concurrently.

        Each tree is still deleted children-first and in listing order, but
        callbacks from different trees may interleave. A failing tree does
        not stop the others; its error is raised after all trees are done.
        """
        await settle(self.remove_directory(remote, callback) for remote in remotes)
