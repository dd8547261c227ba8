import logging
import posixpath
import shutil
import stat
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, List, NamedTuple, Optional

import paramiko

from .config import Config

logger = logging.getLogger(__name__)

# Bytes moved per read when streaming a local file up to the server
CHUNK = 32768


@dataclass
class Entry:
    """One item reported by a remote directory listing.

    Attributes:
        name: Bare file or directory name as the server reported it
        path: Full remote path (listing directory joined with the name)
        dir: Whether the server marks this item as a directory
        size: Size in bytes, 0 when the server does not report it
        modified: Last modification time, if reported
    """

    name: str
    path: str
    dir: bool
    size: int = 0
    modified: Optional[datetime] = None

    @classmethod
    def parse(cls, directory: str, attrs: paramiko.SFTPAttributes) -> "Entry":
        mode = attrs.st_mode or 0
        return cls(
            name=attrs.filename,
            path=posixpath.join(directory, attrs.filename),
            dir=stat.S_ISDIR(mode),
            size=attrs.st_size or 0,
            modified=(
                datetime.fromtimestamp(attrs.st_mtime)
                if attrs.st_mtime is not None
                else None
            ),
        )


class Listing(NamedTuple):
    """Entries of one remote directory plus the count the protocol reported.

    The count is tallied while the server streams the listing and is kept
    as reported, even when it disagrees with ``len(entries)``.
    """

    entries: List[Entry]
    total: int


class Session:
    """
    A single SSH connection with its SFTP channel.

    This is the only place that talks paramiko. It knows nothing about
    directory trees; every method does exactly one protocol operation and
    lets protocol failures (``IOError``, ``paramiko.SSHException``) escape
    untouched. Sessions are built by a client from its Config and belong to
    that client alone.
    """

    def __init__(self, config: Config) -> None:
        """Prepare a session without connecting yet.

        Args:
            config: Connection settings to open the session with

        Raises:
            ConfigurationError: If the config has neither password nor key
        """
        self.config = config
        self.credential = config.credential()
        self.client: Optional[paramiko.SSHClient] = None
        self.sftp: Optional[paramiko.SFTPClient] = None

    @property
    def connected(self) -> bool:
        """Whether the SSH transport is up and the SFTP channel is open."""
        if self.client is None or self.sftp is None:
            return False
        transport = self.client.get_transport()
        return transport is not None and transport.is_active()

    @property
    def channel(self) -> paramiko.SFTPClient:
        if self.sftp is None:
            raise RuntimeError("Session is not open. Call open() first.")
        return self.sftp

    def open(self) -> None:
        """Connect, authenticate and start the SFTP subsystem.

        Opening an already connected session does nothing. A session whose
        transport died is released and opened again from scratch.
        """
        if self.connected:
            return

        # Drop whatever is left of a dead connection before reconnecting
        self.close()

        client = paramiko.SSHClient()
        self.config.hostkeys.apply(client)

        logger.info(
            "Connecting to %s@%s:%s", self.credential.user, self.config.host, self.config.port
        )
        try:
            client.connect(
                hostname=self.config.host,
                port=self.config.port,
                look_for_keys=False,
                allow_agent=False,
                **self.credential.options(),
                **self.config.timeout.options(),
            )
            self.sftp = client.open_sftp()
        except Exception:
            client.close()
            raise

        self.client = client

    def close(self) -> None:
        """Close the SFTP channel and the SSH transport, if open."""
        if self.sftp is not None:
            self.sftp.close()
            self.sftp = None

        if self.client is not None:
            self.client.close()
            self.client = None
            logger.info("Disconnected from %s:%s", self.config.host, self.config.port)

    def list(self, path: str) -> Listing:
        """List one remote directory.

        Args:
            path: Remote directory to list

        Returns:
            Listing with the entries and the number of records read
        """
        entries: List[Entry] = []
        total = 0
        for attrs in self.channel.listdir_iter(path):
            total += 1
            entries.append(Entry.parse(path, attrs))
        return Listing(entries, total)

    def get(self, remote: str, handle: BinaryIO) -> None:
        """Stream a remote file into an open, writable local handle."""
        self.channel.getfo(remote, handle)

    def put(self, handle: BinaryIO, remote: str, overwrite: bool = True) -> None:
        """Stream an open, readable local handle into a remote file.

        Args:
            handle: Local file opened for binary reading
            remote: Remote file to write
            overwrite: When False the server refuses to replace an existing
                       file (exclusive create) and the call fails
        """
        mode = "w" if overwrite else "wx"
        with self.channel.open(remote, mode) as target:
            target.set_pipelined(True)
            shutil.copyfileobj(handle, target, CHUNK)

    def stat(self, remote: str) -> paramiko.SFTPAttributes:
        return self.channel.stat(remote)

    def remove(self, remote: str) -> None:
        self.channel.remove(remote)

    def mkdir(self, remote: str) -> None:
        self.channel.mkdir(remote)

    def rmdir(self, remote: str) -> None:
        self.channel.rmdir(remote)
