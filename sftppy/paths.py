"""Path composition and entry filtering shared by every tree operation.

Remote paths always use forward slashes, whatever the local platform is.
Local paths use the platform separator.
"""

import os
import posixpath
from typing import Iterable, Iterator

from .session import Entry

# Names a directory listing may report that do not name a real child
PSEUDO = frozenset({".", ".."})

# Paths mkdir treats as "nothing to create"
RESERVED = frozenset({".", "..", "/", "\\", ""})


def remote(base: str, name: str) -> str:
    """Join a remote directory and an entry name with a forward slash."""
    return posixpath.join(base, name)


def local(base: str, name: str) -> str:
    """Join a local directory and an entry name with the platform separator."""
    return os.path.join(base, name)


def pseudo(entry: Entry) -> bool:
    """Tell whether an entry is the '.' or '..' of a listing.

    Checks the reported name and the last segment of the full path, since
    some servers put the real information in only one of them.
    """
    if entry.name in PSEUDO:
        return True
    return entry.path.rstrip("/").rsplit("/", 1)[-1] in PSEUDO


def visible(entries: Iterable[Entry]) -> Iterator[Entry]:
    """Yield the entries of a listing that are real children, in order."""
    return (entry for entry in entries if not pseudo(entry))


def reserved(path: str) -> bool:
    return path in RESERVED
