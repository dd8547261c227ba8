"""Per-item progress notifications for tree operations.

Blocking operations call their callback and move on, ignoring whatever it
returns. Async operations call it and, when the result is awaitable, wait
for it before touching the next item, so both plain functions and
coroutine functions work there. A missing callback is simply not called.
Anything a callback raises propagates and stops the traversal.
"""

import inspect
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Union

from .session import Entry

# Blocking callback shapes
DeleteCallback = Callable[[Entry, str], Any]
DownloadCallback = Callable[[Entry, str, str], Any]
UploadCallback = Callable[[Path, str, str], Any]
ListCallback = Callable[[List[Entry], int], Any]

# Awaited callback shapes
AsyncDeleteCallback = Callable[[Entry, str], Union[Awaitable[Any], Any]]
AsyncDownloadCallback = Callable[[Entry, str, str], Union[Awaitable[Any], Any]]
AsyncUploadCallback = Callable[[Path, str, str], Union[Awaitable[Any], Any]]
AsyncListCallback = Callable[[List[Entry], int], Union[Awaitable[Any], Any]]


def fire(callback: Optional[Callable[..., Any]], *args: Any) -> None:
    if callback is None:
        return
    callback(*args)


async def wait(callback: Optional[Callable[..., Any]], *args: Any) -> None:
    if callback is None:
        return
    result = callback(*args)
    if inspect.isawaitable(result):
        await result
