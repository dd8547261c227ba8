__version__ = "1.0.0"
__author__ = "Andrew Hernandez"
__email__ = "andromedeyz@hotmail.com"
__license__ = "MIT"
__description__ = "A directory-aware SFTP client for Python with recursive upload, download and delete, in blocking and async flavours."
__url__ = "http://github.com/ApaxPhoenix/SftpPy"

import sys

if sys.version_info < (3, 10):
    raise RuntimeError("SftpPy needs Python 3.10 or newer to work properly")

# The main SftpPy class - build clients from an sftp:// URL
from .sftp import SftpPy

# The clients - same operations, blocking or awaitable
from .core import (
    Client,  # Blocking client, one call at a time
    AsyncClient,  # Async client for asyncio applications
)

# Fine-tune how your SFTP connections behave
from .config import (
    Config,  # Host, port, user and credentials for one client
    Timeout,  # How long to wait while opening a session
)

# Different ways to log in
from .auth import (
    Basic,  # Username and password
    Key,  # Username and private key file
)

# Keep your connections secure
from .settings import (
    HostKeys,  # Host key verification policy
)

# What the server hands back and what can go wrong
from .session import Entry, Listing, Session
from .errors import SftpError, ConfigurationError, ArgumentError

# Everything you can import and use
__all__ = [
    # The main class you'll work with
    "SftpPy",
    # Clients
    "Client",
    "AsyncClient",
    # Configuration options
    "Config",
    "Timeout",
    # Authentication types
    "Basic",
    "Key",
    # Security settings
    "HostKeys",
    # Protocol layer
    "Session",
    "Entry",
    "Listing",
    # Errors
    "SftpError",
    "ConfigurationError",
    "ArgumentError",
    # Package info
    "__version__",
    "__author__",
    "__email__",
    "__license__",
    "__description__",
    "__url__",
]
