from dataclasses import dataclass, field
from typing import Optional, Union

from .auth import Basic, Key
from .errors import ConfigurationError
from .settings import HostKeys

Credential = Union[Basic, Key]


@dataclass
class Timeout:
    """
    Timeout configuration for SSH session setup.

    Each value covers one phase of opening a session. Transfers themselves
    are not bounded here; a slow but progressing transfer is left alone.

    Attributes:
        connect: Time to wait for the TCP connection to the server.
                Covers DNS resolution and the TCP handshake.
        banner: Time to wait for the server's SSH banner once connected.
               Servers behind overloaded proxies can be slow to send it.
        auth: Time to wait for the user authentication phase to finish.
    """

    connect: float = 10.0  # Time to wait for the TCP connection
    banner: float = 15.0  # Time to wait for the SSH protocol banner
    auth: float = 30.0  # Time to wait for authentication to complete

    def __post_init__(self) -> None:
        """
        Validate timeout configuration after initialization.

        Returns:
            None

        Raises:
            ValueError: If any timeout is not positive.
        """
        if self.connect <= 0:
            raise ValueError("Connect timeout must be positive")
        if self.banner <= 0:
            raise ValueError("Banner timeout must be positive")
        if self.auth <= 0:
            raise ValueError("Auth timeout must be positive")

    def options(self) -> dict:
        """Keyword arguments for ``paramiko.SSHClient.connect``."""
        return {
            "timeout": self.connect,
            "banner_timeout": self.banner,
            "auth_timeout": self.auth,
        }


@dataclass
class Config:
    """
    Connection settings for one SFTP client.

    Every client owns its own Config value; nothing here is shared between
    clients or stored at module level. Credentials are not checked when the
    Config is built, only when a session is created from it, so a Config can
    be assembled step by step and handed to a client later.

    Attributes:
        host: Hostname or IP address of the SSH server.
        user: Username to authenticate as.
        password: Password for password authentication.
        key: Path to a private key file for key authentication.
             Takes precedence over the password when both are set.
        passphrase: Passphrase for an encrypted private key.
        port: TCP port the SSH server listens on.
        connect: Open the session as soon as a client receives this Config.
        timeout: Session setup timeouts.
        hostkeys: Host key verification settings.
    """

    host: str
    user: str = ""
    password: Optional[str] = None
    key: Optional[str] = None
    passphrase: Optional[str] = None
    port: int = 22
    connect: bool = True
    timeout: Timeout = field(default_factory=Timeout)
    hostkeys: HostKeys = field(default_factory=HostKeys)

    def __post_init__(self) -> None:
        """
        Validate connection settings after initialization.

        Returns:
            None

        Raises:
            ValueError: If the host is blank or the port is out of range.
        """
        if not self.host or not self.host.strip():
            raise ValueError("Host cannot be empty or whitespace")

        if not (0 < self.port < 65536):
            raise ValueError(f"Invalid port number: {self.port}")

    def credential(self) -> Credential:
        """Pick the credential a session should authenticate with.

        A private key path wins over a password, matching what ssh(1) tries
        first. Blank strings count as absent.

        Returns:
            Key or Basic credentials built from this configuration

        Raises:
            ConfigurationError: If neither a password nor a private key is set
        """
        if self.key and self.key.strip():
            return Key(user=self.user, path=self.key, passphrase=self.passphrase)

        if self.password and self.password.strip():
            return Basic(user=self.user, password=self.password)

        raise ConfigurationError(
            "A password or private key must be provided in the configuration for authentication"
        )
