import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TypeVar

# Enhanced type definitions for improved type safety and clarity
BasicAuthType = TypeVar("BasicAuthType", bound="Basic")
KeyAuthType = TypeVar("KeyAuthType", bound="Key")
Username = str
Password = str
KeyPath = str
Passphrase = str


@dataclass
class Basic:
    """
    Password authentication for an SSH session.

    The SSH server checks the username and password during the user
    authentication phase. The password travels inside the encrypted
    transport, so unlike FTP it is never visible on the wire, but it is
    still a shared secret that has to be stored somewhere by the caller.

    Attributes:
        user: Username for authentication.
              Must name an account on the remote server.
        password: Password for that account.
                  Should be kept secure and rotated regularly.
    """

    user: Username
    password: Password

    def __post_init__(self) -> None:
        """
        Validate password credentials.

        Blank values are rejected outright. Short or common passwords are
        accepted but produce a warning, since the server decides what it
        allows and we should not second-guess it.

        Returns:
            None

        Raises:
            ValueError: If the username or password is empty or whitespace.
        """
        if not self.user.strip():
            raise ValueError("Username cannot be empty or whitespace")

        if not self.password.strip():
            raise ValueError("Password cannot be empty or whitespace")

        # Security warnings for potentially weak credentials
        if len(self.password) < 8:
            warnings.warn(
                "Password is shorter than 8 characters. "
                "Consider using a stronger password or key authentication."
            )

        if self.password.lower() in ["password", "123456", "admin", "root"]:
            warnings.warn(
                "Password appears to be a common weak password. "
                "Use a strong, unique password for better security."
            )

    def options(self) -> dict:
        """Keyword arguments for ``paramiko.SSHClient.connect``."""
        return {"username": self.user, "password": self.password}


@dataclass
class Key:
    """
    Private key authentication for an SSH session.

    The key file is read by paramiko when the session is opened. Encrypted
    keys need the passphrase; unencrypted keys leave it as None.

    Attributes:
        user: Username for authentication.
        path: Path to the private key file (OpenSSH or PEM format).
        passphrase: Passphrase protecting the key, if it is encrypted.
    """

    user: Username
    path: KeyPath
    passphrase: Optional[Passphrase] = None

    def __post_init__(self) -> None:
        """
        Validate key credentials.

        Returns:
            None

        Raises:
            ValueError: If the username or key path is blank, or the key
                        path does not point at a file.
        """
        if not self.user.strip():
            raise ValueError("Username cannot be empty or whitespace")

        if not self.path.strip():
            raise ValueError("Private key path cannot be empty or whitespace")

        location = Path(self.path).expanduser()
        if not location.exists():
            raise ValueError(f"Private key file not found: {self.path}")
        if not location.is_file():
            raise ValueError(f"Private key path is not a file: {self.path}")

        # An empty passphrase means the same thing as no passphrase
        if self.passphrase is not None and not self.passphrase:
            self.passphrase = None

    def options(self) -> dict:
        """Keyword arguments for ``paramiko.SSHClient.connect``."""
        return {
            "username": self.user,
            "key_filename": str(Path(self.path).expanduser()),
            "passphrase": self.passphrase,
        }
