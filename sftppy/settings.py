import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import paramiko


@dataclass
class HostKeys:
    """
    Host key verification settings for SSH connections.

    SSH authenticates the server by its host key. With verification on,
    the key the server presents must already be listed in a known_hosts
    file, otherwise the connection is refused. Turning verification off
    accepts whatever key the server offers, which is convenient for
    throwaway test servers and dangerous everywhere else.

    Attributes:
        verify: Whether unknown host keys are rejected.
               When False, connections are vulnerable to man-in-the-middle attacks
               but may be necessary for development servers with fresh keys.
        known: Path to a known_hosts file to trust in addition to the
               system one. Useful for pinned keys kept next to the application.
    """

    verify: bool = True  # Whether unknown host keys are rejected
    known: Optional[str] = None  # Extra known_hosts file to load

    def __post_init__(self) -> None:
        """
        Validate host key settings after initialization.

        Returns:
            None

        Raises:
            ValueError: If the known_hosts path is set but is not a readable file.
        """
        if self.known:
            path = Path(self.known).expanduser()
            if not path.exists():
                raise ValueError(f"Known hosts file not found: {self.known}")
            if not path.is_file():
                raise ValueError(f"Known hosts path is not a file: {self.known}")

        # Security warning for disabled host key verification
        if not self.verify:
            warnings.warn(
                "SSH host key verification is disabled. "
                "This makes connections vulnerable to man-in-the-middle attacks. "
                "Only use this setting in development or trusted network environments.",
                UserWarning,
                stacklevel=3,
            )

    def apply(self, client: paramiko.SSHClient) -> None:
        """Load trusted keys into an SSH client and set its missing key policy.

        Args:
            client: The not yet connected paramiko client to configure
        """
        if self.verify:
            client.load_system_host_keys()
        if self.known:
            client.load_host_keys(str(Path(self.known).expanduser()))

        policy = paramiko.RejectPolicy() if self.verify else paramiko.AutoAddPolicy()
        client.set_missing_host_key_policy(policy)
