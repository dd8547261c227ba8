class SftpError(Exception):
    """
    Base exception for errors raised by SftpPy itself.

    Failures coming from the SSH transport or the remote server are not
    wrapped in this hierarchy. They propagate as the ``OSError`` or
    ``paramiko.SSHException`` the session layer raised, so callers can tell
    a bad call apart from a server that said no.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigurationError(SftpError, ValueError):
    """
    Raised when a session cannot be built from the configuration.

    The usual cause is a configuration with neither a password nor a
    private key path. This is fatal and never retried.
    """


class ArgumentError(SftpError, ValueError):
    """
    Raised when a directory operation gets a path it cannot work with.

    Either a required path is missing or blank, or an upload source is not
    a local directory. Raised before anything touches the network or disk.
    """
