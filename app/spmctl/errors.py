"""Exception hierarchy for spmctl.

Every error raised by the fetcher, the install backend or the operation
gate derives from SpmError. None of them is fatal: the reconciler catches
each one at its boundary, logs it, and keeps the last consistent catalog.
"""


class SpmError(Exception):
    """Base exception for all spmctl errors."""


class NetworkError(SpmError):
    """Raised when the remote manifest cannot be fetched."""


class ParseError(SpmError):
    """Raised when the manifest body is not a valid package manifest."""


class BackendError(SpmError):
    """Raised when the install backend reports a failed list or add.

    Attributes:
        message: Error message reported by the backend.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class OperationTimeoutError(SpmError):
    """Raised when an operation exceeds its timeout budget."""


class ConcurrencyRejectedError(SpmError):
    """Raised when an operation is requested while another is in flight."""


class ConfigError(SpmError):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the configuration file cannot be parsed."""
