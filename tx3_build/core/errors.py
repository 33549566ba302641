"""Exception hierarchy shared by the generation pipeline and the TRP client."""
from typing import Any, Optional, Sequence


class Tx3Error(Exception):
    """Base class for every error raised by tx3_build."""


class ConfigurationError(Tx3Error):
    """Plugin options cannot produce a usable generation run (e.g. no input files)."""


class GenerationError(Tx3Error):
    """The binding generator could not be started or exited with a non-zero status."""

    def __init__(self, message: str, command: Sequence[str], returncode: Optional[int] = None):
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode


class TrpError(Tx3Error):
    """Base class for resolver failures."""


class TrpTransportError(TrpError):
    """The resolver answered with a non-2xx HTTP status."""

    def __init__(self, status_code: int, reason: str):
        super().__init__(f"Failed to resolve transaction: {status_code} {reason}".rstrip())
        self.status_code = status_code
        self.reason = reason


class TrpProtocolError(TrpError):
    """The resolver returned a JSON-RPC error object or an unusable body."""

    def __init__(self, message: str, data: Any = None, code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = data

    @property
    def cause(self) -> Any:
        return self.data
