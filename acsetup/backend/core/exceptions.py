"""
Exceptions raised by the backend.

Every fatal condition is a SetupError carrying the process exit code; the CLI
frontend catches them and decides how to terminate.
"""


class SetupError(Exception):
    """Base class for errors that end the setup run."""
    exit_code = 1

    def __init__(self, message: str = "", exit_code: int = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code


class PreconditionError(SetupError):
    """Root user, unsupported distribution, missing package or Steam."""


class UserAbortError(SetupError):
    """The user declined a step that is required to continue."""


class BackupConflictError(SetupError):
    """A previous config backup exists and the user refused to delete it."""
    exit_code = 2


class PrefixNotGeneratedError(SetupError):
    """The Wine prefix has not been generated by a first launch yet."""


class CommandFailedError(SetupError):
    """An external command exited with a non-zero status."""

    def __init__(self, result):
        super().__init__(f"Command '{result.command_line}' failed with exit code {result.returncode}")
        self.result = result


class DownloadError(SetupError):
    """A download could not be completed."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Download failed for {url}: {reason}")
        self.url = url
        self.reason = reason
