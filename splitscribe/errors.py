"""Error taxonomy for the splitscribe tools.

Every error carries the process exit status the CLI reports for it. Core
functions raise these; only the entry points in ``splitscribe.cli`` turn them
into exit codes.
"""
from typing import Optional


class SplitScribeError(Exception):
    """Base class for all expected failures."""
    exit_code = 1


class NotFoundError(SplitScribeError):
    """An input file does not exist."""


class DirectoryNotFoundError(NotFoundError):
    """An input directory does not exist."""


class ToolNotFoundError(SplitScribeError):
    """A required external binary is not installed."""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint


class ExternalProcessFailedError(SplitScribeError):
    """An external tool exited with a nonzero status."""

    def __init__(self, message: str, returncode: int):
        super().__init__(message)
        self.returncode = returncode


class SegmentationFailedError(ExternalProcessFailedError):
    """ffmpeg failed while cutting an audio file into segments."""


class NoMatchingFilesError(SplitScribeError):
    """The combiner filter matched no files."""


class RemoteCallFailedError(SplitScribeError):
    """A network or API call to the transcription service failed."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class InvalidArgumentError(SplitScribeError):
    """Malformed command-line input."""


class MissingCredentialError(SplitScribeError):
    """The transcription API key is not configured."""
