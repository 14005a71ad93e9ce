"""Exception taxonomy for upload orchestration."""
from typing import Optional


class UploaderError(Exception):
    """Base class for every error raised by driveuploader."""


class RemoteStoreError(UploaderError):
    """Remote store rejected or could not serve a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RemoteUnavailable(RemoteStoreError):
    """Transport failure talking to the remote store."""


class RemoteAuthError(RemoteStoreError):
    """Credentials were rejected by the remote store."""


class PathResolutionError(UploaderError):
    """A folder along a logical path could not be found or created."""

    def __init__(self, message: str, segment: Optional[str] = None):
        super().__init__(message)
        self.segment = segment


class SessionInitError(UploaderError):
    """Resumable upload session could not be started."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ChunkUploadError(UploaderError):
    """A chunk send returned neither continue nor complete."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TransferDeadlineExceeded(ChunkUploadError):
    """Transfer deadline passed between two chunk sends."""


class ValidationError(UploaderError):
    """Batch-level precondition violated; nothing was uploaded."""


def describe_exception(exc: BaseException) -> str:
    message = str(exc).strip()
    if message:
        return message
    return f"{type(exc).__name__}: {repr(exc)}"
