"""
driveuploader - Upload orchestration into a Google Drive folder hierarchy.

Usage:
    from driveuploader import UploadOrchestrator, UploadConfig, IncomingFile

    config = UploadConfig.from_env()
    async with UploadOrchestrator(config, access_token=token) as uploader:
        # <root>/Amira/OF/Stories/Not Uploaded
        folder_id = await uploader.resolve_path("Amira", "of", "Stories")

        files = [IncomingFile.from_path(path) for path in paths]
        result = await uploader.upload_batch(files, folder_id)
        print(result.message)
"""
from .errors import (
    ChunkUploadError,
    PathResolutionError,
    RemoteAuthError,
    RemoteStoreError,
    RemoteUnavailable,
    SessionInitError,
    TransferDeadlineExceeded,
    UploaderError,
    ValidationError,
)
from .models import (
    FolderHandle,
    IncomingFile,
    LogicalPath,
    UploadConfig,
    UploadOutcome,
    UploadStatus,
)
from .orchestrator import BatchResult, UploadOrchestrator
from .services import DriveClient

__version__ = "0.1.0"
__all__ = [
    # Main
    "UploadOrchestrator",
    "BatchResult",
    "DriveClient",
    # Models
    "FolderHandle",
    "IncomingFile",
    "LogicalPath",
    "UploadConfig",
    "UploadOutcome",
    "UploadStatus",
    # Errors
    "UploaderError",
    "RemoteStoreError",
    "RemoteUnavailable",
    "RemoteAuthError",
    "PathResolutionError",
    "SessionInitError",
    "ChunkUploadError",
    "TransferDeadlineExceeded",
    "ValidationError",
]
