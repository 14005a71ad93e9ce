"""
Transfer Service - moves one file's bytes into the remote store.

Small payloads are created in a single request. Larger ones go through a
resumable session:

    INITIATING --session--> TRANSFERRING --complete--> COMPLETED
         |                    |  ^   |
         |                    +--+   +--error/deadline--> FAILED
         +--init error--------------------------------> FAILED

Only one chunk is in flight at a time and a failed chunk fails the whole
file; the session exists to bound request size, not to retry.
"""
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import (
    ChunkUploadError,
    RemoteStoreError,
    SessionInitError,
    TransferDeadlineExceeded,
)
from ..models import ChunkStatus, IncomingFile, UploadConfig, UploadOutcome
from ..protocols import IRemoteStore
from ..utils.formatting import format_file_size

logger = logging.getLogger(__name__)


class TransferState(Enum):
    INITIATING = "initiating"
    TRANSFERRING = "transferring"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class TransferSession:
    """Mutable state of one resumable transfer. Never reused across files."""
    total_size: int
    chunk_size: int
    endpoint: Optional[str] = None
    bytes_sent: int = 0
    chunks_sent: int = 0
    state: TransferState = TransferState.INITIATING
    file_id: Optional[str] = None

    def next_window(self):
        """(start, end_exclusive) of the next chunk."""
        start = self.bytes_sent
        return start, min(start + self.chunk_size, self.total_size)


class ChunkedTransfer:
    """Upload a single file via one-shot create or a resumable session."""

    def __init__(self, store: IRemoteStore, config: Optional[UploadConfig] = None):
        self._store = store
        self._config = config or UploadConfig()

    async def execute(
        self,
        file: IncomingFile,
        folder_id: str,
        file_name: str,
        deadline: Optional[float] = None,
    ) -> UploadOutcome:
        """
        Upload file into folder_id under file_name.

        Args:
            file: Payload to upload
            folder_id: Target folder
            file_name: Already disambiguated name
            deadline: time.monotonic() instant after which no further chunk is sent

        Returns:
            Successful UploadOutcome

        Raises:
            SessionInitError, ChunkUploadError, RemoteStoreError
        """
        if deadline is None and self._config.transfer_deadline is not None:
            deadline = time.monotonic() + self._config.transfer_deadline

        if not self._config.uses_resumable(file.size):
            logger.info(f"Using simple upload for small file: {file_name}")
            return await self._simple_upload(file, folder_id, file_name)

        logger.info(f"Using resumable upload for large file: {file_name}")
        return await self._resumable_upload(file, folder_id, file_name, deadline)

    async def _simple_upload(self, file: IncomingFile, folder_id: str, file_name: str) -> UploadOutcome:
        created = await self._store.create_file_simple(
            file_name, folder_id, file.content_type, file.data
        )
        logger.info(f"Successfully uploaded (simple): {file_name}")
        return UploadOutcome.ok(
            file_name=file_name,
            original_name=file.name,
            file_id=created.id,
            size=file.size,
        )

    async def _resumable_upload(
        self,
        file: IncomingFile,
        folder_id: str,
        file_name: str,
        deadline: Optional[float],
    ) -> UploadOutcome:
        session = TransferSession(total_size=file.size, chunk_size=self._config.chunk_size)

        try:
            session.endpoint = await self._store.begin_resumable_session(
                file_name, folder_id, file.content_type, file.size
            )
        except SessionInitError:
            session.state = TransferState.FAILED
            raise
        except RemoteStoreError as exc:
            session.state = TransferState.FAILED
            raise SessionInitError(f"Failed to initialize resumable upload: {exc}") from exc

        session.state = TransferState.TRANSFERRING
        logger.info(f"Resumable upload session started for: {file_name}")

        while session.state is TransferState.TRANSFERRING and session.bytes_sent < session.total_size:
            if deadline is not None and time.monotonic() > deadline:
                session.state = TransferState.FAILED
                raise TransferDeadlineExceeded(
                    f"Transfer deadline exceeded after {format_file_size(session.bytes_sent)} "
                    f"of {format_file_size(session.total_size)}"
                )

            start, end = session.next_window()
            logger.debug(f"Uploading chunk: {start}-{end - 1}/{session.total_size} for {file_name}")

            outcome = await self._store.send_chunk(
                session.endpoint, start, end - 1, session.total_size, file.data[start:end]
            )
            session.chunks_sent += 1

            if outcome.kind is ChunkStatus.CONTINUE:
                session.bytes_sent = end
            elif outcome.kind is ChunkStatus.COMPLETE:
                session.bytes_sent = end
                session.file_id = outcome.file_id
                session.state = TransferState.COMPLETED
            else:
                session.state = TransferState.FAILED
                raise ChunkUploadError(
                    f"Chunk upload failed: {outcome.status_code}", outcome.status_code
                )

        if session.state is not TransferState.COMPLETED:
            session.state = TransferState.FAILED
            raise ChunkUploadError(
                f"Upload session for {file_name} ended without completion "
                f"after {session.chunks_sent} chunks"
            )

        logger.info(f"Successfully uploaded (resumable): {file_name} in {session.chunks_sent} chunks")
        return UploadOutcome.ok(
            file_name=file_name,
            original_name=file.name,
            file_id=session.file_id,
            size=file.size,
        )
