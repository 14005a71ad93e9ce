"""Batch upload handler - validates a batch, then uploads files one by one."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..errors import ValidationError, describe_exception
from ..models import IncomingFile, UploadConfig, UploadOutcome
from ..protocols import IRemoteStore
from ..services.naming import NameDisambiguator
from ..services.transfer import ChunkedTransfer
from ..utils.formatting import format_file_size
from .models import BatchResult

logger = logging.getLogger(__name__)


class BatchUploadHandler:
    """
    Uploads a batch of in-memory files into one folder.

    Files are processed strictly in input order and never concurrently:
    every payload is already resident, so one transfer at a time keeps
    peak memory at a single file's working set.
    """

    def __init__(
        self,
        store: IRemoteStore,
        config: Optional[UploadConfig] = None,
        disambiguator: Optional[NameDisambiguator] = None,
        transfer: Optional[ChunkedTransfer] = None,
    ):
        self._config = config or UploadConfig()
        self._disambiguator = disambiguator or NameDisambiguator(
            store, max_attempts=self._config.max_name_attempts
        )
        self._transfer = transfer or ChunkedTransfer(store, self._config)

    def validate(self, files: Sequence[IncomingFile], folder_id: Optional[str]) -> int:
        """
        Check batch preconditions.

        Returns:
            Aggregate declared size of the batch

        Raises:
            ValidationError: on the first violated limit
        """
        config = self._config

        if not folder_id:
            raise ValidationError("Target folder ID required")

        if not files:
            raise ValidationError("No files provided")

        if len(files) > config.max_files:
            raise ValidationError(f"Too many files. Maximum is {config.max_files} files")

        for file in files:
            if file.size > config.max_file_size:
                raise ValidationError(
                    f"File too large: {file.name} ({format_file_size(file.size)}). "
                    f"Maximum size is {format_file_size(config.max_file_size)}"
                )

        total_size = sum(file.size for file in files)
        if total_size > config.max_total_size:
            raise ValidationError(
                f"Total upload size ({format_file_size(total_size)}) exceeds limit of "
                f"{format_file_size(config.max_total_size)}"
            )
        return total_size

    async def upload_batch(self, files: Sequence[IncomingFile], folder_id: str) -> BatchResult:
        total_size = self.validate(files, folder_id)

        logger.info(
            "Starting chunked upload of %d files (%s) to folder %s",
            len(files),
            format_file_size(total_size),
            folder_id,
        )

        outcomes: List[UploadOutcome] = []
        for file in files:
            outcomes.append(await self._upload_one(file, folder_id))

        result = BatchResult.from_outcomes(folder_id, outcomes, total_size)
        logger.info("Batch finished: %s", result.message)
        return result

    async def _upload_one(self, file: IncomingFile, folder_id: str) -> UploadOutcome:
        logger.info("Starting upload: %s (%s)", file.name, format_file_size(file.size))
        file_name = file.name

        try:
            file_name = await self._disambiguator.unique_name(file.name, folder_id)
            if file_name != file.name:
                logger.info("Renamed file: %s -> %s", file.name, file_name)
            return await self._transfer.execute(file, folder_id, file_name)
        except Exception as exc:
            error_msg = describe_exception(exc)
            logger.error(
                "Failed to upload %s: %s",
                file.name,
                error_msg,
                exc_info=True,
            )
            return UploadOutcome.fail(
                file_name, error_msg, original_name=file.name, size=file.size
            )
