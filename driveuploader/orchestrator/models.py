"""Orchestrator data models."""
from dataclasses import dataclass
from typing import List

from ..models import UploadOutcome
from ..utils.formatting import format_file_size


@dataclass
class BatchResult:
    """Result of a batch upload. results[i] belongs to the i-th input file."""
    success: bool
    folder_id: str
    total_files: int
    uploaded_files: int
    failed_files: int
    results: List[UploadOutcome]
    total_size: int = 0

    @classmethod
    def from_outcomes(cls, folder_id: str, outcomes: List[UploadOutcome], total_size: int):
        failed = sum(1 for outcome in outcomes if not outcome.success)
        return cls(
            success=failed == 0,
            folder_id=folder_id,
            total_files=len(outcomes),
            uploaded_files=len(outcomes) - failed,
            failed_files=failed,
            results=list(outcomes),
            total_size=total_size,
        )

    @property
    def all_success(self) -> bool:
        return self.failed_files == 0

    @property
    def message(self) -> str:
        if self.all_success:
            return (
                f"All {self.uploaded_files} files ({format_file_size(self.total_size)}) "
                f"uploaded successfully!"
            )
        return f"{self.uploaded_files} uploaded, {self.failed_files} failed"

    @property
    def summary(self) -> dict:
        return {
            "total": self.total_files,
            "successful": self.uploaded_files,
            "failed": self.failed_files,
            "totalSize": format_file_size(self.total_size),
        }

    def to_dict(self) -> dict:
        """Response body handed back to the request layer."""
        return {
            "success": self.success,
            "results": [outcome.to_dict() for outcome in self.results],
            "summary": self.summary,
            "message": self.message,
        }
