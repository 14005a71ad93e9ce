"""
Models for driveuploader module.

Immutable dataclasses following Single Responsibility Principle.
"""
import mimetypes
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional, Tuple

from .errors import ValidationError

KB = 1024
MB = 1024 * KB
GB = 1024 * MB

# Resumable sessions only accept chunks aligned to 256 KiB (except the last one)
CHUNK_ALIGNMENT = 256 * KB

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class UploadStatus(Enum):
    """Upload operation status."""
    SUCCESS = "success"
    FAILED = "failed"


class ChunkStatus(Enum):
    """Remote answer to a single chunk send."""
    CONTINUE = "continue"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass(frozen=True)
class FolderHandle:
    """Remote folder identifier plus the name it was resolved under."""
    id: str
    name: str


@dataclass(frozen=True)
class RemoteFile:
    """Entry created by a one-shot upload."""
    id: str
    name: str
    size: Optional[int] = None


@dataclass(frozen=True)
class ChunkOutcome:
    """Immutable result of one chunk send."""
    kind: ChunkStatus
    file_id: Optional[str] = None
    status_code: Optional[int] = None

    @classmethod
    def proceed(cls, status_code: int = 308):
        return cls(kind=ChunkStatus.CONTINUE, status_code=status_code)

    @classmethod
    def complete(cls, file_id: str, status_code: int = 200):
        return cls(kind=ChunkStatus.COMPLETE, file_id=file_id, status_code=status_code)

    @classmethod
    def error(cls, status_code: int):
        return cls(kind=ChunkStatus.ERROR, status_code=status_code)


@dataclass(frozen=True)
class LogicalPath:
    """Ordered folder names, relative to the configured root folder."""
    segments: Tuple[str, ...] = ()

    def __iter__(self):
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __str__(self) -> str:
        return "/".join(self.segments)

    @staticmethod
    def platform_segment(platform: str) -> str:
        """Folder name used for a platform key ("of" -> "OF", "instagram" -> "Instagram")."""
        if platform == "of":
            return "OF"
        return platform[:1].upper() + platform[1:]

    @classmethod
    def for_upload(
        cls,
        model_name: str,
        platform: str,
        category: str,
        title: Optional[str] = None,
    ) -> "LogicalPath":
        """
        Build the folder path an upload lands in.

        Layout: <model>/<platform>/<category>[/<script title>][/Not Uploaded]

        Raises:
            ValidationError: model, platform or category is missing
        """
        model_name = (model_name or "").strip()
        category = (category or "").strip()
        if not model_name or not platform or not category:
            raise ValidationError("Missing required folder path parameters")

        segments = [model_name, cls.platform_segment(platform), category]

        if category == "Scripts" and title and title.strip():
            segments.append(title.strip())

        if platform == "of" and category in ("Feed Posts", "Stories"):
            segments.append("Not Uploaded")

        return cls(tuple(segments))


@dataclass(frozen=True)
class IncomingFile:
    """File received from a client, held fully in memory."""
    name: str
    data: bytes
    size: int
    content_type: str = DEFAULT_CONTENT_TYPE

    @classmethod
    def from_bytes(cls, name: str, data: bytes, content_type: Optional[str] = None):
        if not content_type:
            content_type, _ = mimetypes.guess_type(name)
        return cls(
            name=name,
            data=data,
            size=len(data),
            content_type=content_type or DEFAULT_CONTENT_TYPE,
        )

    @classmethod
    def from_path(cls, path: Path, content_type: Optional[str] = None):
        path = Path(path)
        return cls.from_bytes(path.name, path.read_bytes(), content_type)


@dataclass(frozen=True)
class UploadOutcome:
    """Immutable result of uploading one file."""
    file_name: str
    original_name: str
    status: UploadStatus = UploadStatus.SUCCESS
    file_id: Optional[str] = None
    size: int = 0
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == UploadStatus.SUCCESS

    @property
    def renamed(self) -> bool:
        return self.file_name != self.original_name

    @classmethod
    def ok(cls, file_name: str, original_name: str, file_id: str, size: int):
        return cls(
            file_name=file_name,
            original_name=original_name,
            status=UploadStatus.SUCCESS,
            file_id=file_id,
            size=size,
        )

    @classmethod
    def fail(cls, file_name: str, error: str, original_name: Optional[str] = None, size: int = 0):
        return cls(
            file_name=file_name,
            original_name=original_name or file_name,
            status=UploadStatus.FAILED,
            size=size,
            error=error,
        )

    def to_dict(self) -> dict:
        payload = {
            "success": self.success,
            "fileName": self.file_name,
            "originalName": self.original_name,
            "size": self.size,
        }
        if self.success:
            payload["fileId"] = self.file_id
            payload["renamed"] = self.renamed
        else:
            payload["error"] = self.error
        return payload


_ENV_FIELDS = {
    "root_folder_id": "DRIVE_ROOT_FOLDER_ID",
    "max_file_size": "UPLOAD_MAX_FILE_SIZE",
    "max_total_size": "UPLOAD_MAX_TOTAL_SIZE",
    "max_files": "UPLOAD_MAX_FILES",
    "chunk_size": "UPLOAD_CHUNK_SIZE",
    "simple_upload_threshold": "UPLOAD_SIMPLE_THRESHOLD",
    "transfer_deadline": "UPLOAD_TRANSFER_DEADLINE",
}


@dataclass(frozen=True)
class UploadConfig:
    """Immutable configuration for upload operations."""
    root_folder_id: str = "root"
    max_file_size: int = 2 * GB
    max_total_size: int = 5 * GB
    max_files: int = 500
    chunk_size: int = 8 * MB
    simple_upload_threshold: int = 5 * MB
    max_name_attempts: int = 99
    transfer_deadline: Optional[float] = None  # seconds per file, None = unbounded

    def __post_init__(self):
        if not self.root_folder_id:
            raise ValueError("root_folder_id must not be empty")
        for name in ("max_file_size", "max_total_size", "max_files", "chunk_size", "max_name_attempts"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.simple_upload_threshold < 0:
            raise ValueError("simple_upload_threshold must not be negative")
        if self.chunk_size % CHUNK_ALIGNMENT:
            raise ValueError(f"chunk_size must be a multiple of {CHUNK_ALIGNMENT} bytes")
        if self.transfer_deadline is not None and self.transfer_deadline <= 0:
            raise ValueError("transfer_deadline must be positive")

    def uses_resumable(self, size: int) -> bool:
        """Payloads above the threshold go through a resumable session."""
        return size > self.simple_upload_threshold

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "UploadConfig":
        """Build a config from environment variables; unset ones keep defaults."""
        environ = os.environ if environ is None else environ
        kwargs = {}
        for field_name, env_name in _ENV_FIELDS.items():
            raw = environ.get(env_name)
            if raw is None or not raw.strip():
                continue
            raw = raw.strip()
            if field_name == "root_folder_id":
                kwargs[field_name] = raw
                continue
            try:
                kwargs[field_name] = float(raw) if field_name == "transfer_deadline" else int(raw)
            except ValueError as exc:
                raise ValueError(f"{env_name} must be a number, got {raw!r}") from exc
        return cls(**kwargs)
