"""
Protocols (Interfaces) for Dependency Inversion.

Resolver, disambiguator and transfer depend on this interface only,
never on the HTTP client directly.
"""
from typing import List, Optional, Protocol, runtime_checkable

from .models import ChunkOutcome, FolderHandle, RemoteFile


@runtime_checkable
class IRemoteStore(Protocol):
    """Interface for hierarchical cloud storage operations."""

    async def list_entries(
        self,
        parent_id: str,
        name: Optional[str] = None,
        folder_only: bool = False,
    ) -> List[FolderHandle]:
        """List entries under a parent, optionally filtered by exact name."""
        ...

    async def create_folder(self, name: str, parent_id: str) -> FolderHandle:
        """Create folder."""
        ...

    async def create_file_simple(
        self,
        name: str,
        parent_id: str,
        content_type: str,
        data: bytes,
    ) -> RemoteFile:
        """Create a file in one request."""
        ...

    async def begin_resumable_session(
        self,
        name: str,
        parent_id: str,
        content_type: str,
        total_size: int,
    ) -> str:
        """Start a resumable session and return its endpoint."""
        ...

    async def send_chunk(
        self,
        endpoint: str,
        start: int,
        end: int,
        total_size: int,
        data: bytes,
    ) -> ChunkOutcome:
        """Send bytes [start, end] (inclusive) of a resumable session."""
        ...
