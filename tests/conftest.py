"""Shared fixtures: an in-memory remote store."""
import asyncio
import itertools
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pytest

from driveuploader.errors import SessionInitError
from driveuploader.models import KB, ChunkOutcome, FolderHandle, RemoteFile, UploadConfig


@dataclass
class FakeEntry:
    id: str
    name: str
    parent: str
    is_folder: bool
    data: bytes = b""


@dataclass
class FakeSession:
    name: str
    parent: str
    total_size: int
    received: bytearray = field(default_factory=bytearray)


class FakeDriveStore:
    """
    In-memory IRemoteStore.

    Every call is appended to `calls` as (operation, *args) so tests can
    count round trips.
    """

    def __init__(self, root_id: str = "root"):
        self.root_id = root_id
        self.entries: Dict[str, FakeEntry] = {}
        self.sessions: Dict[str, FakeSession] = {}
        self.calls: List[tuple] = []
        self.chunk_failures: Dict[str, int] = {}
        self.session_failures: Dict[str, int] = {}
        self.list_error: Optional[Exception] = None
        self.create_folder_error: Optional[Exception] = None
        self._ids = itertools.count(1)

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    def add_folder(self, name: str, parent: Optional[str] = None) -> str:
        entry = FakeEntry(self._next_id("folder"), name, parent or self.root_id, True)
        self.entries[entry.id] = entry
        return entry.id

    def add_file(self, name: str, parent: str, data: bytes = b"") -> str:
        entry = FakeEntry(self._next_id("file"), name, parent, False, data)
        self.entries[entry.id] = entry
        return entry.id

    def children(self, parent: str) -> List[FakeEntry]:
        return [entry for entry in self.entries.values() if entry.parent == parent]

    def names_in(self, parent: str) -> List[str]:
        return [entry.name for entry in self.children(parent)]

    def count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call[0] == operation)

    async def list_entries(self, parent_id, name=None, folder_only=False):
        self.calls.append(("list", parent_id, name, folder_only))
        # yield like a real round trip so concurrent resolutions interleave
        await asyncio.sleep(0)
        if self.list_error is not None:
            raise self.list_error
        return [
            FolderHandle(id=entry.id, name=entry.name)
            for entry in self.children(parent_id)
            if (name is None or entry.name == name) and (not folder_only or entry.is_folder)
        ]

    async def create_folder(self, name, parent_id):
        self.calls.append(("create_folder", name, parent_id))
        await asyncio.sleep(0)
        if self.create_folder_error is not None:
            raise self.create_folder_error
        folder_id = self.add_folder(name, parent_id)
        return FolderHandle(id=folder_id, name=name)

    async def create_file_simple(self, name, parent_id, content_type, data):
        self.calls.append(("create_file_simple", name, parent_id, content_type, len(data)))
        file_id = self.add_file(name, parent_id, bytes(data))
        return RemoteFile(id=file_id, name=name, size=len(data))

    async def begin_resumable_session(self, name, parent_id, content_type, total_size):
        self.calls.append(("begin_session", name, parent_id, content_type, total_size))
        if name in self.session_failures:
            status = self.session_failures[name]
            raise SessionInitError(f"Failed to initialize resumable upload: {status}", status)
        endpoint = f"https://upload.example/session/{next(self._ids)}"
        self.sessions[endpoint] = FakeSession(name, parent_id, total_size)
        return endpoint

    async def send_chunk(self, endpoint, start, end, total_size, data):
        self.calls.append(("send_chunk", endpoint, start, end, total_size, len(data)))
        session = self.sessions[endpoint]
        assert start == len(session.received), "chunks must be contiguous"
        assert end - start + 1 == len(data)
        assert total_size == session.total_size

        if session.name in self.chunk_failures:
            return ChunkOutcome.error(self.chunk_failures[session.name])

        session.received.extend(data)
        if len(session.received) < session.total_size:
            return ChunkOutcome.proceed()

        file_id = self.add_file(session.name, session.parent, bytes(session.received))
        return ChunkOutcome.complete(file_id, 200)


@pytest.fixture
def store():
    return FakeDriveStore()


@pytest.fixture
def small_config():
    """Chunk size of 256 KB; anything above 1 KB goes through a session."""
    return UploadConfig(
        root_folder_id="root",
        chunk_size=256 * KB,
        simple_upload_threshold=1 * KB,
        max_file_size=2 * 1024 * KB,
        max_total_size=4 * 1024 * KB,
        max_files=5,
    )
