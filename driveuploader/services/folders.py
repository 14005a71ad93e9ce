"""
Path Resolver - Single Responsibility: turn a logical path into a folder id.

Folders missing along the way are created. Nothing is cached between
calls, so every resolution looks the hierarchy up fresh.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Tuple

from ..errors import PathResolutionError, RemoteStoreError
from ..models import FolderHandle, LogicalPath
from ..protocols import IRemoteStore

logger = logging.getLogger(__name__)


class PathResolver:
    """
    Get-or-create resolution of folder paths.

    The remote store offers no create-if-absent primitive, so lookups and
    creates are check-then-act. Inside this process each find-or-create
    step is serialized per (parent, name), so concurrent paths sharing a
    prefix create that prefix once. Callers in other processes can
    still race and produce same-named sibling folders.
    """

    def __init__(self, store: IRemoteStore):
        self._store = store
        # (parent_id, name) -> [lock, holders and waiters]; dropped once unused
        self._locks: Dict[Tuple[str, str], list] = {}

    @asynccontextmanager
    async def _segment_lock(self, parent_id: str, name: str) -> AsyncIterator[None]:
        key = (parent_id, name)
        entry = self._locks.get(key)
        if entry is None:
            entry = self._locks[key] = [asyncio.Lock(), 0]
        entry[1] += 1
        try:
            async with entry[0]:
                yield
        finally:
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[key]

    async def resolve(self, path: LogicalPath, root_id: str) -> FolderHandle:
        """
        Resolve path under root_id, creating missing folders.

        Args:
            path: Ordered folder names
            root_id: Identifier of the folder the path starts from

        Returns:
            Handle of the last segment's folder (the root itself for an empty path)

        Raises:
            PathResolutionError: a lookup or create failed; folders created
                before the failure are left in place
        """
        return await self._walk(path, root_id)

    async def _walk(self, path: LogicalPath, root_id: str) -> FolderHandle:
        current = FolderHandle(id=root_id, name="")

        for segment in path:
            logger.debug(f"Looking for folder: {segment} (parent: {current.id})")
            try:
                async with self._segment_lock(current.id, segment):
                    current = await self._get_or_create(current.id, segment)
            except RemoteStoreError as exc:
                raise PathResolutionError(
                    f"Could not resolve folder {segment!r} in /{path}: {exc}",
                    segment=segment,
                ) from exc

        logger.info(f"Folder structure created/verified: /{path} (id: {current.id})")
        return current

    async def _get_or_create(self, parent_id: str, segment: str) -> FolderHandle:
        existing = await self._find_folder(parent_id, segment)
        if existing:
            logger.debug(f"Found existing folder: {segment} (id: {existing.id})")
            return existing

        logger.info(f"Creating folder: {segment} in parent (id: {parent_id})")
        created = await self._store.create_folder(segment, parent_id)
        logger.info(f"Folder created successfully: {segment} (id: {created.id})")
        return created

    async def _find_folder(self, parent_id: str, name: str):
        matches: List[FolderHandle] = await self._store.list_entries(
            parent_id, name, folder_only=True
        )
        # Remote name filters are exact, but stay strict about case and whitespace
        for folder in matches:
            if folder.name == name:
                return folder
        return None


async def list_model_names(store: IRemoteStore, root_id: str) -> List[str]:
    """Folder names directly under root, skipping hidden ("." / "_") folders."""
    folders = await store.list_entries(root_id, folder_only=True)
    names = (folder.name.strip() for folder in folders)
    return sorted(name for name in names if name and not name.startswith((".", "_")))
