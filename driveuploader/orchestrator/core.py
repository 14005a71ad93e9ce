"""Core orchestrator - entry point used by the request layer."""
from typing import List, Optional, Sequence

from ..models import IncomingFile, LogicalPath, UploadConfig
from ..protocols import IRemoteStore
from ..services.drive_client import DriveClient, TokenProvider
from ..services.folders import PathResolver, list_model_names
from .batch_upload import BatchUploadHandler
from .models import BatchResult


class UploadOrchestrator:
    """
    Resolves destination folders and uploads batches using injected services.

    Usage:
        async with UploadOrchestrator(config, access_token=token) as uploader:
            folder_id = await uploader.resolve_path("Amira", "of", "Stories")
            result = await uploader.upload_batch(files, folder_id)

        # With a pre-built store (tests, alternative backends)
        async with UploadOrchestrator(config, store=fake_store) as uploader:
            ...
    """

    def __init__(
        self,
        config: Optional[UploadConfig] = None,
        access_token: Optional[str] = None,
        token_provider: Optional[TokenProvider] = None,
        store: Optional[IRemoteStore] = None,
    ):
        """
        Initialize orchestrator with dependencies.

        Args:
            config: Upload configuration (root folder, limits, chunk size)
            access_token: Bearer token for the Drive API
            token_provider: Callable returning a fresh bearer token
            store: Pre-built remote store; skips DriveClient creation
        """
        self._config = config or UploadConfig()
        self._access_token = access_token
        self._token_provider = token_provider
        self._external_store = store

        # Initialized in __aenter__
        self._client: Optional[DriveClient] = None
        self._store: Optional[IRemoteStore] = None
        self._resolver: Optional[PathResolver] = None
        self._batch_handler: Optional[BatchUploadHandler] = None

    @property
    def config(self) -> UploadConfig:
        return self._config

    async def __aenter__(self):
        """Initialize store and handlers."""
        if self._external_store is not None:
            self._store = self._external_store
        elif self._access_token or self._token_provider:
            self._client = DriveClient(
                access_token=self._access_token,
                token_provider=self._token_provider,
            )
            await self._client.__aenter__()
            self._store = self._client
        else:
            raise ValueError("Either access_token, token_provider or store must be provided")

        self._resolver = PathResolver(self._store)
        self._batch_handler = BatchUploadHandler(self._store, self._config)
        return self

    async def __aexit__(self, *args):
        """Cleanup resources."""
        if self._client:
            await self._client.__aexit__(*args)
            self._client = None

    async def resolve_path(
        self,
        model_name: str,
        platform: str,
        category: str,
        title: Optional[str] = None,
    ) -> str:
        """Get or create <model>/<platform>/<category>[...] and return its folder id."""
        assert self._resolver is not None
        path = LogicalPath.for_upload(model_name, platform, category, title)
        folder = await self._resolver.resolve(path, self._config.root_folder_id)
        return folder.id

    async def upload_batch(self, files: Sequence[IncomingFile], folder_id: str) -> BatchResult:
        """Upload files into folder_id, one at a time."""
        assert self._batch_handler is not None
        return await self._batch_handler.upload_batch(files, folder_id)

    async def list_models(self) -> List[str]:
        """Model folders available under the root folder."""
        assert self._store is not None
        return await list_model_names(self._store, self._config.root_folder_id)
