"""HTTP adapter for Google Drive v3 file operations."""
from __future__ import annotations

import inspect
import json
import logging
import uuid
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

import httpx

from ..errors import (
    RemoteAuthError,
    RemoteStoreError,
    RemoteUnavailable,
    SessionInitError,
)
from ..models import ChunkOutcome, FolderHandle, RemoteFile

logger = logging.getLogger(__name__)

DRIVE_API_BASE = "https://www.googleapis.com/drive/v3"
DRIVE_UPLOAD_BASE = "https://www.googleapis.com/upload/drive/v3"
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"

RESUME_INCOMPLETE = 308
COMPLETE_STATUSES = (200, 201)
AUTH_STATUSES = (401, 403)

TokenProvider = Callable[[], Union[str, Awaitable[str]]]


def escape_query_value(value: str) -> str:
    """Escape a literal for use inside a single-quoted Drive query string."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def _error_detail(response: httpx.Response) -> Any:
    try:
        return response.json()
    except Exception:
        return response.text


class DriveClient:
    """
    HTTP client adapter for Drive calls.

    Implements IRemoteStore protocol.

    Usage:
        async with DriveClient(access_token=token) as drive:
            folders = await drive.list_entries(root_id, "Amira", folder_only=True)
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        token_provider: Optional[TokenProvider] = None,
        timeout: int = 60,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        api_base: str = DRIVE_API_BASE,
        upload_base: str = DRIVE_UPLOAD_BASE,
    ):
        if not access_token and token_provider is None:
            raise ValueError("Either access_token or token_provider must be provided")
        self._access_token = access_token
        self._token_provider = token_provider
        self._timeout = timeout
        self._transport = transport
        self._api_base = api_base.rstrip("/")
        self._upload_base = upload_base.rstrip("/")
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self

    async def __aexit__(self, *args):
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _auth_headers(self) -> Dict[str, str]:
        token = self._access_token
        if self._token_provider is not None:
            token = self._token_provider()
            if inspect.isawaitable(token):
                token = await token
        return {"Authorization": f"Bearer {token}"}

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        if not self._client:
            raise RuntimeError("DriveClient not initialized. Use 'async with' context.")

        headers = dict(kwargs.pop("headers", None) or {})
        headers.update(await self._auth_headers())

        try:
            return await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.RequestError as exc:
            raise RemoteUnavailable(f"{method} {url} failed: {exc}") from exc

    def _raise_for_status(self, response: httpx.Response, action: str) -> None:
        status = response.status_code
        if status < 400:
            return
        detail = _error_detail(response)
        if status in AUTH_STATUSES:
            raise RemoteAuthError(f"Drive rejected credentials on {action}: {detail}", status)
        raise RemoteStoreError(f"Drive error {status} on {action}: {detail}", status)

    async def list_entries(
        self,
        parent_id: str,
        name: Optional[str] = None,
        folder_only: bool = False,
    ) -> List[FolderHandle]:
        clauses = [f"'{escape_query_value(parent_id)}' in parents", "trashed=false"]
        if name is not None:
            clauses.insert(0, f"name='{escape_query_value(name)}'")
        if folder_only:
            clauses.append(f"mimeType='{FOLDER_MIME_TYPE}'")

        params = {"q": " and ".join(clauses), "fields": "files(id, name)"}
        if name is None:
            params["orderBy"] = "name"

        response = await self._request("GET", f"{self._api_base}/files", params=params)
        self._raise_for_status(response, "list files")

        files = response.json().get("files", [])
        return [FolderHandle(id=item["id"], name=item.get("name", "")) for item in files]

    async def create_folder(self, name: str, parent_id: str) -> FolderHandle:
        body = {"name": name, "mimeType": FOLDER_MIME_TYPE, "parents": [parent_id]}
        response = await self._request(
            "POST",
            f"{self._api_base}/files",
            params={"fields": "id, name"},
            json=body,
        )
        self._raise_for_status(response, f"create folder {name!r}")

        data = response.json()
        return FolderHandle(id=data["id"], name=data.get("name", name))

    async def create_file_simple(
        self,
        name: str,
        parent_id: str,
        content_type: str,
        data: bytes,
    ) -> RemoteFile:
        boundary = f"driveuploader-{uuid.uuid4().hex}"
        metadata = json.dumps({"name": name, "parents": [parent_id]})
        body = b"".join(
            [
                f"--{boundary}\r\n".encode(),
                b"Content-Type: application/json; charset=UTF-8\r\n\r\n",
                metadata.encode("utf-8"),
                f"\r\n--{boundary}\r\n".encode(),
                f"Content-Type: {content_type}\r\n\r\n".encode(),
                data,
                f"\r\n--{boundary}--\r\n".encode(),
            ]
        )

        response = await self._request(
            "POST",
            f"{self._upload_base}/files",
            params={"uploadType": "multipart", "fields": "id, name, size"},
            headers={"Content-Type": f"multipart/related; boundary={boundary}"},
            content=body,
        )
        self._raise_for_status(response, f"upload {name!r}")

        result = response.json()
        size = result.get("size")
        return RemoteFile(
            id=result["id"],
            name=result.get("name", name),
            size=int(size) if size is not None else len(data),
        )

    async def begin_resumable_session(
        self,
        name: str,
        parent_id: str,
        content_type: str,
        total_size: int,
    ) -> str:
        try:
            response = await self._request(
                "POST",
                f"{self._upload_base}/files",
                params={"uploadType": "resumable"},
                headers={
                    "X-Upload-Content-Type": content_type,
                    "X-Upload-Content-Length": str(total_size),
                },
                json={"name": name, "parents": [parent_id]},
            )
        except RemoteUnavailable as exc:
            raise SessionInitError(f"Failed to initialize resumable upload: {exc}") from exc

        if not response.is_success:
            raise SessionInitError(
                f"Failed to initialize resumable upload: {response.status_code}",
                response.status_code,
            )

        location = response.headers.get("location")
        if not location:
            raise SessionInitError(
                "Failed to initialize resumable upload: no session location returned",
                response.status_code,
            )
        return location

    async def send_chunk(
        self,
        endpoint: str,
        start: int,
        end: int,
        total_size: int,
        data: bytes,
    ) -> ChunkOutcome:
        # Session URLs carry their own authorization
        if not self._client:
            raise RuntimeError("DriveClient not initialized. Use 'async with' context.")

        headers = {
            "Content-Range": f"bytes {start}-{end}/{total_size}",
            "Content-Length": str(len(data)),
        }
        try:
            response = await self._client.put(endpoint, headers=headers, content=data)
        except httpx.RequestError as exc:
            raise RemoteUnavailable(f"PUT chunk {start}-{end}/{total_size} failed: {exc}") from exc

        if response.status_code == RESUME_INCOMPLETE:
            return ChunkOutcome.proceed(response.status_code)

        if response.status_code in COMPLETE_STATUSES:
            try:
                file_id = response.json()["id"]
            except (ValueError, KeyError):
                logger.error(f"Completed session returned no file id: {response.text!r}")
                return ChunkOutcome.error(response.status_code)
            return ChunkOutcome.complete(file_id, response.status_code)

        logger.debug(f"Chunk {start}-{end}/{total_size} rejected: {_error_detail(response)}")
        return ChunkOutcome.error(response.status_code)
