"""Tests for the orchestrator facade."""
import httpx
import pytest

from driveuploader import BatchResult, IncomingFile, UploadOrchestrator
from driveuploader.errors import PathResolutionError, RemoteUnavailable, ValidationError
from driveuploader.models import KB


class TestOrchestrator:
    @pytest.mark.asyncio
    async def test_requires_store_or_credentials(self):
        with pytest.raises(ValueError):
            async with UploadOrchestrator():
                pass

    @pytest.mark.asyncio
    async def test_resolve_path_uses_configured_root(self, store, small_config):
        async with UploadOrchestrator(small_config, store=store) as uploader:
            folder_id = await uploader.resolve_path("Amira", "of", "Stories")

        names = []
        current = store.entries[folder_id]
        while True:
            names.append(current.name)
            if current.parent == small_config.root_folder_id:
                break
            current = store.entries[current.parent]
        assert list(reversed(names)) == ["Amira", "OF", "Stories", "Not Uploaded"]

    @pytest.mark.asyncio
    async def test_resolve_then_upload_twice(self, store, small_config):
        async with UploadOrchestrator(small_config, store=store) as uploader:
            first_id = await uploader.resolve_path("Mia", "tiktok", "Scripts", "Intro")
            second_id = await uploader.resolve_path("Mia", "tiktok", "Scripts", "Intro")
            file = IncomingFile.from_bytes("script.txt", b"line one")
            first = await uploader.upload_batch([file], first_id)
            second = await uploader.upload_batch([file], second_id)

        assert first_id == second_id
        assert store.count("create_folder") == 4
        assert isinstance(first, BatchResult)
        assert first.results[0].file_name == "script.txt"
        assert second.results[0].file_name == "script(1).txt"

    @pytest.mark.asyncio
    async def test_resolve_path_validation(self, store):
        async with UploadOrchestrator(store=store) as uploader:
            with pytest.raises(ValidationError):
                await uploader.resolve_path("", "of", "Stories")
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_resolve_path_failure(self, store):
        store.list_error = RemoteUnavailable("down")
        async with UploadOrchestrator(store=store) as uploader:
            with pytest.raises(PathResolutionError):
                await uploader.resolve_path("Amira", "of", "PPV")

    @pytest.mark.asyncio
    async def test_batch_over_total_limit_produces_no_outcomes(self, store, small_config):
        files = [IncomingFile.from_bytes(f"{i}.bin", b"x" * (1536 * KB)) for i in range(3)]
        async with UploadOrchestrator(small_config, store=store) as uploader:
            with pytest.raises(ValidationError, match="Total upload size"):
                await uploader.upload_batch(files, "folder")
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_list_models(self, store):
        store.add_folder("Noya")
        store.add_folder("_templates")
        store.add_folder("Amira")
        async with UploadOrchestrator(store=store) as uploader:
            assert await uploader.list_models() == ["Amira", "Noya"]

    @pytest.mark.asyncio
    async def test_builds_drive_client_from_token(self, monkeypatch):
        calls = []

        class RecordingClient(httpx.AsyncClient):
            def __init__(self, *args, **kwargs):
                kwargs["transport"] = httpx.MockTransport(
                    lambda request: httpx.Response(200, json={"files": [{"id": "1", "name": "Amira"}]})
                )
                super().__init__(*args, **kwargs)

            async def aclose(self):
                calls.append("closed")
                await super().aclose()

        monkeypatch.setattr("driveuploader.services.drive_client.httpx.AsyncClient", RecordingClient)

        async with UploadOrchestrator(access_token="abc") as uploader:
            assert await uploader.list_models() == ["Amira"]

        assert calls == ["closed"]
