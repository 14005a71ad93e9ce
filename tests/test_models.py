"""Tests for driveuploader models."""
import pytest

from driveuploader.errors import ValidationError
from driveuploader.models import (
    GB,
    KB,
    MB,
    ChunkOutcome,
    ChunkStatus,
    IncomingFile,
    LogicalPath,
    UploadConfig,
    UploadOutcome,
    UploadStatus,
)
from driveuploader.orchestrator.models import BatchResult
from driveuploader.utils.formatting import format_file_size


class TestLogicalPath:
    def test_basic_layout(self):
        path = LogicalPath.for_upload(" Amira ", "instagram", " Reels ")
        assert path.segments == ("Amira", "Instagram", "Reels")
        assert str(path) == "Amira/Instagram/Reels"
        assert len(path) == 3

    def test_of_platform_is_upper_cased(self):
        path = LogicalPath.for_upload("Noya", "of", "PPV")
        assert path.segments == ("Noya", "OF", "PPV")

    @pytest.mark.parametrize("category", ["Feed Posts", "Stories"])
    def test_of_feed_and_stories_get_not_uploaded_folder(self, category):
        path = LogicalPath.for_upload("Mia", "of", category)
        assert path.segments == ("Mia", "OF", category, "Not Uploaded")

    def test_not_uploaded_only_for_of(self):
        path = LogicalPath.for_upload("Mia", "instagram", "Stories")
        assert path.segments == ("Mia", "Instagram", "Stories")

    def test_scripts_title_appended(self):
        path = LogicalPath.for_upload("Thalia", "tiktok", "Scripts", "  Morning routine ")
        assert path.segments == ("Thalia", "Tiktok", "Scripts", "Morning routine")

    def test_title_ignored_outside_scripts(self):
        path = LogicalPath.for_upload("Thalia", "tiktok", "Reels", "Morning routine")
        assert path.segments == ("Thalia", "Tiktok", "Reels")

    @pytest.mark.parametrize(
        "model,platform,category",
        [
            ("", "of", "PPV"),
            ("Mia", "", "PPV"),
            ("Mia", "of", ""),
            (None, "of", "PPV"),
            ("   ", "of", "PPV"),
            ("Mia", "of", " \t "),
        ],
    )
    def test_missing_parameters(self, model, platform, category):
        with pytest.raises(ValidationError, match="Missing required folder path parameters"):
            LogicalPath.for_upload(model, platform, category)


class TestIncomingFile:
    def test_from_bytes_guesses_content_type(self):
        file = IncomingFile.from_bytes("clip.mp4", b"1234")
        assert file.size == 4
        assert file.content_type == "video/mp4"

    def test_from_bytes_unknown_extension(self):
        file = IncomingFile.from_bytes("blob.zzz-unknown", b"")
        assert file.size == 0
        assert file.content_type == "application/octet-stream"

    def test_explicit_content_type_wins(self):
        file = IncomingFile.from_bytes("notes.txt", b"hi", content_type="text/markdown")
        assert file.content_type == "text/markdown"

    def test_from_path(self, tmp_path):
        source = tmp_path / "report.pdf"
        source.write_bytes(b"%PDF-1.4")
        file = IncomingFile.from_path(source)
        assert file.name == "report.pdf"
        assert file.data == b"%PDF-1.4"
        assert file.content_type == "application/pdf"


class TestUploadOutcome:
    def test_ok(self):
        outcome = UploadOutcome.ok("report(1).pdf", "report.pdf", "file-1", 10)
        assert outcome.success is True
        assert outcome.renamed is True
        assert outcome.to_dict() == {
            "success": True,
            "fileName": "report(1).pdf",
            "originalName": "report.pdf",
            "size": 10,
            "fileId": "file-1",
            "renamed": True,
        }

    def test_fail(self):
        outcome = UploadOutcome.fail("clip.mp4", "Chunk upload failed: 500", size=5)
        assert outcome.status == UploadStatus.FAILED
        assert outcome.success is False
        assert outcome.file_id is None
        assert outcome.original_name == "clip.mp4"
        assert outcome.to_dict()["error"] == "Chunk upload failed: 500"


class TestChunkOutcome:
    def test_constructors(self):
        assert ChunkOutcome.proceed().kind is ChunkStatus.CONTINUE
        assert ChunkOutcome.proceed().status_code == 308
        done = ChunkOutcome.complete("abc", 201)
        assert (done.kind, done.file_id, done.status_code) == (ChunkStatus.COMPLETE, "abc", 201)
        assert ChunkOutcome.error(503).kind is ChunkStatus.ERROR


class TestUploadConfig:
    def test_defaults(self):
        config = UploadConfig()
        assert config.max_file_size == 2 * GB
        assert config.max_total_size == 5 * GB
        assert config.max_files == 500
        assert config.chunk_size == 8 * MB
        assert config.simple_upload_threshold == 5 * MB

    def test_threshold_is_inclusive_for_simple_upload(self):
        config = UploadConfig()
        assert config.uses_resumable(5 * MB) is False
        assert config.uses_resumable(5 * MB + 1) is True

    def test_chunk_size_must_be_aligned(self):
        with pytest.raises(ValueError, match="multiple"):
            UploadConfig(chunk_size=100 * KB)

    def test_limits_must_be_positive(self):
        with pytest.raises(ValueError, match="max_files"):
            UploadConfig(max_files=0)

    def test_from_env(self):
        config = UploadConfig.from_env(
            {
                "DRIVE_ROOT_FOLDER_ID": "root-123",
                "UPLOAD_MAX_FILES": "10",
                "UPLOAD_CHUNK_SIZE": str(512 * KB),
                "UPLOAD_TRANSFER_DEADLINE": "30.5",
                "UPLOAD_MAX_TOTAL_SIZE": "",
            }
        )
        assert config.root_folder_id == "root-123"
        assert config.max_files == 10
        assert config.chunk_size == 512 * KB
        assert config.transfer_deadline == 30.5
        assert config.max_total_size == 5 * GB

    def test_from_env_rejects_garbage(self):
        with pytest.raises(ValueError, match="UPLOAD_MAX_FILES"):
            UploadConfig.from_env({"UPLOAD_MAX_FILES": "many"})


class TestBatchResult:
    def test_counts_and_message(self):
        outcomes = [
            UploadOutcome.ok("a.jpg", "a.jpg", "1", 10),
            UploadOutcome.fail("b.jpg", "boom"),
        ]
        result = BatchResult.from_outcomes("folder", outcomes, total_size=20)
        assert result.success is False
        assert (result.total_files, result.uploaded_files, result.failed_files) == (2, 1, 1)
        assert result.message == "1 uploaded, 1 failed"
        assert result.summary == {"total": 2, "successful": 1, "failed": 1, "totalSize": "20 Bytes"}

    def test_all_success_message(self):
        outcomes = [UploadOutcome.ok("a.jpg", "a.jpg", "1", 1536)]
        result = BatchResult.from_outcomes("folder", outcomes, total_size=1536)
        assert result.all_success is True
        assert result.message == "All 1 files (1.5 KB) uploaded successfully!"
        assert result.to_dict()["results"][0]["fileId"] == "1"


@pytest.mark.parametrize(
    "size,expected",
    [
        (0, "0 Bytes"),
        (512, "512 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (8 * MB, "8 MB"),
        (2 * GB, "2 GB"),
        (5 * GB + 256 * MB, "5.25 GB"),
    ],
)
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected
