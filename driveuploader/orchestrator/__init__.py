"""Orchestrator package - coordinates path resolution and batch uploads."""
from .batch_upload import BatchUploadHandler
from .core import UploadOrchestrator
from .models import BatchResult

__all__ = ["UploadOrchestrator", "BatchUploadHandler", "BatchResult"]
