"""Services for driveuploader module."""
from .drive_client import DriveClient
from .folders import PathResolver, list_model_names
from .naming import NameDisambiguator, split_name
from .transfer import ChunkedTransfer, TransferSession, TransferState

__all__ = [
    "DriveClient",
    "PathResolver",
    "list_model_names",
    "NameDisambiguator",
    "split_name",
    "ChunkedTransfer",
    "TransferSession",
    "TransferState",
]
