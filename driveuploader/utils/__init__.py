"""Small helpers shared across driveuploader."""
from .formatting import format_file_size

__all__ = ["format_file_size"]
