"""Human-readable sizes for logs and batch messages."""

_UNITS = ["Bytes", "KB", "MB", "GB", "TB"]


def format_file_size(num_bytes: int) -> str:
    """
    Format a byte count with 1024-based units.

    Examples:
        0 -> "0 Bytes", 1536 -> "1.5 KB", 5 * 1024**3 -> "5 GB"
    """
    if not num_bytes or num_bytes <= 0:
        return "0 Bytes"
    index = 0
    while num_bytes >= 1024 ** (index + 1) and index < len(_UNITS) - 1:
        index += 1
    value = round(num_bytes / (1024 ** index), 2)
    return f"{value:g} {_UNITS[index]}"
