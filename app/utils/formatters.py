"""
Formatting utilities for display.
"""
from datetime import datetime
from typing import Optional


def format_timestamp(timestamp: Optional[str]) -> str:
    """
    Format ISO timestamp to a human-readable UTC string.

    Args:
        timestamp: ISO format timestamp string

    Returns:
        Formatted timestamp string, 'N/A' when missing
    """
    if not timestamp:
        return 'N/A'

    try:
        dt = datetime.fromisoformat(timestamp.replace('Z', '+00:00'))
        return dt.strftime('%Y-%m-%d %H:%M:%S')
    except (ValueError, AttributeError):
        # If parsing fails, return original
        return str(timestamp)


def format_file_size(size_bytes: Optional[int]) -> str:
    """
    Format file size in bytes to human-readable string.

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB")
    """
    if size_bytes is None:
        return 'N/A'
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    else:
        return f"{size_bytes / (1024 * 1024 * 1024):.2f} GB"
