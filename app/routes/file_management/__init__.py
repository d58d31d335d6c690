"""
File management routes package.

This package provides modular file management routes:
- shared.py: Busy gate and error responses shared by every file operation
- s3_files.py: S3 file browser operations (list, delete, rename)

Blueprints are exported for registration in the main app.
"""
from app.routes.file_management.shared import (
    OperationInProgress,
    busy_gate,
    file_operation,
    is_busy,
)

from app.routes.file_management.s3_files import bp as s3_files_bp

__all__ = [
    # Shared utilities
    'OperationInProgress',
    'busy_gate',
    'file_operation',
    'is_busy',
    # Blueprints
    's3_files_bp',
]
