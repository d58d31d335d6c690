"""
Shared state and utilities for file management routes.
"""
import threading
from contextlib import contextmanager
from functools import wraps

from flask import jsonify, current_app

from app.services.s3_service import (
    S3Error, ConnectivityError, AuthorizationError, RenameError
)
from app.utils.validators import ValidationError


# ============================================================================
# BUSY GATE
# ============================================================================

# One operation at a time across list/upload/delete/rename
_busy_lock = threading.Lock()


class OperationInProgress(Exception):
    """Another file operation is still running."""
    pass


@contextmanager
def busy_gate():
    """Hold the shared busy flag; fail immediately if it is already held."""
    if not _busy_lock.acquire(blocking=False):
        raise OperationInProgress("Another file operation is in progress")
    try:
        yield
    finally:
        _busy_lock.release()


def is_busy() -> bool:
    return _busy_lock.locked()


# ============================================================================
# ERROR RESPONSES
# ============================================================================

def error_status(error: Exception) -> int:
    """HTTP status for an exception raised by a file operation."""
    if isinstance(error, RenameError) and error.cause is not None:
        return error_status(error.cause)
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, AuthorizationError):
        return 403
    if isinstance(error, OperationInProgress):
        return 409
    if isinstance(error, ConnectivityError):
        return 502
    return 500


def file_operation(action: str):
    """
    Run a route under the busy gate and turn failures into JSON errors.

    Args:
        action: Human label used in log lines, e.g. 'Delete S3 file'
    """
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                with busy_gate():
                    return view(*args, **kwargs)
            except (ValidationError, OperationInProgress) as e:
                current_app.logger.warning(f"{action} rejected: {e}")
                return jsonify({'error': str(e)}), error_status(e)
            except S3Error as e:
                current_app.logger.error(f"{action} error: {e}", exc_info=True)
                return jsonify({'error': str(e)}), error_status(e)
        return wrapper
    return decorator
