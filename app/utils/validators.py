"""
Validation utilities for file uploads and inputs.
"""
from typing import Optional


class ValidationError(Exception):
    """Validation error exception."""
    pass


MAX_S3_KEY_LENGTH = 1024


def validate_new_name(new_name: Optional[str]) -> str:
    """
    Validate the target name of a rename.

    Args:
        new_name: Name typed by the user, without prefix

    Returns:
        The name with surrounding whitespace stripped

    Raises:
        ValidationError if blank
    """
    if new_name is None:
        new_name = ''
    if not isinstance(new_name, str):
        raise ValidationError("New name must be a string")
    name = new_name.strip()
    if not name:
        raise ValidationError("Enter a new name")
    return name


def validate_s3_key(s3_key: str) -> bool:
    """
    Validate S3 key format.

    Args:
        s3_key: S3 key to validate

    Returns:
        True if valid

    Raises:
        ValidationError if invalid
    """
    if not s3_key:
        raise ValidationError("S3 key cannot be empty")

    if len(s3_key.encode('utf-8')) > MAX_S3_KEY_LENGTH:
        raise ValidationError(f"S3 key exceeds maximum length ({MAX_S3_KEY_LENGTH} bytes)")

    return True


def validate_managed_key(s3_key: str, prefix: str) -> bool:
    """
    Validate that a key belongs to the managed folder.

    Raises:
        ValidationError if the key is outside the prefix
    """
    validate_s3_key(s3_key)
    if not s3_key.startswith(prefix) or s3_key == prefix:
        raise ValidationError(f"Key must be a file under '{prefix}'")
    return True
