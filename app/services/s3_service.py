"""
AWS S3 service for listing, uploading, deleting and renaming bucket files.
"""
import os
import re
import time
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

import boto3
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    PartialCredentialsError,
    ReadTimeoutError,
)

from app.models import ObjectEntry, PendingUpload
from app.utils.validators import ValidationError, validate_new_name

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = 'uploads/'

AUTH_ERROR_CODES = {
    'AccessDenied',
    'InvalidAccessKeyId',
    'SignatureDoesNotMatch',
    'ExpiredToken',
    'InvalidToken',
    'AllAccessDisabled',
}


class S3Error(Exception):
    """Base exception for S3 errors."""
    pass


class ConnectivityError(S3Error):
    """The store could not be reached."""
    pass


class AuthorizationError(S3Error):
    """Credentials are missing, invalid or not allowed to do this."""
    pass


class UploadError(S3Error):
    pass


class DeleteError(S3Error):
    pass


class RenameError(S3Error):
    """
    Rename failed.

    phase is 'copy' when nothing changed in the bucket, or 'delete' when the
    copy landed and the old key is still there (both keys exist). cause is the
    classified error of the failing step.
    """

    def __init__(self, message: str, old_key: str, new_key: str, phase: str,
                 cause: Optional[S3Error] = None):
        super().__init__(message)
        self.old_key = old_key
        self.new_key = new_key
        self.phase = phase
        self.cause = cause


def _classify(error: Exception, fallback: type, message: str) -> S3Error:
    """Map a botocore failure onto the S3Error family."""
    if isinstance(error, (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError)):
        return ConnectivityError(f"{message}: store unreachable ({error})")
    if isinstance(error, (NoCredentialsError, PartialCredentialsError)):
        return AuthorizationError(f"{message}: {error}")
    if isinstance(error, ClientError):
        code = error.response.get('Error', {}).get('Code', '')
        if code in AUTH_ERROR_CODES:
            return AuthorizationError(f"{message}: {code}")
    return fallback(f"{message}: {error}")


@dataclass
class StoreConfig:
    """Connection settings for one bucket."""
    bucket_name: str
    region: str = 'us-east-1'
    aws_access_key: Optional[str] = None
    aws_secret_key: Optional[str] = None
    prefix: str = DEFAULT_PREFIX
    public_host: Optional[str] = None

    @property
    def store_host(self) -> str:
        return self.public_host or f"s3.{self.region}.amazonaws.com"

    @classmethod
    def from_app_config(cls, config: Dict[str, Any]) -> 'StoreConfig':
        return cls(
            bucket_name=config['S3_BUCKET_NAME'],
            region=config.get('AWS_REGION') or 'us-east-1',
            aws_access_key=config.get('AWS_ACCESS_KEY_ID'),
            aws_secret_key=config.get('AWS_SECRET_ACCESS_KEY'),
            prefix=config.get('S3_PREFIX') or DEFAULT_PREFIX,
            public_host=config.get('S3_PUBLIC_HOST'),
        )


class S3Service:
    """Service for AWS S3 operations on a single bucket."""

    def __init__(self, config: StoreConfig, s3_client=None,
                 clock: Callable[[], float] = time.time):
        """Initialize S3 service."""
        self.config = config
        self.bucket_name = config.bucket_name
        self.region = config.region
        self.clock = clock

        if s3_client is None:
            session_kwargs = {'region_name': config.region}
            if config.aws_access_key and config.aws_secret_key:
                session_kwargs['aws_access_key_id'] = config.aws_access_key
                session_kwargs['aws_secret_access_key'] = config.aws_secret_key
            s3_client = boto3.client('s3', **session_kwargs)

        self.s3_client = s3_client

    def public_url(self, s3_key: str) -> str:
        """Direct object URL, assuming the bucket allows public reads."""
        return f"https://{self.bucket_name}.{self.config.store_host}/{quote(s3_key, safe='/')}"

    def _entry(self, s3_key: str, size: Optional[int], last_modified: Optional[str]) -> ObjectEntry:
        return ObjectEntry(
            key=s3_key,
            size=size,
            last_modified=last_modified,
            prefix=self.config.prefix,
            url=self.public_url(s3_key),
        )

    def list_objects(self, prefix: Optional[str] = None) -> List[ObjectEntry]:
        """
        List every object under a prefix.

        Args:
            prefix: Key prefix (defaults to the configured prefix)

        Returns:
            Entries in the order the store returned them
        """
        if prefix is None:
            prefix = self.config.prefix

        entries = []
        request = {'Bucket': self.bucket_name, 'Prefix': prefix}
        try:
            while True:
                response = self.s3_client.list_objects_v2(**request)
                for obj in response.get('Contents', []):
                    if not obj['Key'].startswith(prefix):
                        continue
                    last_modified = obj.get('LastModified')
                    entries.append(self._entry(
                        obj['Key'],
                        obj.get('Size', 0),
                        last_modified.isoformat() if last_modified is not None else None,
                    ))
                if not response.get('IsTruncated'):
                    break
                request['ContinuationToken'] = response['NextContinuationToken']
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to list s3://{self.bucket_name}/{prefix}: {e}")
            raise _classify(e, S3Error, 'Failed to list files') from e

        logger.info(f"Listed {len(entries)} objects under s3://{self.bucket_name}/{prefix}")
        return entries

    def build_upload_key(self, filename: str, target_prefix: Optional[str] = None,
                         now: Optional[float] = None) -> str:
        """
        Build '<prefix><epoch millis>_<filename>' for a new upload.

        Two uploads of the same name in the same millisecond get the same key.
        """
        if target_prefix is None:
            target_prefix = self.config.prefix
        if now is None:
            now = self.clock()
        # Browsers may send a full client-side path; keep the last component only.
        basename = re.split(r"[\\/]", filename)[-1]
        if not basename:
            raise ValidationError("Filename cannot be empty")
        timestamp_ms = int(now * 1000)
        return f"{target_prefix}{timestamp_ms}_{basename}"

    def upload(self, pending: PendingUpload, target_prefix: Optional[str] = None) -> ObjectEntry:
        """
        Upload a pending file to a timestamped key.

        Args:
            pending: File selected by the user
            target_prefix: Key prefix (defaults to the configured prefix)

        Returns:
            Entry for the created object
        """
        now = self.clock()
        s3_key = self.build_upload_key(pending.filename, target_prefix, now=now)
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=s3_key,
                Body=pending.content,
                ContentType=pending.content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload {pending.filename} to {s3_key}: {e}")
            raise _classify(e, UploadError, 'Failed to upload file') from e

        logger.info(f"Uploaded {pending.filename} -> {s3_key} ({len(pending.content)} bytes)")
        uploaded_at = datetime.fromtimestamp(now, tz=timezone.utc).isoformat()
        return self._entry(s3_key, len(pending.content), uploaded_at)

    def delete(self, s3_key: str) -> bool:
        """
        Delete an object. Absent keys are not reported as errors.

        Args:
            s3_key: S3 key of the file

        Returns:
            True if successful
        """
        try:
            self.s3_client.delete_object(
                Bucket=self.bucket_name,
                Key=s3_key
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete {s3_key}: {e}")
            raise _classify(e, DeleteError, 'Failed to delete file') from e

        logger.info(f"Deleted {s3_key}")
        return True

    def copy(self, source_key: str, dest_key: str) -> bool:
        """Server-side copy within the bucket. Overwrites dest_key."""
        try:
            self.s3_client.copy_object(
                Bucket=self.bucket_name,
                CopySource={'Bucket': self.bucket_name, 'Key': source_key},
                Key=dest_key
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to copy {source_key} to {dest_key}: {e}")
            raise _classify(e, S3Error, 'Failed to copy file') from e

        logger.debug(f"Copied {source_key} -> {dest_key}")
        return True

    def rename(self, old_key: str, new_name: str, new_prefix: Optional[str] = None) -> ObjectEntry:
        """
        Rename an object by copying it to the new key and deleting the old one.

        Not atomic. If the copy fails nothing is deleted. If the delete fails
        the object exists under both keys and RenameError.phase is 'delete'.
        An existing object at the new key is overwritten.

        Renaming a key to its own name returns without calling the store, so
        the returned entry does not prove the object exists.

        Args:
            old_key: Current S3 key
            new_name: New file name, without prefix
            new_prefix: Key prefix for the new name (defaults to the configured prefix)

        Returns:
            Entry for the new key
        """
        if new_prefix is None:
            new_prefix = self.config.prefix
        new_key = f"{new_prefix}{validate_new_name(new_name)}"

        if new_key == old_key:
            return self._entry(old_key, None, None)

        try:
            self.copy(old_key, new_key)
        except S3Error as e:
            raise RenameError(f"Failed to rename file: {e}", old_key, new_key,
                              phase='copy', cause=e) from e

        try:
            self.delete(old_key)
        except S3Error as e:
            logger.error(
                f"Rename left a duplicate: {new_key} was written but {old_key} "
                f"could not be deleted ({e})"
            )
            raise RenameError(f"Failed to rename file: {e}", old_key, new_key,
                              phase='delete', cause=e) from e

        logger.info(f"Renamed {old_key} -> {new_key}")
        return self._entry(new_key, None, None)


def get_s3_service(app=None, s3_client=None) -> S3Service:
    """
    Factory function to create S3Service instance.

    Args:
        app: Flask app instance (optional)
        s3_client: Preconfigured boto3 client (optional)

    Returns:
        S3Service instance
    """
    if app:
        config = StoreConfig.from_app_config(app.config)
        s3_client = s3_client or app.extensions.get('s3_client')
    else:
        config = StoreConfig(
            bucket_name=os.getenv('S3_BUCKET_NAME'),
            region=os.getenv('AWS_REGION', 'us-east-1'),
            aws_access_key=os.getenv('AWS_ACCESS_KEY_ID'),
            aws_secret_key=os.getenv('AWS_SECRET_ACCESS_KEY'),
            prefix=os.getenv('S3_PREFIX', DEFAULT_PREFIX),
            public_host=os.getenv('S3_PUBLIC_HOST'),
        )

    return S3Service(config, s3_client=s3_client)
