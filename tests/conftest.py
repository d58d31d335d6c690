"""Shared fixtures: an in-memory S3 client and a Flask app wired to it."""
from datetime import datetime, timezone

import pytest
from botocore.exceptions import ClientError

from app import create_app
from app.services.s3_service import S3Service, StoreConfig

FIXED_NOW = 1699000000.5
FIXED_NOW_MS = 1699000000500


def client_error(code, operation, message='failed'):
    return ClientError({'Error': {'Code': code, 'Message': message}}, operation)


class FakeS3Client:
    """
    Minimal stand-in for boto3's S3 client covering the four operations the
    file manager uses. Failures are injected per method name.
    """

    def __init__(self, bucket='test-bucket', page_size=1000):
        self.bucket = bucket
        self.page_size = page_size
        self.objects = {}
        self.failures = {}
        self.calls = []

    def add(self, key, body=b'data', content_type='application/octet-stream'):
        self.objects[key] = {
            'Body': body,
            'ContentType': content_type,
            'LastModified': datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        }

    def _call(self, name, **kwargs):
        self.calls.append((name, kwargs))
        if name in self.failures:
            raise self.failures[name]
        if kwargs.get('Bucket') != self.bucket:
            raise client_error('NoSuchBucket', name, 'The specified bucket does not exist')

    def call_names(self):
        return [name for name, _ in self.calls]

    def list_objects_v2(self, Bucket, Prefix='', ContinuationToken=None, **kwargs):
        self._call('list_objects_v2', Bucket=Bucket, Prefix=Prefix, ContinuationToken=ContinuationToken)
        keys = sorted(key for key in self.objects if key.startswith(Prefix))
        start = int(ContinuationToken or 0)
        page = keys[start:start + self.page_size]
        response = {
            'KeyCount': len(page),
            'IsTruncated': start + self.page_size < len(keys),
        }
        if page:
            response['Contents'] = [
                {
                    'Key': key,
                    'Size': len(self.objects[key]['Body']),
                    'LastModified': self.objects[key]['LastModified'],
                    'ETag': '"etag"',
                }
                for key in page
            ]
        if response['IsTruncated']:
            response['NextContinuationToken'] = str(start + self.page_size)
        return response

    def put_object(self, Bucket, Key, Body, ContentType=None, **kwargs):
        self._call('put_object', Bucket=Bucket, Key=Key, ContentType=ContentType)
        self.add(Key, body=bytes(Body), content_type=ContentType)
        return {'ETag': '"etag"'}

    def delete_object(self, Bucket, Key, **kwargs):
        self._call('delete_object', Bucket=Bucket, Key=Key)
        self.objects.pop(Key, None)
        return {}

    def copy_object(self, Bucket, CopySource, Key, **kwargs):
        self._call('copy_object', Bucket=Bucket, CopySource=CopySource, Key=Key)
        source = self.objects.get(CopySource['Key'])
        if source is None:
            raise client_error('NoSuchKey', 'CopyObject', 'The specified key does not exist.')
        self.objects[Key] = dict(source)
        return {'CopyObjectResult': {'ETag': '"etag"'}}


@pytest.fixture
def fake_s3():
    return FakeS3Client()


@pytest.fixture
def store_config():
    return StoreConfig(bucket_name='test-bucket', region='us-east-1')


@pytest.fixture
def s3_service(store_config, fake_s3):
    return S3Service(store_config, s3_client=fake_s3, clock=lambda: FIXED_NOW)


@pytest.fixture
def app(fake_s3):
    return create_app('testing', s3_client=fake_s3)


@pytest.fixture
def client(app):
    return app.test_client()
