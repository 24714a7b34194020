"""Tests for the S3-compatible object storage service."""

import io
import re
from unittest.mock import MagicMock

import pytest
from anyio import to_thread
from botocore.exceptions import ClientError, EndpointConnectionError

from compliance_ai.infrastructure.storage import ObjectStorageService
from compliance_ai.modules.common.exceptions import StorageUnavailableError


def client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def s3_client():
    client = MagicMock()
    client.generate_presigned_url.side_effect = (
        lambda operation, Params, ExpiresIn: f"http://minio.test/{Params['Bucket']}/{Params['Key']}?X-Amz-Expires={ExpiresIn}"
    )
    return client


@pytest.fixture
def storage_service(test_settings, s3_client):
    return ObjectStorageService(test_settings, client=s3_client)


def test_generate_stored_name_keeps_only_extension():
    """Test stored names are random and never contain the original name."""
    first = ObjectStorageService.generate_stored_name("Rapport d'audit 2024.PDF")
    second = ObjectStorageService.generate_stored_name("Rapport d'audit 2024.PDF")

    assert re.fullmatch(r"[0-9a-f]{32}\.pdf", first)
    assert first != second
    assert re.fullmatch(r"[0-9a-f]{32}", ObjectStorageService.generate_stored_name("README"))


async def test_store_uploads_under_generated_name(storage_service, s3_client, test_settings):
    """Test the object is put under its generated key with the original name as metadata."""
    stored_name = await storage_service.store(b"%PDF", "contrat fournisseur.pdf", "application/pdf")

    s3_client.put_object.assert_called_once()
    kwargs = s3_client.put_object.call_args.kwargs
    assert kwargs["Bucket"] == test_settings.S3_BUCKET_NAME
    assert kwargs["Key"] == stored_name
    assert kwargs["Body"] == b"%PDF"
    assert kwargs["ContentType"] == "application/pdf"
    assert kwargs["Metadata"] == {"original-name": "contrat%20fournisseur.pdf"}


async def test_boto_calls_run_in_anyio_worker_threads(storage_service, s3_client, monkeypatch):
    """Test blocking boto calls go through anyio, so the startup thread limiter applies to them."""
    dispatched = []
    real_run_sync = to_thread.run_sync

    async def recording_run_sync(func, *args, **kwargs):
        dispatched.append(func)
        return await real_run_sync(func, *args, **kwargs)

    monkeypatch.setattr(to_thread, "run_sync", recording_run_sync)

    await storage_service.store(b"%PDF", "report.pdf", "application/pdf")
    await storage_service.locate("abc.pdf")

    assert len(dispatched) == 2
    s3_client.put_object.assert_called_once()


async def test_store_failure_raises_storage_unavailable(storage_service, s3_client):
    """Test boto errors surface as StorageUnavailableError."""
    s3_client.put_object.side_effect = EndpointConnectionError(endpoint_url="http://minio.test")

    with pytest.raises(StorageUnavailableError):
        await storage_service.store(b"%PDF", "report.pdf", "application/pdf")


async def test_locate_returns_presigned_url(storage_service, test_settings):
    """Test locate presigns a GET with the configured expiration."""
    url = await storage_service.locate("abc.pdf")

    assert url == (
        f"http://minio.test/{test_settings.S3_BUCKET_NAME}/abc.pdf?X-Amz-Expires={test_settings.S3_URL_EXPIRATION}"
    )


async def test_fetch_bytes_reads_object_behind_url(storage_service, s3_client, test_settings):
    """Test the stored name is recovered from a presigned URL and read back."""
    s3_client.get_object.return_value = {"Body": io.BytesIO(b"file content")}
    url = await storage_service.locate("abc.pdf")

    content = await storage_service.fetch_bytes(url)

    assert content == b"file content"
    s3_client.get_object.assert_called_once_with(Bucket=test_settings.S3_BUCKET_NAME, Key="abc.pdf")


async def test_fetch_bytes_missing_object(storage_service, s3_client):
    """Test a missing object is reported as a storage failure."""
    s3_client.get_object.side_effect = client_error("NoSuchKey", "GetObject")

    with pytest.raises(StorageUnavailableError):
        await storage_service.fetch_bytes("http://minio.test/documents/gone.pdf")


def test_stored_name_from_url_rejects_empty_path():
    """Test URLs without an object key are rejected."""
    with pytest.raises(StorageUnavailableError):
        ObjectStorageService.stored_name_from_url("http://minio.test/")


async def test_ensure_bucket_creates_missing_bucket(storage_service, s3_client, test_settings):
    """Test a missing bucket is created."""
    s3_client.head_bucket.side_effect = client_error("404", "HeadBucket")

    await storage_service.ensure_bucket()

    s3_client.create_bucket.assert_called_once_with(Bucket=test_settings.S3_BUCKET_NAME)


async def test_ensure_bucket_leaves_existing_bucket(storage_service, s3_client):
    """Test nothing is created when the bucket exists."""
    await storage_service.ensure_bucket()

    s3_client.create_bucket.assert_not_called()


async def test_ensure_bucket_access_denied(storage_service, s3_client):
    """Test errors other than not-found are raised."""
    s3_client.head_bucket.side_effect = client_error("403", "HeadBucket")

    with pytest.raises(StorageUnavailableError):
        await storage_service.ensure_bucket()
    s3_client.create_bucket.assert_not_called()
