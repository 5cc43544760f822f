from collections.abc import Callable
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.config.settings import Settings
from app.logging.logger import Log
from app.storage import keys
from app.storage.exceptions import (
    StorageConfigurationError,
    StorageError,
    StorageObjectNotFoundError,
)

_NOT_FOUND_CODES = frozenset({"NoSuchKey", "404", "NotFound"})
_CONTENT_TYPE = "application/pdf"


def build_s3_client(settings: Settings) -> Any:
    """Create an S3 client for the configured R2 endpoint.

    Raises:
        StorageConfigurationError: if the endpoint or credentials are missing.
    """
    endpoint = settings.r2_endpoint or (
        f"https://{settings.r2_account_id}.r2.cloudflarestorage.com"
        if settings.r2_account_id
        else ""
    )
    if not endpoint or not settings.r2_access_key_id or not settings.r2_secret_access_key:
        raise StorageConfigurationError(
            "Object storage credentials are not configured. "
            "Set R2_ENDPOINT, R2_ACCESS_KEY_ID and R2_SECRET_ACCESS_KEY"
        )
    Log.info(f"Object storage endpoint {endpoint}, bucket {settings.r2_bucket}")
    return boto3.client(
        "s3",
        endpoint_url=endpoint,
        region_name="auto",
        aws_access_key_id=settings.r2_access_key_id,
        aws_secret_access_key=settings.r2_secret_access_key,
        config=Config(s3={"addressing_style": "path"}),
    )


def _is_not_found(exc: ClientError) -> bool:
    return str(exc.response.get("Error", {}).get("Code", "")) in _NOT_FOUND_CODES


class StorageRouter:
    """Moves PDF artifacts between the original, processed, sent and company folders.

    The processed folder is the source of truth. Sent and company copies are
    mirrors, so their reads fall back to the processed object.
    """

    def __init__(
        self,
        client: Any,
        bucket: str,
        file_name_factory: Callable[[], str] = keys.new_file_name,
    ) -> None:
        self._client = client
        self._bucket = bucket
        self._file_name_factory = file_name_factory

    def write_original(self, pdf_bytes: bytes) -> str:
        key = keys.original_key(self._file_name_factory())
        self._put(key, pdf_bytes)
        return key

    def write_processed(self, pdf_bytes: bytes, user_scope: str) -> str:
        key = keys.processed_key(user_scope, self._file_name_factory())
        self._put(key, pdf_bytes)
        return key

    def copy_to_sent(self, processed_key: str) -> str:
        key = keys.sent_key(processed_key)
        self._put(key, self.read_processed(processed_key))
        return key

    def copy_to_company(self, processed_key: str, company_name: str) -> str:
        key = keys.company_key(processed_key, company_name)
        self._put(key, self.read_processed(processed_key))
        return key

    def read_original(self, key: str) -> bytes:
        return self._get(key)

    def read_processed(self, key: str) -> bytes:
        return self._get(key)

    def read_sent(self, processed_key: str) -> bytes:
        return self._read_mirror(keys.sent_key(processed_key), processed_key)

    def read_company(self, processed_key: str, company_name: str) -> bytes:
        return self._read_mirror(keys.company_key(processed_key, company_name), processed_key)

    def delete_file(self, key: str) -> None:
        """Delete an object; a missing object counts as deleted."""
        try:
            self._client.delete_object(Bucket=self._bucket, Key=key)
        except ClientError as exc:
            if _is_not_found(exc):
                Log.debug(f"Delete of missing object {key} ignored")
                return
            raise StorageError(f"Delete failed for {key}: {exc}") from exc
        except BotoCoreError as exc:
            raise StorageError(f"Delete failed for {key}: {exc}") from exc
        Log.info(f"Deleted {key}")

    def _read_mirror(self, mirror_key: str, processed_key: str) -> bytes:
        try:
            return self._get(mirror_key)
        except StorageObjectNotFoundError:
            Log.warning(f"{mirror_key} not found, falling back to {processed_key}")
            return self.read_processed(processed_key)

    def _put(self, key: str, body: bytes) -> None:
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=body,
                ContentType=_CONTENT_TYPE,
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageError(f"Upload failed for {key}: {exc}") from exc
        Log.info(f"Uploaded {key} ({len(body)} bytes)")

    def _get(self, key: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
            return response["Body"].read()
        except ClientError as exc:
            if _is_not_found(exc):
                raise StorageObjectNotFoundError(f"Object not found: {key}") from exc
            raise StorageError(f"Download failed for {key}: {exc}") from exc
        except BotoCoreError as exc:
            raise StorageError(f"Download failed for {key}: {exc}") from exc
