import logging
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import quote

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from sitecms.domain.exceptions import Conflict, StorageError
from .base import StorageGateway

logger = logging.getLogger(__name__)

# DeleteObjects accepts at most 1000 keys per request.
_DELETE_CHUNK = 1000
_TIMEOUT_ERRORS = (ConnectTimeoutError, ReadTimeoutError, EndpointConnectionError)


class S3Storage(StorageGateway):
    provider_type = "s3"

    def __init__(
        self,
        *,
        bucket: str,
        region: Optional[str] = None,
        public_base_url: Optional[str] = None,
        timeout_seconds: float = 30,
        client: Any = None,
    ):
        super().__init__(bucket=bucket, public_base_url=public_base_url)
        if not bucket:
            raise RuntimeError("s3 bucket is required")
        self.region = region or ""
        # No automatic retries: callers decide whether to retry.
        config = Config(
            connect_timeout=timeout_seconds,
            read_timeout=timeout_seconds,
            retries={"max_attempts": 1, "mode": "standard"},
        )
        if client is not None:
            self.client = client
        elif self.region:
            self.client = boto3.client("s3", region_name=self.region, config=config)
        else:
            self.client = boto3.client("s3", config=config)

    def _wrap(self, exc: Exception, action: str, key: str) -> StorageError:
        retryable = isinstance(exc, _TIMEOUT_ERRORS)
        return StorageError(f"S3 {action} failed for {key}: {exc}", retryable=retryable)

    def put(self, path: str, data: bytes, *, overwrite: bool = False,
            content_type: Optional[str] = None) -> str:
        extra: Dict[str, Any] = {"CacheControl": "max-age=3600"}
        if content_type:
            extra["ContentType"] = content_type
        if not overwrite:
            # Conditional write: S3 rejects the put if the key exists.
            extra["IfNoneMatch"] = "*"

        try:
            self.client.put_object(Bucket=self.bucket, Key=path, Body=data, **extra)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code")
            if code in ("PreconditionFailed", "ConditionalRequestConflict"):
                raise Conflict(f"Object already exists: {path}") from exc
            raise self._wrap(exc, "put", path) from exc
        except BotoCoreError as exc:
            raise self._wrap(exc, "put", path) from exc

        logger.debug("s3 put bucket=%s key=%s bytes=%s", self.bucket, path, len(data))
        return path

    def remove(self, paths: Iterable[str]) -> None:
        keys = [path for path in paths if path]
        for start in range(0, len(keys), _DELETE_CHUNK):
            chunk = keys[start:start + _DELETE_CHUNK]
            try:
                response = self.client.delete_objects(
                    Bucket=self.bucket,
                    Delete={"Objects": [{"Key": key} for key in chunk], "Quiet": True},
                )
            except (ClientError, BotoCoreError) as exc:
                raise self._wrap(exc, "delete", ",".join(chunk)) from exc

            errors = response.get("Errors") or []
            if errors:
                first = errors[0]
                raise StorageError(
                    f"S3 delete failed for {first.get('Key')}: {first.get('Message')}"
                )

    def list(self, prefix: str) -> List[Dict[str, str]]:
        folder = prefix.rstrip("/") + "/"
        names: List[Dict[str, str]] = []
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket, Prefix=folder, Delimiter="/"):
                for obj in page.get("Contents") or []:
                    name = obj["Key"][len(folder):]
                    if name:
                        names.append({"name": name})
        except (ClientError, BotoCoreError) as exc:
            raise self._wrap(exc, "list", folder) from exc
        return names

    def exists(self, path: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=path)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                return False
            raise self._wrap(exc, "head", path) from exc
        except BotoCoreError as exc:
            raise self._wrap(exc, "head", path) from exc
        return True

    def public_url(self, path: str) -> str:
        if not path or path.startswith(("http://", "https://")) or self.public_base_url:
            return super().public_url(path)
        host = f"{self.bucket}.s3.{self.region}.amazonaws.com" if self.region else f"{self.bucket}.s3.amazonaws.com"
        return f"https://{host}/{quote(path)}"
