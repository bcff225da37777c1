from __future__ import annotations

import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

import boto3
from botocore.exceptions import ClientError
from flask import current_app, url_for


class StorageError(RuntimeError):
    pass


_MIME_FOLDERS = {
    "image/jpeg": "images",
    "image/png": "images",
    "image/gif": "images",
    "image/webp": "images",
    "application/pdf": "pdfs",
    "text/plain": "texts",
    "text/csv": "texts",
    "application/json": "applications",
    "application/xml": "applications",
    "application/msword": "documents",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "documents",
}


def folder_for_mime(content_type: str) -> str:
    return _MIME_FOLDERS.get((content_type or "").lower(), "others")


def make_key(filename: str, content_type: str) -> str:
    """`<folder>/<uuid>.<ext>`; the client filename only contributes its extension."""
    ext = filename.rsplit(".", 1)[-1].lower() if "." in (filename or "") else "unknown"
    ext = "".join(ch for ch in ext if ch.isalnum())[:10] or "unknown"
    return f"{folder_for_mime(content_type)}/{uuid.uuid4()}.{ext}"


class Storage:
    def put_bytes(self, key: str, data: bytes, *, content_type: str | None = None) -> None:
        raise NotImplementedError

    def open(self, key: str) -> BinaryIO:
        raise NotImplementedError

    def exists(self, key: str) -> bool:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def url_for(self, key: str, *, expires_in: int) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class LocalStorage(Storage):
    root: Path

    def _path(self, key: str) -> Path:
        safe_key = key.lstrip("/").replace("\\", "/")
        p = (self.root / safe_key).resolve()
        if self.root.resolve() not in p.parents:
            raise StorageError(f"Key escapes storage root: {key!r}")
        return p

    def put_bytes(self, key: str, data: bytes, *, content_type: str | None = None) -> None:
        p = self._path(key)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)

    def open(self, key: str) -> BinaryIO:
        return self._path(key).open("rb")

    def exists(self, key: str) -> bool:
        try:
            return self._path(key).exists()
        except StorageError:
            return False

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def url_for(self, key: str, *, expires_in: int) -> str:
        # Served by the admin-only attachments endpoint
        return url_for("api.attachment_download", key=key, _external=True)


@dataclass(frozen=True)
class S3Storage(Storage):
    endpoint: str
    region: str
    bucket: str
    access_key_id: str
    secret_access_key: str

    def _client(self):
        return boto3.client(
            "s3",
            endpoint_url=f"https://{self.endpoint}" if self.endpoint else None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id or None,
            aws_secret_access_key=self.secret_access_key or None,
        )

    def put_bytes(self, key: str, data: bytes, *, content_type: str | None = None) -> None:
        extra: dict[str, object] = {}
        if content_type:
            extra["ContentType"] = content_type
        try:
            self._client().put_object(Bucket=self.bucket, Key=key, Body=data, **extra)
        except ClientError as e:
            raise StorageError(f"Upload failed for {key}") from e

    def open(self, key: str) -> BinaryIO:
        obj = self._client().get_object(Bucket=self.bucket, Key=key)
        return obj["Body"]  # type: ignore[return-value]

    def exists(self, key: str) -> bool:
        try:
            self._client().head_object(Bucket=self.bucket, Key=key)
            return True
        except ClientError:
            return False

    def delete(self, key: str) -> None:
        try:
            self._client().delete_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            raise StorageError(f"Delete failed for {key}") from e

    def url_for(self, key: str, *, expires_in: int) -> str:
        return self._client().generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=expires_in,
        )


def storage_from_config(config) -> Storage:
    backend = (config.get("STORAGE_BACKEND") or "local").strip().lower()
    if backend == "s3":
        bucket = (config.get("S3_BUCKET") or "").strip()
        if not bucket:
            raise StorageError("S3_BUCKET is required when STORAGE_BACKEND=s3")
        return S3Storage(
            endpoint=(config.get("S3_ENDPOINT") or "").strip(),
            region=(config.get("S3_REGION") or "").strip(),
            bucket=bucket,
            access_key_id=(config.get("S3_ACCESS_KEY_ID") or "").strip(),
            secret_access_key=(config.get("S3_SECRET_ACCESS_KEY") or "").strip(),
        )
    return LocalStorage(root=Path(config.get("STORAGE_LOCAL_ROOT") or "storage"))


class AttachmentStore:
    """Flask extension owning the attachment backend for the app's lifetime."""

    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app) -> None:
        app.extensions["zelene.attachments"] = storage_from_config(app.config)

    @property
    def backend(self) -> Storage:
        return current_app.extensions["zelene.attachments"]

    def save(self, *, filename: str, content_type: str, data: bytes) -> str:
        key = make_key(filename, content_type)
        self.backend.put_bytes(key, data, content_type=content_type)
        return key

    def discard(self, keys) -> None:
        """Best-effort removal of uploads whose submission never committed."""
        for key in keys:
            try:
                self.backend.delete(key)
            except (StorageError, OSError):
                current_app.logger.warning("orphaned attachment left in storage", extra={"event": "attachment_discard_failed", "key": key})

    def url(self, key: str) -> str:
        return self.backend.url_for(key, expires_in=current_app.config.get("ATTACHMENT_URL_TTL", 3600))
