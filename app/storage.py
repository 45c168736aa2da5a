"""
Upload validation and storage for profile images, carousel images and CVs.

Files are accepted on their content, not their declared MIME type: the first
bytes must carry a known signature. Two backends:

  local  → written under UPLOAD_DIR, served by StaticFiles at /uploads
  s3     → put_object into S3_BUCKET via aioboto3

The backend is built once at startup and lives on app.state.storage.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import aioboto3
from botocore.exceptions import BotoCoreError, ClientError
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from app.config import Settings
from app.exceptions import FileTooLarge, StorageError, UnsupportedFileType

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES: int = 5 * 1024 * 1024
MAX_CV_BYTES: int = 10 * 1024 * 1024

# (offset, signature, extension, content type)
_SIGNATURES: list[tuple[int, bytes, str, str]] = [
    (0, b"\xff\xd8\xff", "jpg", "image/jpeg"),
    (0, b"\x89PNG\r\n\x1a\n", "png", "image/png"),
    (0, b"GIF87a", "gif", "image/gif"),
    (0, b"GIF89a", "gif", "image/gif"),
    (0, b"%PDF-", "pdf", "application/pdf"),
]


def detect_file_type(data: bytes) -> tuple[str, str] | None:
    """Return (extension, content type) from magic bytes, or None."""
    # WebP: "RIFF" <4-byte size> "WEBP"
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "webp", "image/webp"
    for offset, signature, ext, content_type in _SIGNATURES:
        if data[offset:offset + len(signature)] == signature:
            return ext, content_type
    return None


@dataclass(frozen=True)
class UploadPolicy:
    label: str
    max_bytes: int
    extensions: frozenset[str]


IMAGE_POLICY = UploadPolicy("JPEG, PNG, WebP or GIF image", MAX_IMAGE_BYTES, frozenset({"jpg", "png", "webp", "gif"}))
CV_POLICY = UploadPolicy("PDF document", MAX_CV_BYTES, frozenset({"pdf"}))


@dataclass(frozen=True)
class ValidatedUpload:
    data: bytes
    extension: str
    content_type: str


async def read_validated(upload: UploadFile, field: str, policy: UploadPolicy) -> ValidatedUpload:
    """Read at most max_bytes + 1 so an oversized file is rejected without buffering it all."""
    data = await upload.read(policy.max_bytes + 1)
    if len(data) > policy.max_bytes:
        raise FileTooLarge(field, policy.max_bytes)
    detected = detect_file_type(data)
    if detected is None or detected[0] not in policy.extensions:
        raise UnsupportedFileType(field, policy.label)
    extension, content_type = detected
    return ValidatedUpload(data=data, extension=extension, content_type=content_type)


class Storage(Protocol):
    async def save(self, upload: ValidatedUpload, folder: str) -> str:
        """Persist the file and return its public URL."""
        ...


def _object_name(upload: ValidatedUpload) -> str:
    return f"{uuid.uuid4().hex}.{upload.extension}"


class LocalStorage:
    def __init__(self, root: str | Path, public_base_url: str) -> None:
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    def _write(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    async def save(self, upload: ValidatedUpload, folder: str) -> str:
        name = _object_name(upload)
        path = self.root / folder / name
        try:
            await run_in_threadpool(self._write, path, upload.data)
        except OSError as exc:
            logger.error("Could not write upload to %s: %s", path, exc)
            raise StorageError() from exc
        logger.info("Stored upload %s/%s (%d bytes)", folder, name, len(upload.data))
        return f"{self.public_base_url}/uploads/{folder}/{name}"


class S3Storage:
    def __init__(self, settings: Settings, session: aioboto3.Session | None = None) -> None:
        self.bucket = settings.s3_bucket
        self.region = settings.aws_region
        self.public_base_url = (
            settings.s3_public_base_url.rstrip("/")
            or f"https://{settings.s3_bucket}.s3.{settings.aws_region}.amazonaws.com"
        )
        self._session = session or aioboto3.Session(
            aws_access_key_id=settings.aws_access_key_id or None,
            aws_secret_access_key=settings.aws_secret_access_key or None,
            region_name=settings.aws_region,
        )

    async def save(self, upload: ValidatedUpload, folder: str) -> str:
        key = f"{folder}/{_object_name(upload)}"
        try:
            async with self._session.client("s3", region_name=self.region) as s3:
                await s3.put_object(
                    Bucket=self.bucket,
                    Key=key,
                    Body=upload.data,
                    ContentType=upload.content_type,
                )
        except (BotoCoreError, ClientError) as exc:
            logger.error("S3 upload of %s to %s failed: %s", key, self.bucket, exc)
            raise StorageError() from exc
        logger.info("Stored upload s3://%s/%s", self.bucket, key)
        return f"{self.public_base_url}/{key}"


def build_storage(settings: Settings) -> Storage:
    backend = settings.storage_backend.strip().lower()
    if backend == "s3":
        if not settings.s3_bucket:
            raise ValueError("STORAGE_BACKEND=s3 requires S3_BUCKET")
        return S3Storage(settings)
    if backend == "local":
        return LocalStorage(settings.upload_dir, settings.public_base_url)
    raise ValueError(f"Unknown STORAGE_BACKEND {settings.storage_backend!r}; expected 'local' or 's3'")
