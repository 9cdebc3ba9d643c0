"""CV file storage on the local filesystem.

Files are addressed by a relative reference such as ``cvs/12/3f2a....pdf``.
Download links are signed, short-lived tokens naming that reference, served
by ``GET /files/{token}``.
"""
import logging
import os
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path

from jose import JWTError, jwt

from .config import settings
from .errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_CV_EXTENSIONS = {"pdf", "doc", "docx"}


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    content: bytes

    @classmethod
    def from_upload(cls, upload, max_size_kb: int | None = None) -> "UploadedFile | None":
        """Read a FastAPI ``UploadFile``; a form field left empty gives None.

        At most one byte past the size limit is read, enough for
        :func:`validate_cv_file` to reject an oversized file.
        """
        if upload is None or not upload.filename:
            return None
        limit = (max_size_kb or settings.cv_max_size_kb) * 1024 + 1
        return cls(filename=upload.filename, content=upload.file.read(limit))

    @property
    def extension(self) -> str:
        return os.path.splitext(self.filename)[1].lstrip(".").lower()


def validate_cv_file(upload: UploadedFile, field: str, max_size_kb: int | None = None) -> list[str]:
    """Return the validation messages for an uploaded CV, empty when valid."""
    max_size_kb = max_size_kb or settings.cv_max_size_kb
    errors = []
    if upload.extension not in ALLOWED_CV_EXTENSIONS:
        errors.append(
            f"The {field} must be a file of type: {', '.join(sorted(ALLOWED_CV_EXTENSIONS))}."
        )
    if not upload.content:
        errors.append(f"The {field} must not be empty.")
    elif len(upload.content) > max_size_kb * 1024:
        errors.append(f"The {field} must not be greater than {max_size_kb} kilobytes.")
    return errors


class AssetStorage:
    def __init__(self, root: str | Path, signing_key: str, algorithm: str = "HS256", base_url: str = "/files"):
        self.root = Path(root).resolve()
        self.signing_key = signing_key
        self.algorithm = algorithm
        self.base_url = base_url.rstrip("/")

    def path_for(self, reference: str) -> Path:
        path = (self.root / reference).resolve()
        if not path.is_relative_to(self.root):
            raise StorageError()
        return path

    def put(self, data: bytes, directory: str, extension: str) -> str:
        reference = f"{directory.strip('/')}/{uuid.uuid4().hex}.{extension}"
        path = self.path_for(reference)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            logger.error(f"Could not store {reference}: {e}")
            raise StorageError() from e
        logger.info(f"Stored {reference} ({len(data)} bytes)")
        return reference

    def delete(self, reference: str) -> None:
        path = self.path_for(reference)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning(f"{reference} was already gone")
        except OSError as e:
            logger.error(f"Could not delete {reference}: {e}")
            raise StorageError() from e
        else:
            logger.info(f"Deleted {reference}")

    def discard(self, reference: str) -> None:
        """Delete a file on a cleanup path, where a failure must not mask the
        original error."""
        try:
            self.delete(reference)
        except StorageError:
            logger.error(f"Left orphaned file {reference} behind")

    def presigned_download_url(self, reference: str, ttl: timedelta) -> str:
        expire = datetime.now(timezone.utc) + ttl
        token = jwt.encode(
            {"sub": reference, "type": "download", "exp": expire},
            self.signing_key,
            algorithm=self.algorithm,
        )
        return f"{self.base_url}/{token}"

    def resolve_download_token(self, token: str) -> str | None:
        try:
            payload = jwt.decode(token, self.signing_key, algorithms=[self.algorithm])
        except JWTError:
            return None
        if payload.get("type") != "download":
            return None
        return payload.get("sub")


def get_storage() -> AssetStorage:
    return AssetStorage(
        settings.storage_root,
        signing_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
