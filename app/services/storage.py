"""
services/storage.py

업로드 파일 저장소 경계(boundary).

DB에는 파일 메타데이터(경로/크기/MIME)만 저장하고,
실제 파일은 UPLOAD_DIR/<kind>/<uuid><확장자> 로 디스크에 저장한다.

- complaints / gallery : 이미지(jpeg, jpg, png, gif, webp)만 허용
- documents            : 문서(pdf, doc(x), xls(x), ppt(x), txt)만 허용
- MAX_UPLOAD_BYTES 초과 시 저장하지 않고 ValueError

"""

import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile

from app.core.config import settings

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({".jpeg", ".jpg", ".png", ".gif", ".webp"})
DOCUMENT_EXTENSIONS = frozenset({".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx", ".txt"})

ALLOWED_EXTENSIONS = {
    "complaints": IMAGE_EXTENSIONS,
    "gallery": IMAGE_EXTENSIONS,
    "documents": DOCUMENT_EXTENSIONS,
}

CHUNK_SIZE = 1024 * 1024


@dataclass
class StoredFile:
    filename: str
    original_name: str
    path: str
    size: int
    mime_type: str | None

    def as_attachment(self) -> dict:
        return {
            "filename": self.filename,
            "original_name": self.original_name,
            "path": self.path,
            "size": self.size,
        }


def _check_extension(kind: str, original_name: str) -> str:
    ext = Path(original_name).suffix.lower()
    allowed = ALLOWED_EXTENSIONS.get(kind)
    if allowed is None:
        raise ValueError("Invalid upload field")
    if ext not in allowed:
        if allowed is IMAGE_EXTENSIONS:
            raise ValueError("Invalid image type. Only JPEG, PNG, GIF, WebP files allowed.")
        raise ValueError("Invalid document type. Only PDF, DOC, XLS, PPT, TXT files allowed.")
    return ext


def save_upload(upload: UploadFile, kind: str, upload_dir: str | None = None) -> StoredFile:
    original_name = upload.filename or ""
    ext = _check_extension(kind, original_name)

    target_dir = Path(upload_dir or settings.UPLOAD_DIR) / kind
    target_dir.mkdir(parents=True, exist_ok=True)
    filename = f"{uuid.uuid4()}{ext}"
    target = target_dir / filename

    size = 0
    try:
        with open(target, "wb") as out:
            while True:
                chunk = upload.file.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > settings.MAX_UPLOAD_BYTES:
                    raise ValueError("File too large")
                out.write(chunk)
    except ValueError:
        target.unlink(missing_ok=True)
        logger.warning("Rejected upload %r (%s): too large", original_name, kind)
        raise

    return StoredFile(
        filename=filename,
        original_name=original_name,
        path=target.as_posix(),
        size=size,
        mime_type=upload.content_type,
    )


def save_uploads(uploads: list[UploadFile], kind: str) -> list[StoredFile]:
    """여러 파일 저장. 중간에 실패하면 이미 저장한 파일도 지운다."""
    stored: list[StoredFile] = []
    try:
        for upload in uploads:
            stored.append(save_upload(upload, kind))
    except ValueError:
        delete_files(s.path for s in stored)
        raise
    return stored


def delete_file(path: str | None) -> None:
    if not path:
        return
    try:
        os.remove(path)
    except FileNotFoundError:
        pass


def delete_files(paths) -> None:
    for path in paths:
        delete_file(path)
