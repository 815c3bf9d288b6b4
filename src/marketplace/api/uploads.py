"""Image uploads stored on local disk and served from ``/uploads``."""

import secrets
from pathlib import Path

from fastapi import APIRouter, Depends, File, UploadFile
from protean.exceptions import ValidationError

from marketplace.account.user import User
from marketplace.api.auth import current_user
from marketplace.config import settings
from marketplace.domain import logger

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".webp"}
MAX_FILES = 5

upload_router = APIRouter(prefix="/upload", tags=["uploads"])


def _check(upload: UploadFile, field):
    suffix = Path(upload.filename or "").suffix.lower()
    content_type = upload.content_type or ""
    if suffix not in ALLOWED_EXTENSIONS or not content_type.startswith("image/"):
        raise ValidationError({field: ["Only image files are allowed (jpeg, jpg, png, gif, webp)"]})
    return suffix


async def _store(upload: UploadFile, field="file"):
    suffix = _check(upload, field)
    data = await upload.read()
    if len(data) > settings.max_upload_bytes:
        raise ValidationError({field: ["File too large"]})

    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    filename = f"{Path(upload.filename).stem}-{secrets.token_hex(8)}{suffix}"
    (settings.upload_dir / filename).write_bytes(data)

    logger.info("file_uploaded", filename=filename, size=len(data))
    return {"url": f"/uploads/{filename}", "filename": filename}


@upload_router.post("")
async def upload_single(file: UploadFile = File(...), user: User = Depends(current_user)):  # noqa: ARG001
    stored = await _store(file)
    return {"message": "File uploaded successfully", **stored}


@upload_router.post("/multiple")
async def upload_multiple(files: list[UploadFile] = File(...), user: User = Depends(current_user)):  # noqa: ARG001
    if len(files) > MAX_FILES:
        raise ValidationError({"files": [f"At most {MAX_FILES} files can be uploaded at once"]})
    stored = [await _store(upload, "files") for upload in files]
    return {"message": "Files uploaded successfully", "files": stored}
