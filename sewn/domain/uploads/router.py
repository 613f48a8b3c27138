"""Upload router - avatars, portfolio images and attachments stored on R2"""

import logging
import time
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel

from ...auth import get_current_user
from ...config import (
    R2_ACCESS_KEY_ID,
    R2_ACCOUNT_ID,
    R2_BUCKET_NAME,
    R2_PUBLIC_BASE_URL,
    R2_SECRET_ACCESS_KEY,
)
from ...constants import FILE_UPLOAD, UPLOAD_BUCKETS
from ...models import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/uploads", tags=["Uploads"])

# Buckets that only hold pictures; the rest also take documents
IMAGE_ONLY_BUCKETS = ("avatars", "portfolio")

CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
    "application/pdf": "pdf",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
}


class UploadResponse(BaseModel):
    url: str
    key: str
    file_name: Optional[str] = None
    content_type: str
    size: int


def get_r2_client():
    """Create and return an R2 client."""
    return boto3.client(
        "s3",
        endpoint_url=f"https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=R2_ACCESS_KEY_ID,
        aws_secret_access_key=R2_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
    )


def allowed_content_types(bucket: str) -> tuple:
    if bucket in IMAGE_ONLY_BUCKETS:
        return FILE_UPLOAD["ALLOWED_IMAGE_TYPES"]
    return FILE_UPLOAD["ALLOWED_IMAGE_TYPES"] + FILE_UPLOAD["ALLOWED_DOCUMENT_TYPES"]


def file_extension(filename: Optional[str], content_type: str) -> str:
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[1].lower()
        if ext.isalnum() and len(ext) <= 5:
            return ext
    return CONTENT_TYPE_EXTENSIONS[content_type]


def public_url(key: str) -> str:
    return f"{R2_PUBLIC_BASE_URL.rstrip('/')}/{key}"


@router.post("/{bucket}", response_model=UploadResponse, status_code=201)
async def upload_file(
    bucket: str,
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    r2=Depends(get_r2_client),
):
    """Upload a file for the current user and return its public URL"""
    if bucket not in UPLOAD_BUCKETS:
        raise HTTPException(status_code=404, detail=f"Unknown upload bucket: {bucket}")

    if file.content_type not in allowed_content_types(bucket):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file type {file.content_type} for {bucket}",
        )

    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Empty file")
    if len(content) > FILE_UPLOAD["MAX_FILE_SIZE"]:
        raise HTTPException(status_code=400, detail="File too large. Maximum size is 10MB.")

    ext = file_extension(file.filename, file.content_type)
    key = f"{bucket}/{current_user.id}/{int(time.time() * 1000)}.{ext}"

    try:
        r2.put_object(
            Bucket=R2_BUCKET_NAME,
            Key=key,
            Body=content,
            ContentType=file.content_type,
        )
    except (BotoCoreError, ClientError) as e:
        logger.error(f"❌ Failed to upload {key} to R2: {e}")
        raise HTTPException(status_code=500, detail="Failed to upload file") from e

    logger.info(f"📤 Uploaded {key} ({len(content)} bytes)")
    return {
        "url": public_url(key),
        "key": key,
        "file_name": file.filename,
        "content_type": file.content_type,
        "size": len(content),
    }
