import logging
import uuid
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..config import R2_ACCESS_KEY_ID, R2_ACCOUNT_ID, R2_BUCKET_NAME, R2_SECRET_ACCESS_KEY
from ..database import get_db
from ..models import Professional, User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/upload", tags=["Upload"])

# Presigned URL expiration time (1 hour)
PRESIGNED_URL_EXPIRATION = 3600

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB
KEY_PREFIX = "profile-pictures/"

# content type -> stored extension
ALLOWED_IMAGE_TYPES = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
}


def get_r2_client():
    """Create and return an R2 client."""
    return boto3.client(
        "s3",
        endpoint_url=f"https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=R2_ACCESS_KEY_ID,
        aws_secret_access_key=R2_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
    )


def generate_presigned_url(key: str, expiration: int = PRESIGNED_URL_EXPIRATION) -> str:
    """Generate a presigned URL for reading a private object in R2."""
    r2 = get_r2_client()
    try:
        url = r2.generate_presigned_url(
            "get_object",
            Params={
                "Bucket": R2_BUCKET_NAME,
                "Key": key,
                "ResponseContentDisposition": "inline",
            },
            ExpiresIn=expiration,
        )
        logger.info(f"✅ Generated presigned URL for key: {key}")
        return url
    except (BotoCoreError, ClientError) as e:
        logger.error(f"❌ Failed to generate presigned URL for key {key}: {e}")
        raise HTTPException(status_code=502, detail="Could not generate file URL") from e


@router.post("/profile-picture")
async def upload_profile_picture(
    file: UploadFile = File(...),
    professional_id: Optional[int] = Query(None, alias="professionalId"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Upload a profile picture to R2 (private) and store its key.

    Without ``professionalId`` the picture belongs to the session user;
    admins may pass ``professionalId`` to set a professional's picture.
    """
    owner = current_user
    owner_label = f"users/{current_user.id}"
    if professional_id is not None:
        if not current_user.is_admin:
            raise HTTPException(status_code=403, detail="Forbidden")
        owner = db.query(Professional).filter(Professional.id == professional_id).first()
        if not owner:
            raise HTTPException(status_code=404, detail="Professional not found")
        owner_label = f"professionals/{professional_id}"

    ext = ALLOWED_IMAGE_TYPES.get(file.content_type)
    if not ext:
        raise HTTPException(
            status_code=400,
            detail="Invalid file type. Only PNG, JPEG, WebP and GIF images are allowed.",
        )

    contents = await file.read()
    if not contents:
        raise HTTPException(status_code=400, detail="Empty file")
    if len(contents) > MAX_FILE_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"File size exceeds 5MB limit. Your file is {len(contents) / (1024 * 1024):.2f}MB.",
        )

    # Key is generated server side; the client filename is never used in it
    key = f"{KEY_PREFIX}{owner_label}/{uuid.uuid4()}.{ext}"
    logger.info(f"📤 Uploading profile picture for {owner_label}")

    try:
        get_r2_client().put_object(
            Bucket=R2_BUCKET_NAME,
            Key=key,
            Body=contents,
            ContentType=file.content_type,
        )
    except (BotoCoreError, ClientError) as e:
        logger.error(f"❌ Failed to upload profile picture for {owner_label}: {e}")
        raise HTTPException(status_code=502, detail="Failed to upload file") from e

    owner.profile_picture = key
    db.commit()

    logger.info(f"✅ Profile picture stored: {key}")
    return {"key": key, "url": generate_presigned_url(key)}


@router.get("/url")
async def get_file_url(
    key: str = Query(..., min_length=1),
    _user: User = Depends(get_current_user),
):
    """Return a short-lived URL for a stored profile picture."""
    if not key.startswith(KEY_PREFIX) or ".." in key:
        raise HTTPException(status_code=400, detail="Invalid file key")
    return {"url": generate_presigned_url(key)}
