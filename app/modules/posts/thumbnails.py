from supabase import Client
from app.config import settings
from app.modules.posts.s3_storage import S3Storage
from fastapi import HTTPException, UploadFile
from typing import Optional
import logging
import mimetypes
import time

logger = logging.getLogger(__name__)

THUMBNAIL_FOLDER = "thumbnails"


def validate_thumbnail(content_type: Optional[str], size: int) -> None:
    """Reject non-images and files over the size limit before anything is uploaded"""
    if not content_type or not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Please select a valid image file")
    if size > settings.thumbnail_max_bytes:
        limit_mb = settings.thumbnail_max_bytes // (1024 * 1024)
        raise HTTPException(status_code=400, detail=f"Image size must be less than {limit_mb}MB")


def thumbnail_path(user_id: str, filename: Optional[str], content_type: str) -> str:
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[-1].lower()
    else:
        ext = (mimetypes.guess_extension(content_type) or ".img").lstrip(".")
    return f"{THUMBNAIL_FOLDER}/{user_id}-{int(time.time() * 1000)}.{ext}"


class ThumbnailService:
    def __init__(self, supabase: Client, s3_storage: Optional[S3Storage] = None):
        self.supabase = supabase
        self.bucket = settings.post_images_bucket
        self.s3_storage = s3_storage
        if self.s3_storage is None and settings.s3_configured:
            try:
                self.s3_storage = S3Storage()
                logger.info("S3 storage initialized for thumbnails")
            except Exception as e:
                logger.warning(f"S3 storage initialization failed ({str(e)}), will use Supabase Storage")
                self.s3_storage = None

    async def upload(self, user_id: str, file: UploadFile) -> str:
        """Validate and store an uploaded thumbnail; returns its public URL"""
        content = await file.read()
        validate_thumbnail(file.content_type, len(content))
        path = thumbnail_path(user_id, file.filename, file.content_type)

        if self.s3_storage:
            logger.info(f"Uploading thumbnail to S3: {path}")
            try:
                return self.s3_storage.upload_file(content, path, file.content_type)
            except Exception as e:
                logger.error(f"S3 upload failed: {str(e)}")
                raise HTTPException(status_code=500, detail=f"Failed to upload image: {str(e)}")

        try:
            self.supabase.storage.from_(self.bucket).upload(
                path,
                content,
                {"content-type": file.content_type}
            )
            public_url = self.supabase.storage.from_(self.bucket).get_public_url(path)
            logger.info(f"Uploaded thumbnail to Supabase Storage: {path}")
            return public_url
        except Exception as e:
            logger.error(f"Supabase Storage upload failed: {str(e)}")
            raise HTTPException(status_code=500, detail=f"Failed to upload image: {str(e)}")
