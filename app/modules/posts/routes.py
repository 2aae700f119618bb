from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form
from app.core.dependencies import require_publisher, get_session_client
from app.modules.posts.schemas import PostCreate, PostUpdate, PostResponse
from app.modules.posts.service import PostService
from app.modules.posts.thumbnails import ThumbnailService
from app.modules.session.context import SessionContext
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/posts", tags=["posts"])


def get_post_service(supabase: Client = Depends(get_session_client)) -> PostService:
    return PostService(supabase)


def get_thumbnail_service(supabase: Client = Depends(get_session_client)) -> ThumbnailService:
    return ThumbnailService(supabase)


@router.post("", response_model=PostResponse, status_code=201)
async def create_post(
    title: str = Form(...),
    content: str = Form(...),
    category_id: str = Form(...),
    author_id: str = Form(...),
    thumbnail_url: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    context: SessionContext = Depends(require_publisher),
    service: PostService = Depends(get_post_service),
    thumbnails: ThumbnailService = Depends(get_thumbnail_service)
):
    """
    Create a post from the publisher form.
    The thumbnail is either an uploaded image (image/*, at most 5MB) stored in
    the post-images bucket, or a direct URL.
    """
    post_data = service.validate_post(PostCreate(
        title=title,
        content=content,
        category_id=category_id,
        author_id=author_id,
        thumbnail_url=(thumbnail_url or "").strip() or None
    ))
    if thumbnail is not None and thumbnail.filename:
        uploaded_url = await thumbnails.upload(context.user_id, thumbnail)
        post_data = post_data.model_copy(update={"thumbnail_url": uploaded_url})
    return service.create_post(post_data, context.user_id)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    post_data: PostUpdate,
    context: SessionContext = Depends(require_publisher),
    service: PostService = Depends(get_post_service)
):
    """Edit one of the publisher's own posts"""
    return service.update_post(post_id, context.user_id, post_data)


@router.delete("/{post_id}", status_code=204)
async def delete_post(
    post_id: str,
    context: SessionContext = Depends(require_publisher),
    service: PostService = Depends(get_post_service)
):
    """Delete one of the publisher's own posts"""
    if not service.delete_post(post_id, context.user_id):
        raise HTTPException(status_code=404, detail="Post not found")
    return None
