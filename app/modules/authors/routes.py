from fastapi import APIRouter, Depends
from app.core.dependencies import require_publisher, get_session_client
from app.modules.authors.schemas import AuthorCreate, AuthorResponse
from app.modules.authors.service import AuthorService
from app.modules.session.context import SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/authors", tags=["authors"])


def get_author_service(supabase: Client = Depends(get_session_client)) -> AuthorService:
    return AuthorService(supabase)


# Sync handlers run in the threadpool; the author list sleeps between retries
@router.get("", response_model=List[AuthorResponse])
def list_authors(
    search: Optional[str] = None,
    context: SessionContext = Depends(require_publisher),
    service: AuthorService = Depends(get_author_service)
):
    """List authors for the post form, optionally filtered by name"""
    return service.list_authors(search=search)


@router.post("", response_model=AuthorResponse, status_code=201)
def create_author(
    author_data: AuthorCreate,
    context: SessionContext = Depends(require_publisher),
    service: AuthorService = Depends(get_author_service)
):
    """Add a new author from the post form"""
    return service.create_author(author_data)
