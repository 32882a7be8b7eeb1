from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..services.entities import BLOG
from ..services.pipeline import find_document, list_documents
from .deps import not_found
from .writes import add_write_routes

router = APIRouter(prefix="/blog", tags=["blog"])


@router.get("/posts")
async def list_posts(db: Session = Depends(get_db)):
    """Blog posts, newest first."""
    return await run_in_threadpool(list_documents, BLOG, db)


@router.get("/post/{identifier}")
async def get_post(identifier: str, db: Session = Depends(get_db)):
    doc = await run_in_threadpool(find_document, BLOG, db, identifier)
    if doc is None:
        return not_found(BLOG)
    return doc


add_write_routes(router, BLOG)
