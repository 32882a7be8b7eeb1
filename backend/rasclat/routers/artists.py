from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..services.entities import ARTISTS
from ..services.pipeline import find_document, list_documents
from .deps import not_found
from .writes import add_write_routes

router = APIRouter(prefix="/artists", tags=["artists"])


@router.get("")
async def list_artists(db: Session = Depends(get_db)):
    """All artists by slug, each with the recordings they appear on."""
    return await run_in_threadpool(list_documents, ARTISTS, db)


@router.get("/artist/{identifier}")
async def get_artist(identifier: str, db: Session = Depends(get_db)):
    """One artist by id or slug; recordings newest first, with their genres."""
    doc = await run_in_threadpool(find_document, ARTISTS, db, identifier)
    if doc is None:
        return not_found(ARTISTS)
    return doc


add_write_routes(router, ARTISTS)
