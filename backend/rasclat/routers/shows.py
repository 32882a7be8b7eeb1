from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session, selectinload

from ..core.db import get_db
from ..models.radio import Recording
from ..schemas.radio import ShowOut
from ..services.entities import RECORDINGS, SHOWS
from ..services.pipeline import dump, find_document, list_documents
from .deps import not_found
from .writes import add_write_routes

router = APIRouter(prefix="/shows", tags=["shows"])

RECENT_LIMIT = 4


def recently_updated(db: Session, limit: int = RECENT_LIMIT) -> list[dict]:
    """Shows of the latest recordings, one entry per recording (repeats kept)."""
    recordings = RECORDINGS.repository(db).find_many(options=(selectinload(Recording.show),), limit=limit)
    return [dump(ShowOut, rec.show) for rec in recordings if rec.show is not None]


@router.get("")
async def list_shows(db: Session = Depends(get_db)):
    return await run_in_threadpool(list_documents, SHOWS, db)


@router.get("/recently-updated")
async def list_recently_updated(db: Session = Depends(get_db)):
    """Shows that aired most recently, taken from the four newest recordings."""
    return await run_in_threadpool(recently_updated, db)


@router.get("/show/{identifier}")
async def get_show(identifier: str, db: Session = Depends(get_db)):
    doc = await run_in_threadpool(find_document, SHOWS, db, identifier)
    if doc is None:
        return not_found(SHOWS)
    return doc


add_write_routes(router, SHOWS)
