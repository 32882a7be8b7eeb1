from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from ..core.cache import recordings_cache
from ..core.db import get_db
from ..services.entities import RECORDINGS
from ..services.pipeline import find_document, list_documents
from .deps import not_found
from .writes import add_write_routes

router = APIRouter(prefix="/recordings", tags=["recordings"])


@router.get("")
async def list_recordings(request: Request, db: Session = Depends(get_db)):
    """Recordings newest first, with show, artists and genres joined in.

    Cached per URL for ``RECORDINGS_CACHE_TTL`` seconds; any recording write
    clears the cache.
    """
    cache = recordings_cache()
    key = str(request.url)
    cached = cache.get(key)
    if cached is not None:
        return cached
    docs = await run_in_threadpool(list_documents, RECORDINGS, db)
    cache.put(key, docs)
    return docs


@router.get("/recording/{identifier}")
async def get_recording(identifier: str, db: Session = Depends(get_db)):
    doc = await run_in_threadpool(find_document, RECORDINGS, db, identifier)
    if doc is None:
        return not_found(RECORDINGS)
    return doc


add_write_routes(router, RECORDINGS)
