from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..services.entities import GENRES
from ..services.pipeline import find_document, list_documents
from .deps import not_found
from .writes import add_write_routes

router = APIRouter(prefix="/genres", tags=["genres"])


@router.get("")
async def list_genres(db: Session = Depends(get_db)):
    return await run_in_threadpool(list_documents, GENRES, db)


@router.get("/genre/{identifier}")
async def get_genre(identifier: str, db: Session = Depends(get_db)):
    doc = await run_in_threadpool(find_document, GENRES, db, identifier)
    if doc is None:
        # answered with 200 for compatibility with existing clients
        return not_found(GENRES)
    return doc


add_write_routes(router, GENRES)
