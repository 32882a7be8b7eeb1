from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..services.entities import PROJECTS
from ..services.pipeline import find_document, list_documents
from .deps import not_found
from .writes import add_write_routes

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("")
async def list_projects(db: Session = Depends(get_db)):
    return await run_in_threadpool(list_documents, PROJECTS, db)


@router.get("/project/{identifier}")
async def get_project(identifier: str, db: Session = Depends(get_db)):
    doc = await run_in_threadpool(find_document, PROJECTS, db, identifier)
    if doc is None:
        return not_found(PROJECTS)
    return doc


add_write_routes(router, PROJECTS)
