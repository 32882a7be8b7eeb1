from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool

from ..services import external

router = APIRouter(prefix="/languages", tags=["languages"])


@router.get("")
async def list_languages():
    """Translation progress per language of the web frontend."""
    return await run_in_threadpool(external.translation_status)
