from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool

from ..services import external

router = APIRouter(prefix="/status", tags=["status"])


@router.get("")
async def system_status():
    """Monitor states as reported by UptimeRobot."""
    return await run_in_threadpool(external.monitors)
