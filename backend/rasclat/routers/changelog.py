from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from ..services import external

router = APIRouter(prefix="/changelog", tags=["changelog"])


@router.get("/{repository}")
async def changelog(repository: str):
    """GitHub releases of one of the station's repositories."""
    releases = await run_in_threadpool(external.releases, repository)
    if releases is None:
        return JSONResponse(status_code=404, content={"success": False, "message": "Changelog not found."})
    return releases
