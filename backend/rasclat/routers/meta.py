from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool

from ..services import external, radio_meta

router = APIRouter(prefix="/meta", tags=["meta"])


@router.get("/live-info")
async def live_info():
    """Station block of the radio automation's live info."""
    return await run_in_threadpool(radio_meta.station)


@router.get("/tracks/previous")
@router.get("/track/previous", include_in_schema=False)
async def previous_track():
    return await run_in_threadpool(radio_meta.track, "previous")


@router.get("/tracks/current")
async def current_track():
    return await run_in_threadpool(radio_meta.track, "current")


@router.get("/tracks/next")
async def next_track():
    return await run_in_threadpool(radio_meta.track, "next")


@router.get("/shows/previous")
async def previous_show():
    return await run_in_threadpool(radio_meta.show, "previous")


@router.get("/shows/current")
async def current_show():
    return await run_in_threadpool(radio_meta.show, "current")


@router.get("/shows/next")
async def next_show():
    return await run_in_threadpool(radio_meta.show, "next")


@router.get("/schedule")
async def schedule():
    """Weekly schedule, passed through unchanged."""
    return await run_in_threadpool(radio_meta.schedule)


@router.get("/languages")
async def languages():
    return await run_in_threadpool(external.translation_status)
