import logging

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import get_settings
from .core.db import Base, SessionLocal, engine
from .core.errors import AuthError, RasclatError, UpstreamError, report_exception
from .core.tokens import init_token_store
from .jobs.reindex import start_background_scheduler
from .models import radio  # noqa: F401  registers the tables on Base.metadata
from .routers import artists, auth, blog, changelog, genres, health, languages, meta, projects, recordings, shows, status
from .services.users import ensure_admin

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn, release=settings.app_version)

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    description="Content API of Radio Rasclat: artists, shows, genres, recordings, blog and projects.",
)


@app.middleware('http')
async def log_requests(request: Request, call_next):
    response = await call_next(request)
    logger.info("%s %s -> %s", request.method, request.url, response.status_code)
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError):
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.message})


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    report_exception(exc.cause or exc, path=request.url.path)
    return JSONResponse(status_code=502, content={"success": False, "message": exc.message})


@app.exception_handler(RasclatError)
async def rasclat_error_handler(request: Request, exc: RasclatError):
    return JSONResponse(status_code=400, content={"success": False, "message": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    report_exception(exc, path=request.url.path)
    return JSONResponse(status_code=500, content={"success": False, "message": "An error occurred."})


@app.on_event("startup")
def on_startup():
    # create_all for development and tests; production schemas come from alembic
    Base.metadata.create_all(bind=engine)
    init_token_store()
    db = SessionLocal()
    try:
        ensure_admin(db)
    finally:
        db.close()
    if settings.reindex_enabled:
        app.state.scheduler = start_background_scheduler()


@app.on_event("shutdown")
def on_shutdown():
    scheduler = getattr(app.state, "scheduler", None)
    if scheduler is not None:
        scheduler.shutdown(wait=False)


app.include_router(health.router)
app.include_router(auth.router)
app.include_router(artists.router)
app.include_router(shows.router)
app.include_router(genres.router)
app.include_router(recordings.router)
app.include_router(blog.router)
app.include_router(projects.router)
app.include_router(meta.router)
app.include_router(languages.router)
app.include_router(changelog.router)
app.include_router(status.router)


@app.get("/")
async def root():
    return {"app": settings.app_name, "version": settings.app_version, "status": "running"}
