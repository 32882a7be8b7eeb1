import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..core.security import create_access_token, verify_password
from ..core.tokens import get_token_store
from ..models.radio import User
from .deps import read_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _refused(message: str) -> JSONResponse:
    return JSONResponse(status_code=401, content={"success": False, "message": message})


def _find_user(db: Session, username: str):
    return db.execute(select(User).where(User.username == username)).scalar_one_or_none()


@router.post('/login')
async def login(request: Request, db: Session = Depends(get_db)):
    """Exchange username and password for an access token and a refresh token.

    Accepts a JSON body or form fields. The username is matched
    case-insensitively.
    """
    data, _ = await read_payload(request)
    username = str(data.get('username') or '').strip().lower()
    password = str(data.get('password') or '')
    if not username or not password:
        return _refused("Login failed.")

    user = await run_in_threadpool(_find_user, db, username)
    if user is None:
        return _refused("Username not found.")
    if not verify_password(password, user.password_hash):
        logger.info("wrong password for %s", username)
        return _refused("Wrong password.")

    token = create_access_token(username)
    refresh_token = get_token_store().issue(username)
    return {
        "success": True,
        "message": "You will be signed in.",
        "token": token,
        "refreshToken": refresh_token,
        "username": username,
    }


@router.post('/refresh-token')
async def refresh_token(request: Request):
    data, _ = await read_payload(request)
    token = str(data.get('refreshToken') or '')
    username = get_token_store().lookup(token)
    if username is None:
        return _refused("This refresh token is invalid.")
    return {
        "success": True,
        "message": "You will be signed in.",
        "token": create_access_token(username),
        "refreshToken": token,
        "username": username,
    }


@router.post('/logout')
async def logout(request: Request):
    data, _ = await read_payload(request)
    token = data.get('refreshToken')
    if token:
        get_token_store().revoke(str(token))
    return {"success": True, "message": "You will be signed out."}
