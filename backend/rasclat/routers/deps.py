import json
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from ..core.errors import AuthError
from ..core.security import InvalidTokenError, decode_token

NO_TOKEN = "No authentication token was found."
INVALID_TOKEN = "This token is invalid."


def bearer_token(request: Request) -> str:
    header = request.headers.get("authorization") or ""
    token = header.strip()
    if token.lower().startswith("bearer "):
        token = token[7:].strip()
    return token


def require_token(request: Request) -> dict:
    """Guard for write routes; returns the ``user`` claim of the token."""
    token = bearer_token(request)
    if not token:
        raise AuthError(NO_TOKEN, 401)
    try:
        return decode_token(token)
    except InvalidTokenError as exc:
        raise AuthError(INVALID_TOKEN, 403) from exc


async def read_payload(request: Request) -> tuple[dict[str, Any], dict[str, UploadFile]]:
    """Flexible body parsing: JSON, urlencoded or multipart.

    Returns the plain fields and the uploaded file parts separately. Repeated
    form fields (``artists=a&artists=b``) come back as a list.
    """
    content_type = request.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            data = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            data = {}
        return (data if isinstance(data, dict) else {}), {}

    if "form" not in content_type:
        return {}, {}

    form = await request.form()
    payload: dict[str, Any] = {}
    files: dict[str, UploadFile] = {}
    for key in form.keys():
        values = form.getlist(key)
        uploads = [v for v in values if isinstance(v, UploadFile)]
        if uploads:
            # browsers send an empty part for an untouched file input
            if uploads[0].filename:
                files[key] = uploads[0]
            continue
        payload[key] = values[0] if len(values) == 1 else list(values)
    return payload, files


def not_found(config) -> JSONResponse:
    return JSONResponse(status_code=config.not_found_status,
                        content={"success": False, "message": config.not_found()})
