from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..services.pipeline import EntityConfig, WritePipeline
from .deps import read_payload, require_token


def add_write_routes(router: APIRouter, config: EntityConfig) -> None:
    """Attach the token-gated POST, PUT /update and DELETE /delete routes."""

    async def create(request: Request, db: Session = Depends(get_db), user: dict = Depends(require_token)):
        payload, files = await read_payload(request)
        return await WritePipeline(config, db).create(payload, files)

    async def update(request: Request, db: Session = Depends(get_db), user: dict = Depends(require_token)):
        payload, files = await read_payload(request)
        return await WritePipeline(config, db).update(payload, files)

    async def delete(request: Request, db: Session = Depends(get_db), user: dict = Depends(require_token)):
        payload, _ = await read_payload(request)
        return await WritePipeline(config, db).delete(payload)

    router.add_api_route("", create, methods=["POST"], name=f"create_{config.key}",
                         summary=f"Create a {config.noun}")
    router.add_api_route("/update", update, methods=["PUT"], name=f"update_{config.key}",
                         summary=f"Update a {config.noun}")
    router.add_api_route("/delete", delete, methods=["DELETE"], name=f"delete_{config.key}",
                         summary=f"Delete a {config.noun}")
