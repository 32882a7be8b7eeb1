"""Write pipeline shared by every content type.

A write request moves through a fixed sequence of stages::

    RECEIVED -> VALIDATED -> MEDIA_TRANSFORMED -> MEDIA_STORED
             -> PERSISTED -> INDEX_SYNCED -> RESPONDED

Any stage may fail; the pipeline then lands in ERRORED, nothing after the
failing stage runs and the caller gets ``{"success": false, "message": ...}``.
Stages are awaited one after the other; blocking database, storage and index
calls run in the threadpool.

What differs per content type (required fields, accepted files, index, join
shape, sort, wire <-> column mapping) lives in an ``EntityConfig``.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import (
    DecodeError,
    DuplicateKeyError,
    NotFoundError,
    RasclatError,
    SearchIndexError,
    StorageError,
    ValidationError,
    report_exception,
)
from . import media
from .search import get_search_index
from .storage import get_blob_store, upload_staged
from .store import Repository
from .validators import Rule, as_text, validate

logger = logging.getLogger(__name__)


class PipelineState(str, enum.Enum):
    RECEIVED = 'received'
    VALIDATED = 'validated'
    MEDIA_TRANSFORMED = 'media_transformed'
    MEDIA_STORED = 'media_stored'
    PERSISTED = 'persisted'
    INDEX_SYNCED = 'index_synced'
    RESPONDED = 'responded'
    ERRORED = 'errored'


def dump(schema: type[BaseModel], obj) -> dict:
    return schema.model_validate(obj).model_dump(mode='json', by_alias=True)


@dataclass
class EntityConfig:
    """Everything the pipeline needs to know about one content type."""

    key: str                      # route prefix and search index key, e.g. "artists"
    label: str                    # "Artist", used at the start of messages
    noun: str                     # "artist", used inside messages
    response_key: str             # key of the record in write responses
    model: Any
    schema: type[BaseModel]       # flat document, also sent to the search index
    rules: Sequence[Rule]
    writable: Mapping[str, str]   # wire field -> column
    list_fields: Sequence[str] = ()  # wire fields holding id lists
    files: Sequence[str] = ()
    indexed: bool = True
    order_by: Callable[[], Sequence[Any]] = lambda: ()
    list_options: Callable[[], Sequence[Any]] = lambda: ()
    list_schema: Optional[type[BaseModel]] = None
    detail_options: Callable[[], Sequence[Any]] = lambda: ()
    detail_schema: Optional[type[BaseModel]] = None
    not_found_status: int = 404
    # wire values -> column values; may resolve references through the session
    coerce: Optional[Callable[[Session, dict], dict]] = None
    # returns a refusal message when a record must not be deleted
    delete_guard: Optional[Callable[[Session, Any], Optional[str]]] = None
    after_write: Optional[Callable[[], None]] = None

    def repository(self, db: Session) -> Repository:
        return Repository(db, self.model, order_by=self.order_by())

    def document(self, obj) -> dict:
        return dump(self.schema, obj)

    def not_found(self) -> str:
        return f'{self.label} not found.'


class WritePipeline:
    def __init__(self, config: EntityConfig, db: Session, blob_store=None, index=None):
        self.config = config
        self.db = db
        self.repo = config.repository(db)
        self._blob_store = blob_store
        self._index = index
        self.state = PipelineState.RECEIVED
        self.staged: list[media.StagedFile] = []

    # resolved on first use
    @property
    def blob_store(self):
        if self._blob_store is None:
            self._blob_store = get_blob_store()
        return self._blob_store

    @property
    def index(self):
        if self._index is None:
            self._index = get_search_index(self.config.key)
        return self._index

    def _advance(self, state: PipelineState) -> None:
        logger.debug("%s pipeline: %s -> %s", self.config.key, self.state.value, state.value)
        self.state = state

    def _fail(self, exc: RasclatError, report: bool = False) -> dict:
        stage = self.state.value
        logger.info("%s pipeline failed after %s: %s", self.config.key, stage, exc.message)
        self.state = PipelineState.ERRORED
        if report:
            report_exception(exc.cause or exc, entity=self.config.key, stage=stage)
        return exc.payload()

    def _fields(self, payload: Mapping) -> dict:
        fields = {}
        for wire, column in self.config.writable.items():
            if wire not in payload:
                continue
            value = payload[wire]
            fields[column] = value if wire in self.config.list_fields else as_text(value, wire)
        return fields

    async def _prepare(self, payload: Mapping, files: Mapping[str, UploadFile], require: bool) -> dict:
        """Validate, coerce and stage uploads. Returns column values."""
        present = {name: files[name] for name in self.config.files if files.get(name) is not None}
        if require:
            validate(payload, self.config.rules, present)
        fields = self._fields(payload)
        if self.config.coerce is not None:
            fields = await run_in_threadpool(self.config.coerce, self.db, fields)
        for name, upload in present.items():
            self.staged.append(await media.stage_upload(name, upload))
        self._advance(PipelineState.VALIDATED)
        return fields

    async def _store_media(self, fields: dict) -> None:
        if not self.staged:
            return
        for staged in self.staged:
            await run_in_threadpool(media.transform_in_place, staged)
        self._advance(PipelineState.MEDIA_TRANSFORMED)
        for staged in self.staged:
            fields[staged.field] = await run_in_threadpool(upload_staged, self.blob_store, staged)
        self._advance(PipelineState.MEDIA_STORED)

    def _cleanup(self) -> None:
        for staged in self.staged:
            staged.remove()

    def _written(self) -> None:
        if self.config.after_write is not None:
            self.config.after_write()

    async def create(self, payload: Mapping, files: Mapping[str, UploadFile] | None = None) -> dict:
        cfg = self.config
        try:
            fields = await self._prepare(payload, files or {}, require=True)
            await self._store_media(fields)
        except (ValidationError, DecodeError) as exc:
            return self._fail(exc, report=isinstance(exc, DecodeError))
        except StorageError as exc:
            return self._fail(exc, report=True)
        finally:
            self._cleanup()

        try:
            record = await run_in_threadpool(self.repo.create, fields)
        except DuplicateKeyError:
            return self._fail(ValidationError(f'This {cfg.noun} already exists in the database.'))
        except SQLAlchemyError as exc:
            return self._fail(RasclatError(
                f'An unknown error occurred while creating the {cfg.noun} in the database.', exc), report=True)
        self._advance(PipelineState.PERSISTED)
        self._written()

        if cfg.indexed:
            try:
                object_id = await run_in_threadpool(lambda: self.index.add(cfg.document(record)))
            except SearchIndexError as exc:
                # compensation: undo the insert
                await run_in_threadpool(self.repo.delete, record.id)
                self._written()
                return self._fail(SearchIndexError(
                    f'An unknown error occurred while creating the {cfg.noun} to the search index.', exc.cause or exc),
                    report=True)
            try:
                record = await run_in_threadpool(self.repo.set_object_id, record.id, object_id)
            except SQLAlchemyError as exc:
                return self._fail(RasclatError(
                    f'An unknown error occurred while updating the new {cfg.noun} with the given search index objectID.',
                    exc), report=True)
            self._advance(PipelineState.INDEX_SYNCED)

        self._advance(PipelineState.RESPONDED)
        return {'success': True, 'message': f'{cfg.label} added.', cfg.response_key: cfg.document(record)}

    async def update(self, payload: Mapping, files: Mapping[str, UploadFile] | None = None) -> dict:
        cfg = self.config
        record_id = payload.get('_id')
        if not isinstance(record_id, str) or not record_id.strip():
            return self._fail(ValidationError(f'No {cfg.noun} ID was provided.'))
        try:
            fields = await self._prepare(payload, files or {}, require=False)
            await self._store_media(fields)
        except (ValidationError, DecodeError) as exc:
            return self._fail(exc, report=isinstance(exc, DecodeError))
        except StorageError as exc:
            return self._fail(exc, report=True)
        finally:
            self._cleanup()

        try:
            record = await run_in_threadpool(self.repo.update, record_id, fields)
        except DuplicateKeyError:
            return self._fail(ValidationError(f'This {cfg.noun} already exists in the database.'))
        except SQLAlchemyError as exc:
            return self._fail(RasclatError(
                f'An unknown error occurred while updating the {cfg.noun} in the database.', exc), report=True)
        if record is None:
            return self._fail(NotFoundError(f'{cfg.label} could not be found.'))
        self._advance(PipelineState.PERSISTED)
        self._written()

        if cfg.indexed:
            try:
                await run_in_threadpool(lambda: self.index.save(record.object_id, cfg.document(record)))
            except SearchIndexError as exc:
                return self._fail(SearchIndexError(
                    f'An unknown error occurred while updating the {cfg.noun} to the search index.', exc.cause or exc),
                    report=True)
            self._advance(PipelineState.INDEX_SYNCED)

        self._advance(PipelineState.RESPONDED)
        return {'success': True, 'message': f'The {cfg.noun} has been updated.', cfg.response_key: cfg.document(record)}

    async def delete(self, payload: Mapping) -> dict:
        """Delete from the search index first, then from the database.

        If the index delete fails the record and its objectID stay, so the
        delete can be retried.
        """
        cfg = self.config
        record_id = payload.get('_id')
        if not isinstance(record_id, str) or not record_id.strip():
            return self._fail(ValidationError(f'No {cfg.noun} ID was provided.'))
        record = await run_in_threadpool(self.repo.get, record_id)
        if record is None:
            return self._fail(NotFoundError(f'{cfg.label} could not be found.'))
        if cfg.delete_guard is not None:
            refusal = await run_in_threadpool(cfg.delete_guard, self.db, record)
            if refusal:
                return self._fail(ValidationError(refusal))
        self._advance(PipelineState.VALIDATED)

        if cfg.indexed:
            try:
                await run_in_threadpool(lambda: self.index.delete(record.object_id))
            except SearchIndexError as exc:
                return self._fail(SearchIndexError(
                    f'An unknown error occurred while deleting the {cfg.noun} on the search index.', exc.cause or exc),
                    report=True)
            self._advance(PipelineState.INDEX_SYNCED)

        try:
            await run_in_threadpool(self.repo.delete, record_id)
        except SQLAlchemyError as exc:
            return self._fail(RasclatError('An error occurred.', exc), report=True)
        self._advance(PipelineState.PERSISTED)
        self._written()
        self._advance(PipelineState.RESPONDED)
        return {'success': True, 'message': f'{cfg.label} has been removed.'}


def list_documents(config: EntityConfig, db: Session) -> list[dict]:
    repo = config.repository(db)
    schema = config.list_schema or config.schema
    return [dump(schema, obj) for obj in repo.find_many(options=config.list_options())]


def find_document(config: EntityConfig, db: Session, identifier: str) -> Optional[dict]:
    repo = config.repository(db)
    record = repo.find_one(identifier, options=config.detail_options())
    if record is None:
        return None
    return dump(config.detail_schema or config.schema, record)
