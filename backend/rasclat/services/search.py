"""Search index mirror of artists, shows, recordings, blog posts and projects.

Talks to the Algolia REST API with plain requests. The index assigns the
``objectID`` on first insert; callers store it on the record so later saves
and deletes can find the entry again.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional

import requests

from ..core.config import get_settings
from ..core.errors import SearchIndexError

logger = logging.getLogger(__name__)

TIMEOUT = 10


def _without_null_id(document: Dict[str, Any]) -> Dict[str, Any]:
    # the auto-id endpoint rejects an explicit null objectID
    if "objectID" in document and not document["objectID"]:
        return {k: v for k, v in document.items() if k != "objectID"}
    return document


class AlgoliaIndex:
    def __init__(self, app_id: str, api_key: str, name: str, session: requests.Session | None = None):
        if not app_id or not api_key:
            raise SearchIndexError("Algolia credentials not configured (ALGOLIA_APP_ID / ALGOLIA_ADMIN_KEY)")
        self.name = name
        self.base = f"https://{app_id}.algolia.net/1/indexes/{name}"
        self.session = session or requests.Session()
        self.session.headers.update({
            "X-Algolia-Application-Id": app_id,
            "X-Algolia-API-Key": api_key,
            "Content-Type": "application/json",
        })

    def _call(self, method: str, path: str = "", **kwargs) -> Dict[str, Any]:
        url = f"{self.base}{path}"
        try:
            resp = self.session.request(method, url, timeout=TIMEOUT, **kwargs)
        except requests.RequestException as exc:
            raise SearchIndexError(f"Search index request failed: {method} {self.name}{path}", exc) from exc
        if resp.status_code == 404 and method == "GET":
            return {}
        if resp.status_code >= 400:
            raise SearchIndexError(f"Search index responded {resp.status_code}: {resp.text}")
        return resp.json() if resp.content else {}

    def add(self, document: Dict[str, Any]) -> str:
        js = self._call("POST", json=_without_null_id(document))
        object_id = js.get("objectID")
        if not object_id:
            raise SearchIndexError("Search index returned no objectID")
        return object_id

    def add_many(self, documents: Iterable[Dict[str, Any]]) -> int:
        """Batch insert; documents that carry an objectID keep it."""
        requests_ = [
            {"action": "updateObject" if doc.get("objectID") else "addObject", "body": _without_null_id(doc)}
            for doc in documents
        ]
        if not requests_:
            return 0
        self._call("POST", "/batch", json={"requests": requests_})
        return len(requests_)

    def save(self, object_id: str, document: Dict[str, Any]) -> None:
        if not object_id:
            raise SearchIndexError("Record has no search index objectID")
        self._call("PUT", f"/{object_id}", json={**document, "objectID": object_id})

    def get(self, object_id: str) -> Optional[Dict[str, Any]]:
        js = self._call("GET", f"/{object_id}")
        return js or None

    def delete(self, object_id: Optional[str]) -> None:
        if not object_id:
            raise SearchIndexError("Record has no search index objectID")
        self._call("DELETE", f"/{object_id}")

    def clear(self) -> None:
        self._call("POST", "/clear")


class MemoryIndex:
    """Dict backed stand-in with the same contract."""

    def __init__(self, name: str):
        self.name = name
        self.objects: Dict[str, Dict[str, Any]] = {}

    def add(self, document: Dict[str, Any]) -> str:
        object_id = uuid.uuid4().hex
        self.objects[object_id] = {**document, "objectID": object_id}
        return object_id

    def add_many(self, documents: Iterable[Dict[str, Any]]) -> int:
        count = 0
        for doc in documents:
            if doc.get("objectID"):
                self.objects[doc["objectID"]] = dict(doc)
            else:
                self.add(doc)
            count += 1
        return count

    def save(self, object_id: str, document: Dict[str, Any]) -> None:
        if not object_id:
            raise SearchIndexError("Record has no search index objectID")
        self.objects[object_id] = {**document, "objectID": object_id}

    def get(self, object_id: str) -> Optional[Dict[str, Any]]:
        return self.objects.get(object_id)

    def delete(self, object_id: Optional[str]) -> None:
        if not object_id:
            raise SearchIndexError("Record has no search index objectID")
        self.objects.pop(object_id, None)

    def clear(self) -> None:
        self.objects.clear()

    def all(self) -> List[Dict[str, Any]]:
        return list(self.objects.values())


_indexes: Dict[str, Any] = {}


def get_search_index(entity: str):
    """Index client for an entity type ("artists", "shows", ...), created once."""
    if entity not in _indexes:
        settings = get_settings()
        name = getattr(settings, f"algolia_index_{entity}")
        if settings.search_backend == "memory":
            _indexes[entity] = MemoryIndex(name)
        else:
            _indexes[entity] = AlgoliaIndex(settings.algolia_app_id, settings.algolia_admin_key, name)
        logger.info("search index %s -> %s (%s)", entity, name, settings.search_backend)
    return _indexes[entity]


def reset_indexes() -> None:
    _indexes.clear()
