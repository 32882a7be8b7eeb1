import asyncio

from rasclat.core.errors import SearchIndexError, StorageError
from rasclat.services import search, storage
from rasclat.services.entities import ARTISTS
from rasclat.services.pipeline import PipelineState, WritePipeline
from rasclat.services.search import MemoryIndex


class FailingIndex(MemoryIndex):
    def __init__(self, fail_on):
        super().__init__("artists")
        self.fail_on = fail_on

    def add(self, document):
        if self.fail_on == "add":
            raise SearchIndexError("index down", ConnectionError("refused"))
        return super().add(document)

    def delete(self, object_id):
        if self.fail_on == "delete":
            raise SearchIndexError("index down", ConnectionError("refused"))
        super().delete(object_id)


class FailingStore:
    def put(self, path, key, content_type=None):
        raise StorageError(storage.UPLOAD_FAILED, OSError("bucket gone"))

    def delete(self, key):
        pass


def test_states_of_a_successful_create(db):
    pipeline = WritePipeline(ARTISTS, db, index=MemoryIndex("artists"))
    result = asyncio.run(pipeline.create({"title": "Staged"}))
    assert result["success"] is True
    assert pipeline.state is PipelineState.RESPONDED


def test_validation_failure_stops_the_pipeline(db):
    index = MemoryIndex("artists")
    pipeline = WritePipeline(ARTISTS, db, index=index)
    result = asyncio.run(pipeline.create({}))
    assert result == {"success": False, "message": "No artist title was provided."}
    assert pipeline.state is PipelineState.ERRORED
    assert index.all() == []


def test_failed_index_add_rolls_back_the_record(client, auth, monkeypatch):
    monkeypatch.setitem(search._indexes, "artists", FailingIndex("add"))
    r = client.post("/artists", json={"title": "Unlucky"}, headers=auth)
    body = r.json()
    assert body["success"] is False
    assert body["message"] == "An unknown error occurred while creating the artist to the search index."
    assert client.get("/artists").json() == []
    # the title is free again
    monkeypatch.setitem(search._indexes, "artists", MemoryIndex("artists"))
    assert client.post("/artists", json={"title": "Unlucky"}, headers=auth).json()["success"] is True


def test_failed_index_delete_keeps_the_record(client, auth, make_artist, monkeypatch):
    artist = make_artist("Sticky")
    monkeypatch.setitem(search._indexes, "artists", FailingIndex("delete"))
    r = client.request("DELETE", "/artists/delete", json={"_id": artist["_id"]}, headers=auth)
    assert r.json()["message"] == "An unknown error occurred while deleting the artist on the search index."
    assert client.get(f"/artists/artist/{artist['_id']}").status_code == 200


def test_record_without_object_id_cannot_be_deleted(client, auth, db):
    artist = ARTISTS.repository(db).create({"title": "Never Indexed"})
    r = client.request("DELETE", "/artists/delete", json={"_id": artist.id}, headers=auth)
    assert r.json()["success"] is False
    assert client.get("/artists/artist/never-indexed").status_code == 200


def test_upload_failure_persists_nothing(client, auth, png, monkeypatch):
    monkeypatch.setattr(storage, "_store", FailingStore())
    r = client.post("/artists", data={"title": "No Picture"}, files={"image": ("p.png", png, "image/png")},
                    headers=auth)
    body = r.json()
    assert body["success"] is False
    assert body["message"] == storage.UPLOAD_FAILED
    assert client.get("/artists").json() == []
