from rasclat.services.search import get_search_index
from rasclat.services.storage import get_blob_store


def test_create_artist_persists_and_indexes(client, auth):
    r = client.post("/artists", json={"title": "Kerosene Kid"}, headers=auth)
    body = r.json()
    assert r.status_code == 200
    assert body["success"] is True
    assert body["message"] == "Artist added."
    artist = body["artist"]
    assert artist["slug"] == "kerosene-kid"
    assert len(artist["_id"]) == 24
    assert artist["objectID"]
    indexed = get_search_index("artists").get(artist["objectID"])
    assert indexed["title"] == "Kerosene Kid"


def test_missing_title(client, auth):
    r = client.post("/artists", json={}, headers=auth)
    assert r.json() == {"success": False, "message": "No artist title was provided."}


def test_duplicate_title(client, auth, make_artist):
    make_artist("Twin")
    r = client.post("/artists", json={"title": "Twin"}, headers=auth)
    assert r.json() == {"success": False, "message": "This artist already exists in the database."}
    assert len(client.get("/artists").json()) == 1
    assert len(get_search_index("artists").all()) == 1


def test_renaming_to_an_existing_title_is_refused(client, auth, make_artist):
    make_artist("Taken")
    other = make_artist("Free")
    r = client.put("/artists/update", json={"_id": other["_id"], "title": "Taken"}, headers=auth)
    assert r.json() == {"success": False, "message": "This artist already exists in the database."}
    assert get_search_index("artists").get(other["objectID"])["title"] == "Free"
    assert client.get(f"/artists/artist/{other['_id']}").json()["title"] == "Free"


def test_numeric_title_is_stored_as_text(client, auth):
    body = client.post("/artists", json={"title": 808}, headers=auth).json()
    assert body["success"] is True
    assert body["artist"]["title"] == "808"
    assert body["artist"]["slug"] == "808"


def test_structured_title_is_rejected(client, auth):
    r = client.post("/artists", json={"title": {"name": "x"}}, headers=auth)
    assert r.status_code == 200
    assert r.json() == {"success": False, "message": "The given title value is not valid."}
    r = client.post("/artists", json={"title": ["a", "b"]}, headers=auth)
    assert r.json() == {"success": False, "message": "The given title value is not valid."}
    assert client.get("/artists").json() == []


def test_image_upload_is_resized_and_stored(client, auth, png):
    r = client.post("/artists", data={"title": "Pictured"}, files={"image": ("Press Photo.png", png, "image/png")},
                    headers=auth)
    artist = r.json()["artist"]
    assert artist["image"].startswith("memory://uploads/")
    assert artist["image"].endswith("/images/press-photo.jpg")
    key = artist["image"].split("memory://uploads/", 1)[1]
    assert get_blob_store().objects[key][:2] == b"\xff\xd8"


def test_broken_image_fails_before_persisting(client, auth):
    r = client.post("/artists", data={"title": "Broken"}, files={"image": ("x.png", b"nope", "image/png")},
                    headers=auth)
    body = r.json()
    assert body["success"] is False
    assert body["message"] == "Image resizing went wrong. Please view log files!"
    assert client.get("/artists").json() == []


def test_get_by_id_and_slug(client, make_artist):
    artist = make_artist("Mala")
    by_id = client.get(f"/artists/artist/{artist['_id']}")
    by_slug = client.get("/artists/artist/mala")
    assert by_id.status_code == by_slug.status_code == 200
    assert by_id.json()["_id"] == by_slug.json()["_id"] == artist["_id"]
    assert by_id.json()["recordings"] == []


def test_unknown_artist_is_404(client):
    for identifier in ("nobody", "0" * 24):
        r = client.get(f"/artists/artist/{identifier}")
        assert r.status_code == 404
        assert r.json() == {"success": False, "message": "Artist not found."}


def test_list_sorted_by_slug(client, make_artist):
    for title in ("Zion Train", "Aba Shanti", "Mad Professor"):
        make_artist(title)
    assert [a["title"] for a in client.get("/artists").json()] == ["Aba Shanti", "Mad Professor", "Zion Train"]


def test_artist_detail_embeds_recordings_newest_first(client, make_recording, make_artist, make_show, make_genre):
    artist = make_artist("Resident")
    show = make_show()
    genre = make_genre()
    make_recording("Older", "2024-01-01T20:00:00Z", show=show, artists=[artist], genres=[genre])
    make_recording("Newer", "2024-03-01T20:00:00Z", show=show, artists=[artist], genres=[genre])
    detail = client.get("/artists/artist/resident").json()
    assert [r["title"] for r in detail["recordings"]] == ["Newer", "Older"]
    assert detail["recordings"][0]["genres"][0]["title"] == "Dub"
    listed = client.get("/artists").json()[0]
    assert listed["recordings"][0]["genres"] == [genre["_id"]]


def test_update_changes_slug_and_index(client, auth, make_artist):
    artist = make_artist("Old Name")
    r = client.put("/artists/update", json={"_id": artist["_id"], "title": "New Name"}, headers=auth)
    body = r.json()
    assert body["message"] == "The artist has been updated."
    assert body["artist"]["slug"] == "new-name"
    assert get_search_index("artists").get(artist["objectID"])["title"] == "New Name"
    assert client.get("/artists/artist/new-name").status_code == 200


def test_update_requires_id_and_existing_record(client, auth):
    assert client.put("/artists/update", json={"title": "x"}, headers=auth).json()["message"] == \
        "No artist ID was provided."
    r = client.put("/artists/update", json={"_id": "f" * 24, "title": "x"}, headers=auth)
    assert r.json() == {"success": False, "message": "Artist could not be found."}


def test_delete_removes_record_and_index_entry(client, auth, make_artist):
    artist = make_artist("Gone Soon")
    r = client.request("DELETE", "/artists/delete", json={"_id": artist["_id"]}, headers=auth)
    assert r.json() == {"success": True, "message": "Artist has been removed."}
    assert get_search_index("artists").get(artist["objectID"]) is None
    assert client.get(f"/artists/artist/{artist['_id']}").status_code == 404


def test_delete_unknown(client, auth):
    r = client.request("DELETE", "/artists/delete", json={"_id": "f" * 24}, headers=auth)
    assert r.json() == {"success": False, "message": "Artist could not be found."}
    r = client.request("DELETE", "/artists/delete", json={}, headers=auth)
    assert r.json() == {"success": False, "message": "No artist ID was provided."}
