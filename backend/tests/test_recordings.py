from datetime import datetime

from rasclat.core.cache import recordings_cache
from rasclat.models.radio import Recording
from rasclat.services.search import get_search_index
from rasclat.services.storage import get_blob_store


def _form(show, artists, genres, /, **overrides):
    data = {
        "title": "Night Shift #1",
        "show": show["_id"],
        "artists": [a["_id"] for a in artists],
        "genres": [g["_id"] for g in genres],
        "timeStart": "2024-05-01T20:00:00Z",
        "timeEnd": "2024-05-01T22:00:00Z",
    }
    data.update(overrides)
    return {k: v for k, v in data.items() if v is not None}


def test_create_recording_uploads_both_files(client, make_recording):
    recording = make_recording()
    assert recording["audio"].endswith("/audio/night-shift-01.mp3")
    assert recording["image"].endswith("/images/cover.jpg")
    assert len(get_blob_store().objects) == 2
    assert recording["timeStart"].startswith("2024-05-01T20:00:00")
    assert len(recording["artists"]) == 1 and len(recording["genres"]) == 1
    assert get_search_index("recordings").get(recording["objectID"])["title"] == "Night Shift #1"


def test_missing_audio_file(client, auth, png, make_show, make_artist, make_genre):
    data = _form(make_show(), [make_artist()], [make_genre()])
    r = client.post("/recordings", data=data, files={"image": ("cover.png", png, "image/png")}, headers=auth)
    assert r.json() == {"success": False, "message": "No audio file was uploaded."}
    assert get_blob_store().objects == {}


def test_required_fields_reported_in_order(client, auth, make_show, make_artist, make_genre):
    show, artist, genre = make_show(), make_artist(), make_genre()
    expectations = [
        ({"title": None}, "No recording title was provided."),
        ({"artists": None}, "No artist was given."),
        ({"genres": None}, "No describing genre was given."),
        ({"timeStart": None}, "No starting time was provided."),
        ({"timeEnd": None}, "No ending time was provided."),
        ({"show": None}, "No show was provided."),
    ]
    for overrides, message in expectations:
        r = client.post("/recordings", data=_form(show, [artist], [genre], **overrides), headers=auth)
        assert r.json()["message"] == message


def test_unknown_references_are_rejected(client, auth, png, make_show, make_artist, make_genre):
    show, artist, genre = make_show(), make_artist(), make_genre()
    files = {"audio": ("a.mp3", b"ID3", "audio/mpeg"), "image": ("c.png", png, "image/png")}
    r = client.post("/recordings", data=_form(show, [artist], [genre], show="f" * 24), files=files, headers=auth)
    assert r.json()["message"] == "The given show could not be found."
    r = client.post("/recordings", data=_form(show, [artist], [genre], artists="f" * 24), files=files, headers=auth)
    assert r.json()["message"] == "One or more of the given artists could not be found."
    assert get_blob_store().objects == {}


def test_detail_joins_show_artists_and_genres(client, make_recording):
    recording = make_recording()
    for identifier in (recording["_id"], recording["slug"]):
        detail = client.get(f"/recordings/recording/{identifier}").json()
        assert detail["show"]["title"] == "Night Shift"
        assert detail["artists"][0]["title"] == "Kerosene Kid"
        assert detail["genres"][0]["title"] == "Dub"


def test_unknown_recording_answers_200(client):
    r = client.get("/recordings/recording/nothing")
    assert r.status_code == 200
    assert r.json() == {"success": False, "message": "Recording not found."}


def test_list_newest_first(client, make_recording, make_show, make_artist, make_genre):
    show, artist, genre = make_show(), make_artist(), make_genre()
    make_recording("Old", "2023-01-01T20:00:00Z", show=show, artists=[artist], genres=[genre])
    make_recording("New", "2024-01-01T20:00:00Z", show=show, artists=[artist], genres=[genre])
    listed = client.get("/recordings").json()
    assert [r["title"] for r in listed] == ["New", "Old"]
    assert listed[0]["show"]["_id"] == show["_id"]


def test_list_is_cached_until_a_recording_write(client, auth, db, make_recording, make_show):
    show = make_show()
    assert client.get("/recordings").json() == []
    # written behind the API's back: the cached list does not see it
    db.add(Recording(title="Sneaky", show_id=show["_id"], audio="a", image="i",
                     time_start=datetime(2024, 1, 1), time_end=datetime(2024, 1, 1, 2)))
    db.commit()
    assert client.get("/recordings").json() == []
    make_recording("Announced", show=show)
    assert len(recordings_cache()) == 0
    assert {r["title"] for r in client.get("/recordings").json()} == {"Sneaky", "Announced"}


def test_update_recording_relations(client, auth, make_recording, make_artist):
    recording = make_recording()
    guest = make_artist("Guest Selector")
    r = client.put("/recordings/update", data={"_id": recording["_id"],
                                               "artists": f"{recording['artists'][0]},{guest['_id']}"},
                   headers=auth)
    body = r.json()
    assert body["message"] == "The recording has been updated."
    assert set(body["recording"]["artists"]) == {recording["artists"][0], guest["_id"]}
    detail = client.get(f"/recordings/recording/{recording['_id']}").json()
    assert {a["title"] for a in detail["artists"]} == {"Kerosene Kid", "Guest Selector"}


def test_delete_recording(client, auth, make_recording):
    recording = make_recording()
    r = client.request("DELETE", "/recordings/delete", json={"_id": recording["_id"]}, headers=auth)
    assert r.json() == {"success": True, "message": "Recording has been removed."}
    assert get_search_index("recordings").all() == []
    assert client.get("/recordings").json() == []


def test_scalar_and_structured_id_lists_on_update(client, auth, make_recording):
    recording = make_recording()
    r = client.put("/recordings/update", json={"_id": recording["_id"], "artists": 5}, headers=auth)
    assert r.status_code == 200
    assert r.json() == {"success": False, "message": "One or more of the given artists could not be found."}
    r = client.put("/recordings/update", json={"_id": recording["_id"], "genres": {"id": "x"}}, headers=auth)
    assert r.json() == {"success": False, "message": "The given genres could not be read."}
    stored = client.get(f"/recordings/recording/{recording['_id']}").json()
    assert [a["_id"] for a in stored["artists"]] == recording["artists"]
