def test_genre_lifecycle(client, auth):
    r = client.post("/genres", json={"title": "Dub", "color": "#00FF00"}, headers=auth)
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Genre added."
    genre = body["genre"]
    assert genre["slug"] == "dub"
    assert "objectID" not in genre

    r = client.put("/genres/update", json={"_id": genre["_id"], "color": "#FF0000"}, headers=auth)
    assert r.json()["message"] == "The genre has been updated."
    assert r.json()["genre"]["color"] == "#FF0000"

    r = client.request("DELETE", "/genres/delete", json={"_id": genre["_id"]}, headers=auth)
    assert r.json() == {"success": True, "message": "Genre has been removed."}
    assert client.get("/genres").json() == []


def test_genre_required_fields(client, auth):
    assert client.post("/genres", json={"color": "#fff"}, headers=auth).json()["message"] == \
        "No genre title was given."
    assert client.post("/genres", json={"title": "Dub"}, headers=auth).json()["message"] == \
        "No genre color was provided."


def test_duplicate_genre(client, auth, make_genre):
    make_genre("Dub")
    r = client.post("/genres", json={"title": "Dub", "color": "#123456"}, headers=auth)
    assert r.json() == {"success": False, "message": "This genre already exists in the database."}


def test_genres_newest_first(client, make_genre):
    make_genre("Dub")
    make_genre("Jungle")
    make_genre("Ambient")
    assert [g["title"] for g in client.get("/genres").json()] == ["Ambient", "Jungle", "Dub"]


def test_unknown_genre_answers_200(client):
    r = client.get("/genres/genre/polka")
    assert r.status_code == 200
    assert r.json() == {"success": False, "message": "Genre not found."}


def test_genre_detail_lists_recordings(client, make_recording, make_genre):
    genre = make_genre("Steppers")
    recording = make_recording(genres=[genre])
    detail = client.get("/genres/genre/steppers").json()
    assert [r["_id"] for r in detail["recordings"]] == [recording["_id"]]
