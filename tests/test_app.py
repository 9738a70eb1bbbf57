def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json["status"] == "ok"


def test_not_found(client):
    response = client.get("/x")

    assert response.status_code == 404
    assert response.json["error"]["name"] == "not found"
    assert response.json["error"]["description"]


def test_method_not_allowed(client):
    response = client.get("/playlists")

    assert response.status_code == 405
    assert response.json["error"]["name"] == "method not allowed"


def test_create_playlist(client, big_buck_bunny):
    response = client.post("/playlists", data=big_buck_bunny)

    assert response.status_code == 200
    assert response.json["target_duration"] == 20
    assert response.json["version"] == 4
    assert response.json["ended"] is True
    assert len(response.json["segments"]) == 8
    assert [run["total_duration"] for run in response.json["discontinuities"]] == [
        25.458,
        34.376,
        41.126,
    ]


def test_create_playlist_without_body(client):
    response = client.post("/playlists", data="")

    assert response.status_code == 400
    assert response.json["error"]["name"] == "bad request"
    assert response.json["error"]["description"] == "Missing playlist body"


def test_create_invalid_playlist(client):
    response = client.post("/playlists", data="#EXT-X-VERSION:3\n")

    assert response.status_code == 422
    assert response.json["error"]["name"] == "unprocessable entity"
    assert (
        response.json["error"]["description"]
        == "line 1: not a valid Extended M3U manifest"
    )


def test_create_playlist_with_dangling_segment(client):
    response = client.post(
        "/playlists", data="#EXTM3U\n#EXT-X-TARGETDURATION:10\n#EXTINF:1,\n"
    )

    assert response.status_code == 422
    assert "#EXTINF" in response.json["error"]["description"]


def test_create_playlist_with_oversized_number(client):
    body = "#EXTM3U\n#EXT-X-TARGETDURATION:" + "9" * 5000 + "\n"

    response = client.post("/playlists", data=body)

    assert response.status_code == 422
    assert response.json["error"]["name"] == "unprocessable entity"
    assert "#EXT-X-TARGETDURATION: invalid number" in (
        response.json["error"]["description"]
    )
