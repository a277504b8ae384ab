import logging


def test_favorites_flow(client, make_user, make_video, auth_headers):
    u1 = make_user("u1")
    u2 = make_user("u2")
    v1 = make_video(u2, "v1", views=7, is_published=False)

    r = client.post(
        "/api/playlists/",
        headers=auth_headers(u1),
        json={"name": "Favorites", "description": "x"},
    )
    assert r.status_code == 201
    playlist = r.json()["playlist"]
    assert playlist["owner"] == u1.id
    assert playlist["videos"] == []
    playlist_id = playlist["id"]

    r = client.patch(f"/api/playlists/add/{v1.id}/{playlist_id}", headers=auth_headers(u2))
    assert r.status_code == 403

    r = client.patch(f"/api/playlists/add/{v1.id}/{playlist_id}", headers=auth_headers(u1))
    assert r.status_code == 200
    assert r.json()["playlist"]["videos"] == [v1.id]

    r = client.get(f"/api/playlists/{playlist_id}")
    assert r.status_code == 404

    r = client.get(f"/api/playlists/{playlist_id}", headers=auth_headers(u1))
    assert r.status_code == 200
    body = r.json()["playlist"]
    assert body["total_videos"] == 1
    assert body["total_views"] == 7
    assert body["videos"][0]["id"] == v1.id
    assert body["owner"]["username"] == "u1"


def test_mutations_require_identity(client):
    r = client.post("/api/playlists/", json={"name": "Favorites", "description": "x"})
    assert r.status_code == 401


def test_error_statuses(client, make_user, make_video, auth_headers):
    user = make_user("u1")
    headers = auth_headers(user)

    r = client.post("/api/playlists/", headers=headers, json={"name": "  ", "description": "x"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Name and description are both required"

    r = client.get("/api/playlists/not-an-id")
    assert r.status_code == 400

    r = client.get("/api/playlists/%C2%B2")
    assert r.status_code == 400

    r = client.delete("/api/playlists/999", headers=headers)
    assert r.status_code == 404

    r = client.get("/api/comments/999")
    assert r.status_code == 404

    video = make_video(user)
    r = client.get(f"/api/comments/{video.id}?limit=0")
    assert r.status_code == 400

    r = client.get(f"/api/comments/{video.id}?page={10**20}")
    assert r.status_code == 200
    assert r.json()["comments"]["items"] == []


def test_user_playlists_endpoint(client, make_user, make_video, auth_headers):
    user = make_user("u1")
    video = make_video(user, "cover", views=4)
    headers = auth_headers(user)

    r = client.get(f"/api/playlists/user/{user.id}")
    assert r.status_code == 200
    assert r.json()["playlists"] == []

    playlist_id = client.post(
        "/api/playlists/", headers=headers, json={"name": "Mix", "description": "d"}
    ).json()["playlist"]["id"]
    client.patch(f"/api/playlists/add/{video.id}/{playlist_id}", headers=headers)

    r = client.get(f"/api/playlists/user/{user.id}")
    summaries = r.json()["playlists"]
    assert len(summaries) == 1
    assert summaries[0]["total_videos"] == 1
    assert summaries[0]["total_views"] == 4
    assert summaries[0]["first_video_thumbnail"] == video.thumbnail_url


def test_comment_lifecycle(client, make_user, make_video, auth_headers):
    author = make_user("author")
    fan = make_user("fan")
    video = make_video(author)

    r = client.post(f"/api/comments/{video.id}", headers=auth_headers(author), json={"content": "first!"})
    assert r.status_code == 201
    comment_id = r.json()["comment"]["id"]

    r = client.post(f"/api/comments/c/{comment_id}/like", headers=auth_headers(fan))
    assert r.status_code == 200

    r = client.get(f"/api/comments/{video.id}", headers=auth_headers(fan))
    assert r.status_code == 200
    page = r.json()["comments"]
    assert page["total_items"] == 1
    assert page["page"] == 1 and page["limit"] == 10
    assert page["items"][0]["likes_count"] == 1
    assert page["items"][0]["is_liked"] is True
    assert page["items"][0]["owner"]["username"] == "author"

    r = client.patch(f"/api/comments/c/{comment_id}", headers=auth_headers(fan), json={"content": "mine"})
    assert r.status_code == 403

    r = client.patch(f"/api/comments/c/{comment_id}", headers=auth_headers(author), json={"content": "edited"})
    assert r.status_code == 200
    assert r.json()["comment"]["content"] == "edited"

    r = client.delete(f"/api/comments/c/{comment_id}", headers=auth_headers(fan))
    assert r.status_code == 403

    r = client.delete(f"/api/comments/c/{comment_id}", headers=auth_headers(author))
    assert r.status_code == 200
    assert r.json()["deleted_comment_id"] == comment_id

    r = client.get(f"/api/comments/{video.id}")
    assert r.json()["comments"]["items"] == []


def test_health(client):
    r = client.get("/healthChecker")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_playlist_reads_are_logged(client, make_user, caplog):
    user = make_user("u1")

    with caplog.at_level(logging.INFO, logger="playlists"):
        r = client.get(f"/api/playlists/user/{user.id}")

    assert r.status_code == 200
    assert f"Retrieved 0 playlists for user {user.id}" in caplog.text
