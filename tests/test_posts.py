from datetime import datetime, timedelta, timezone

from app.config import settings
from app.modules.posts.schemas import PostResponse
from app.modules.posts.service import compute_stats


def post_form(author_id, **overrides):
    form = {
        "title": "Morning walks",
        "content": "Ten minutes outside helps.",
        "category_id": "physical-activity",
        "author_id": author_id,
    }
    form.update(overrides)
    return form


def test_reader_cannot_create_post(client, reader, author):
    _, headers = reader
    resp = client.post("/api/v1/posts", headers=headers, data=post_form(author["id"]))
    assert resp.status_code == 403
    assert resp.headers["X-Redirect-To"] == "/feeds"


def test_published_post_is_first_in_matching_feed(client, reader, publisher, author, backend):
    reader_user, reader_headers = reader
    _, publisher_headers = publisher
    backend.insert("user_preferences", user_id=reader_user.id,
                   selected_categories=["physical-activity", "relationships"])
    backend.insert("posts", title="Older", content="...", category_id="relationships",
                   author_id=author["id"], publisher_id="someone-else")

    resp = client.post(
        "/api/v1/posts",
        headers=publisher_headers,
        data=post_form(author["id"]),
        files={"thumbnail": ("walk.png", b"\x89PNG fake", "image/png")},
    )
    assert resp.status_code == 201, resp.text
    created = resp.json()
    assert created["author"]["name"] == "Ada Writer"
    assert created["category_name"] == "Physical activity"
    assert created["thumbnail_url"].startswith("https://fake.supabase.co/storage/v1/object/public/post-images/thumbnails/")
    (bucket, path), = backend.uploads.keys()
    assert bucket == "post-images"
    assert path.endswith(".png")

    feed = client.get("/api/v1/feeds", headers=reader_headers).json()
    assert feed["filtered"] is True
    assert feed["category_names"] == ["Physical activity", "Relationships"]
    assert [p["title"] for p in feed["posts"]] == ["Morning walks", "Older"]
    assert feed["posts"][0]["author"]["name"] == "Ada Writer"


def test_feed_excludes_other_categories(client, reader, author, backend):
    user, headers = reader
    backend.insert("user_preferences", user_id=user.id,
                   selected_categories=["relationships", "career-development"])
    backend.insert("posts", title="Budgeting", content="...", category_id="financial-wellbeing",
                   author_id=author["id"], publisher_id="p")
    feed = client.get("/api/v1/feeds", headers=headers).json()
    assert feed["posts"] == []
    assert feed["needs_onboarding"] is False


def test_reader_without_categories_needs_onboarding(client, reader):
    _, headers = reader
    feed = client.get("/api/v1/feeds", headers=headers).json()
    assert feed["needs_onboarding"] is True
    assert feed["posts"] == []


def test_publisher_sees_unfiltered_feed(client, publisher, author, backend):
    _, headers = publisher
    for category in ("financial-wellbeing", "relationships"):
        backend.insert("posts", title=category, content="...", category_id=category,
                       author_id=author["id"], publisher_id="p")
    feed = client.get("/api/v1/feeds", headers=headers).json()
    assert feed["filtered"] is False
    assert [p["title"] for p in feed["posts"]] == ["relationships", "financial-wellbeing"]


def test_non_image_thumbnail_is_rejected_before_upload(client, publisher, author, backend):
    _, headers = publisher
    resp = client.post(
        "/api/v1/posts",
        headers=headers,
        data=post_form(author["id"]),
        files={"thumbnail": ("notes.txt", b"hello", "text/plain")},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Please select a valid image file"
    assert backend.uploads == {}
    assert backend.rows("posts") == []


def test_oversized_thumbnail_is_rejected_before_upload(client, publisher, author, backend):
    _, headers = publisher
    resp = client.post(
        "/api/v1/posts",
        headers=headers,
        data=post_form(author["id"]),
        files={"thumbnail": ("big.jpg", b"x" * (settings.thumbnail_max_bytes + 1), "image/jpeg")},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Image size must be less than 5MB"
    assert backend.uploads == {}
    assert backend.rows("posts") == []


def test_post_with_direct_thumbnail_url(client, publisher, author, backend):
    _, headers = publisher
    resp = client.post("/api/v1/posts", headers=headers,
                       data=post_form(author["id"], thumbnail_url=" https://img.example.com/a.png "))
    assert resp.status_code == 201
    assert resp.json()["thumbnail_url"] == "https://img.example.com/a.png"
    assert backend.uploads == {}


def test_post_validation(client, publisher, author):
    _, headers = publisher
    resp = client.post("/api/v1/posts", headers=headers, data=post_form(author["id"], title="   "))
    assert resp.status_code == 400
    resp = client.post("/api/v1/posts", headers=headers, data=post_form(author["id"], category_id="astrology"))
    assert resp.status_code == 400
    resp = client.post("/api/v1/posts", headers=headers, data=post_form("missing-author"))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Selected author not found"


def test_publisher_can_only_change_own_posts(client, publisher, author, backend):
    user, headers = publisher
    own = backend.insert("posts", title="Mine", content="...", category_id="relationships",
                         author_id=author["id"], publisher_id=user.id)
    other = backend.insert("posts", title="Theirs", content="...", category_id="relationships",
                           author_id=author["id"], publisher_id="someone-else")

    resp = client.put(f"/api/v1/posts/{own['id']}", headers=headers, json={"title": "Mine, edited"})
    assert resp.status_code == 200
    assert resp.json()["title"] == "Mine, edited"

    resp = client.put(f"/api/v1/posts/{other['id']}", headers=headers, json={"title": "Hijacked"})
    assert resp.status_code == 404
    assert backend.find("posts", other["id"])["title"] == "Theirs"

    assert client.delete(f"/api/v1/posts/{other['id']}", headers=headers).status_code == 404
    assert client.delete(f"/api/v1/posts/{own['id']}", headers=headers).status_code == 204
    assert backend.find("posts", own["id"]) is None


def test_publisher_dashboard_stats(client, publisher, author, backend):
    user, headers = publisher
    old = (datetime.now(timezone.utc) - timedelta(days=10)).isoformat()
    backend.insert("posts", title="Old", content="...", category_id="relationships",
                   author_id=author["id"], publisher_id=user.id, created_at=old)
    backend.insert("posts", title="New", content="...", category_id="relationships",
                   author_id=author["id"], publisher_id=user.id)
    backend.insert("posts", title="Not mine", content="...", category_id="relationships",
                   author_id=author["id"], publisher_id="someone-else")

    body = client.get("/api/v1/publisher-dashboard", headers=headers).json()
    assert [p["title"] for p in body["posts"]] == ["New", "Old"]
    assert body["stats"] == {"total_posts": 2, "recent_posts": 1}


def test_compute_stats_window_edges():
    now = datetime(2024, 5, 10, tzinfo=timezone.utc)

    def post(created_at):
        return PostResponse(id="p", title="t", content="c", category_id="relationships", created_at=created_at)

    stats = compute_stats([
        post(now - timedelta(days=7, seconds=1)),
        post(now - timedelta(days=6)),
        post(datetime(2024, 5, 9)),
    ], now=now)
    assert stats.total_posts == 3
    assert stats.recent_posts == 2
