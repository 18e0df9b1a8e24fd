import asyncio

from threadline.api.v1 import feed as feed_routes
from threadline.config.settings import Settings
from threadline.db.dao import PostDAO
from threadline.db.models import Post, User
from sqlalchemy import select, func, update


async def register(client, username):
    resp = await client.post("/api/v1/user/register", json={
        "name": username.title(),
        "username": username,
        "email": f"{username}@example.com",
        "password": "secret123",
    })
    assert resp.status_code == 200
    data = resp.json()["data"]
    return data["user"]["user_id"], {"Authorization": f"Bearer {data['access_token']}"}


async def test_health_endpoints(client):
    root = await client.get("/")
    health = await client.get("/health")

    assert root.json()["status"] == "ok"
    assert health.status_code == 200
    assert health.json()["status"] == "healthy"


async def test_post_like_and_feed_flow(client):
    alice_id, alice = await register(client, "alice")
    bob_id, bob = await register(client, "bob")

    created = await client.post("/api/v1/posts", json={"text": "hello world"}, headers=alice)
    assert created.status_code == 200
    post_id = created.json()["data"]["post_id"]

    follow = await client.post(f"/api/v1/user/{alice_id}/follow", headers=bob)
    assert follow.json()["data"] == {"action": "followed", "follower_count": 1, "following_count": 1}

    like = await client.post(f"/api/v1/like/post/{post_id}", headers=bob)
    assert like.json()["data"]["is_liked"] is True

    repost = await client.post(f"/api/v1/posts/{post_id}/repost", json={"comment": "+1"}, headers=bob)
    assert repost.status_code == 200

    feed = await client.get("/api/v1/feed", headers=bob)
    body = feed.json()["data"]
    assert body["total"] == 2
    assert [item["kind"] for item in body["items"]] == ["repost", "post"]
    assert body["items"][1]["like_count"] == 1
    assert body["items"][1]["is_liked"] is True
    assert body["items"][1]["is_reposted"] is True

    timeline = await client.get("/api/v1/user/alice/timeline")
    assert timeline.json()["data"]["items"][0]["is_liked"] is False


async def test_error_bodies(client):
    alice_id, alice = await register(client, "alice")

    self_follow = await client.post(f"/api/v1/user/{alice_id}/follow", headers=alice)
    assert self_follow.status_code == 400
    body = self_follow.json()
    assert body["success"] is False
    assert body["code"] == 400
    assert body["error"]["code"] == "CANNOT_FOLLOW_SELF"

    missing = await client.get("/api/v1/posts/post_missing")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "POST_NOT_FOUND"

    bad_kind = await client.post("/api/v1/like/story/abc", headers=alice)
    assert bad_kind.status_code == 400

    bad_offset = await client.get("/api/v1/feed?offset=-1", headers=alice)
    assert bad_offset.status_code == 400

    anonymous = await client.get("/api/v1/feed")
    assert anonymous.status_code == 401


async def test_cannot_edit_someone_elses_post(client):
    _, alice = await register(client, "alice")
    _, bob = await register(client, "bob")
    post_id = (await client.post("/api/v1/posts", json={"text": "mine"}, headers=alice)).json()["data"]["post_id"]

    resp = await client.put(f"/api/v1/posts/{post_id}", json={"text": "theirs"}, headers=bob)

    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "PERMISSION_DENIED"


async def test_me_roundtrip_through_cache(client, cache):
    user_id, alice = await register(client, "alice")

    me = await client.get("/api/v1/user/me", headers=alice)
    assert me.json()["data"]["username"] == "alice"
    assert await cache.get(user_id) is not None

    await client.put("/api/v1/user/me", json={"bio": "hi"}, headers=alice)
    me = await client.get("/api/v1/user/me", headers=alice)
    assert me.json()["data"]["bio"] == "hi"

    deleted = await client.delete("/api/v1/user/me", headers=alice)
    assert deleted.status_code == 200
    after = await client.get("/api/v1/user/me", headers=alice)
    assert after.status_code == 401


async def test_explore_and_admin_routes(client, session_factory):
    root_id, root = await register(client, "root")
    alice_id, alice = await register(client, "alice")
    async with session_factory() as session:
        await session.execute(update(User).where(User.id == root_id).values(role="admin"))
        await session.commit()

    post_id = (await client.post("/api/v1/posts", json={"text": "hi"}, headers=alice)).json()["data"]["post_id"]
    comment = await client.post(f"/api/v1/posts/{post_id}/comments", json={"text": "first"}, headers=root)
    comment_id = comment.json()["data"]["comment_id"]
    await client.post(f"/api/v1/posts/{post_id}/repost", headers=root)

    assert [p["post_id"] for p in (await client.get("/api/v1/posts")).json()["data"]] == [post_id]
    assert len((await client.get("/api/v1/reposts")).json()["data"]) == 1
    assert (await client.get("/api/v1/comments")).json()["data"][0]["comment_id"] == comment_id
    single = await client.get(f"/api/v1/comments/{comment_id}")
    assert single.json()["data"]["text"] == "first"

    suggestions = await client.get("/api/v1/user/suggestions", headers=alice)
    assert [card["username"] for card in suggestions.json()["data"]] == ["root"]
    listed = await client.get("/api/v1/user", headers=alice)
    assert {card["username"] for card in listed.json()["data"]} == {"root", "alice"}

    forbidden = await client.put(f"/api/v1/user/{root_id}/role", json={"role": "user"}, headers=alice)
    assert forbidden.status_code == 403
    assert forbidden.json()["error"]["code"] == "ADMIN_REQUIRED"

    promoted = await client.put(f"/api/v1/user/{alice_id}/role", json={"role": "admin"}, headers=root)
    assert promoted.json()["data"]["role"] == "admin"

    removed = await client.delete(f"/api/v1/user/{root_id}", headers=alice)
    assert removed.status_code == 200
    assert (await client.get("/api/v1/user/root")).status_code == 404


async def test_unhandled_error_is_generic(client, monkeypatch):
    _, alice = await register(client, "alice")

    async def explode(*args, **kwargs):
        raise RuntimeError("secret connection string")

    monkeypatch.setattr(feed_routes.feed_service, "get_feed", explode)

    resp = await client.get("/api/v1/feed", headers=alice)

    assert resp.status_code == 500
    assert "secret" not in resp.text
    assert resp.json()["message"] == "Internal server error"


async def test_request_deadline_rolls_back(client, monkeypatch, session_factory):
    user_id, alice = await register(client, "alice")
    monkeypatch.setattr(Settings, "REQUEST_TIMEOUT", property(lambda self: 0.2))

    async def slow(session, viewer_id, offset, limit):
        await PostDAO.create(session, viewer_id, text="half-written")
        await session.flush()
        await asyncio.sleep(5)

    monkeypatch.setattr(feed_routes.feed_service, "get_feed", slow)

    resp = await client.get("/api/v1/feed", headers=alice)

    assert resp.status_code == 504
    assert resp.json()["error"]["code"] == "REQUEST_TIMEOUT"

    async with session_factory() as session:
        count = await session.execute(select(func.count(Post.id)))
        assert count.scalar() == 0
