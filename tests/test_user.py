from datetime import timedelta

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from threadline.db.dao import FollowDAO, PostDAO, UserDAO
from threadline.models import UserCreate, UserLogin, UserUpdate, UserRole
from threadline.services.follow_service import FollowService
from threadline.services.user_service import UserService
from threadline.utils.auth import create_access_token, decode_access_token
from threadline.utils.exceptions import (
    AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
)
from threadline.utils.user_cache import UserCache

from conftest import DummyRedis


async def test_user_cache_get_or_load_fills_once():
    cache = UserCache(client=DummyRedis(), ttl=60)
    calls = []

    async def loader():
        calls.append(1)
        return {"user_id": "user_1", "name": "Alice"}

    first = await cache.get_or_load("user_1", loader)
    second = await cache.get_or_load("user_1", loader)

    assert first == second == {"user_id": "user_1", "name": "Alice"}
    assert len(calls) == 1

    await cache.invalidate("user_1")
    assert await cache.get("user_1") is None


async def test_user_cache_does_not_store_missing_users():
    redis = DummyRedis()
    cache = UserCache(client=redis)

    async def loader():
        return None

    assert await cache.get_or_load("user_x", loader) is None
    assert redis.store == {}


async def test_user_cache_degrades_to_miss():
    redis = DummyRedis()
    redis.is_connected = False
    cache = UserCache(client=redis)

    await cache.set("user_1", {"user_id": "user_1"})
    assert await cache.get("user_1") is None

    class BrokenRedis(DummyRedis):
        async def get(self, key):
            raise RedisConnectionError("down")

    broken = UserCache(client=BrokenRedis())
    assert await broken.get("user_1") is None


async def test_user_cache_drops_corrupt_payload():
    redis = DummyRedis()
    cache = UserCache(client=redis)
    redis.store[cache.key("user_1")] = "{not json"

    assert await cache.get("user_1") is None
    assert cache.key("user_1") not in redis.store


async def test_register_and_login(session, cache):
    created = await UserService.register(session, UserCreate(
        name="Alice", username="Alice_1", email="Alice@Example.com", password="secret123"
    ))

    assert created.user.username == "alice_1"
    assert created.access_token

    by_username = await UserService.login(session, UserLogin(login="ALICE_1", password="secret123"))
    by_email = await UserService.login(session, UserLogin(login="alice@example.com", password="secret123"))
    assert by_username.user.user_id == by_email.user.user_id == created.user.user_id

    with pytest.raises(AuthenticationError):
        await UserService.login(session, UserLogin(login="alice_1", password="wrong"))
    with pytest.raises(ConflictError):
        await UserService.register(session, UserCreate(
            name="Other", username="alice_1", email="other@example.com", password="secret123"
        ))


async def test_me_is_served_from_cache_and_invalidated_on_update(session, make_user, cache):
    alice = await make_user("alice", bio="old")

    first = await UserService.get_me(session, alice.id)
    assert first.bio == "old"
    assert await cache.get(alice.id) is not None

    updated = await UserService.update_me(session, alice.id, UserUpdate(bio="new"))
    assert updated.bio == "new"
    assert await cache.get(alice.id) is None

    again = await UserService.get_me(session, alice.id)
    assert again.bio == "new"


async def test_profile_reports_following_only_for_other_viewers(session, make_user):
    alice = await make_user("alice")
    bob = await make_user("bob")
    await FollowService.toggle_follow(session, bob.id, alice.id)

    assert (await UserService.get_profile(session, "alice", bob.id)).is_following is True
    assert (await UserService.get_profile(session, "alice", alice.id)).is_following is None
    assert (await UserService.get_profile(session, "alice")).is_following is None
    assert (await UserService.get_profile(session, "alice")).follower_count == 1


async def test_delete_account_tombstones_user_and_posts(session, make_user, make_post, cache):
    alice = await make_user("alice")
    post = await make_post(alice)

    await UserService.delete_me(session, alice.id)

    assert await PostDAO.get_by_id(session, post.id) is None
    with pytest.raises(NotFoundError):
        await UserService.get_profile(session, "alice")
    with pytest.raises(ConflictError):
        await UserService.register(session, UserCreate(
            name="Again", username="alice", email="new@example.com", password="secret123"
        ))


async def test_user_listing_and_suggestions_carry_follow_flags(session, make_user, cache):
    alice = await make_user("alice")
    others = [await make_user(f"user{i}") for i in range(7)]
    await FollowService.toggle_follow(session, alice.id, others[0].id)
    await UserService.delete_me(session, others[1].id)

    listed = await UserService.list_users(session, viewer_id=alice.id, limit=100)
    assert len(listed) == 7
    assert "user1" not in {card.username for card in listed}
    assert {card.username for card in listed if card.is_following} == {"user0"}

    suggested = await UserService.suggest_users(session, viewer_id=alice.id)
    assert len(suggested) == 5
    assert all(card.user_id != alice.id for card in suggested)
    assert all(card.username != "user1" for card in suggested)
    for card in suggested:
        assert card.is_following == (card.user_id == others[0].id)


async def test_only_admins_change_roles(session, make_user, cache):
    root = await make_user("root", role="admin")
    alice = await make_user("alice")
    await cache.set(alice.id, {"user_id": alice.id})

    with pytest.raises(AuthorizationError):
        await UserService.update_role(session, alice.id, root.id, UserRole.USER)

    promoted = await UserService.update_role(session, root.id, alice.id, UserRole.ADMIN)
    assert promoted.role == UserRole.ADMIN
    assert await cache.get(alice.id) is None

    with pytest.raises(NotFoundError):
        await UserService.update_role(session, root.id, "user_missing", UserRole.ADMIN)


async def test_admin_deletes_user_like_self_deletion(session, make_user, make_post, cache):
    root = await make_user("root", role="admin")
    alice = await make_user("alice")
    bob = await make_user("bob")
    post = await make_post(bob)
    await FollowService.toggle_follow(session, alice.id, bob.id)

    with pytest.raises(AuthorizationError):
        await UserService.delete_user(session, alice.id, bob.id)

    await UserService.delete_user(session, root.id, bob.id)

    assert await UserDAO.get_by_id(session, bob.id) is None
    assert await PostDAO.get_by_id(session, post.id) is None
    assert await FollowDAO.get_following_ids(session, alice.id) == []
    await session.refresh(alice)
    assert alice.following_count == 0


async def test_access_token_claims_and_long_passwords(session):
    token = create_access_token("user_1", "alice", "admin")
    claims = decode_access_token(token)

    assert claims["sub"] == "user_1"
    assert claims["role"] == "admin"
    assert claims["typ"] == "access"
    expired = create_access_token("user_1", "alice", expires_delta=timedelta(seconds=-5))
    assert decode_access_token(expired) is None

    with pytest.raises(ValidationError):
        await UserService.register(session, UserCreate(
            name="Long", username="longpw", email="long@example.com", password="p" * 73
        ))
