import pytest

from threadline.db.dao import FollowDAO, UserDAO
from threadline.services.follow_service import FollowService
from threadline.services.user_service import UserService
from threadline.utils.exceptions import ConflictError, NotFoundError


async def test_toggle_follow_creates_and_removes_edge(session, make_user):
    alice = await make_user("alice")
    bob = await make_user("bob")

    followed = await FollowService.toggle_follow(session, alice.id, bob.id)
    assert followed.action == "followed"
    assert followed.follower_count == 1
    assert followed.following_count == 1
    assert await FollowDAO.is_following(session, alice.id, bob.id)

    unfollowed = await FollowService.toggle_follow(session, alice.id, bob.id)
    assert unfollowed.action == "unfollowed"
    assert unfollowed.follower_count == 0
    assert unfollowed.following_count == 0
    assert not await FollowDAO.is_following(session, alice.id, bob.id)


@pytest.mark.parametrize("calls", [1, 2, 3, 4, 5])
async def test_alternating_toggles_net_to_parity(session, make_user, calls):
    alice = await make_user("alice")
    bob = await make_user("bob")

    for _ in range(calls):
        result = await FollowService.toggle_follow(session, alice.id, bob.id)

    assert result.follower_count == calls % 2
    assert result.following_count == calls % 2
    await session.refresh(bob)
    await session.refresh(alice)
    assert bob.follower_count == calls % 2
    assert alice.following_count == calls % 2


async def test_counters_match_live_edges(session, make_user):
    hub = await make_user("hub")
    fans = [await make_user(f"fan{i}") for i in range(3)]

    for fan in fans:
        await FollowService.toggle_follow(session, fan.id, hub.id)
    await FollowService.toggle_follow(session, fans[0].id, hub.id)

    await session.refresh(hub)
    followers = await FollowDAO.get_follower_list(session, hub.id)
    assert hub.follower_count == len(followers) == 2


async def test_self_follow_is_rejected_without_side_effects(session, make_user):
    alice = await make_user("alice")

    with pytest.raises(ConflictError):
        await FollowService.toggle_follow(session, alice.id, alice.id)

    await session.refresh(alice)
    assert alice.follower_count == 0
    assert alice.following_count == 0
    assert await FollowDAO.get_following_ids(session, alice.id) == []


async def test_unknown_target_is_not_found(session, make_user):
    alice = await make_user("alice")

    with pytest.raises(NotFoundError):
        await FollowService.toggle_follow(session, alice.id, "user_missing")


async def test_duplicate_insert_race_is_absorbed(session, monkeypatch, make_user):
    alice = await make_user("alice")
    bob = await make_user("bob")
    await FollowService.toggle_follow(session, alice.id, bob.id)

    # 模拟并发：检查时还没有关系，插入时已被另一个请求写入
    async def stale_check(session, follower_id, following_id):
        return False

    monkeypatch.setattr(FollowDAO, "is_following", staticmethod(stale_check))

    result = await FollowService.toggle_follow(session, alice.id, bob.id)

    assert result.action == "followed"
    assert result.follower_count == 1
    assert result.following_count == 1


async def test_toggle_follow_invalidates_both_cached_users(session, make_user, cache):
    alice = await make_user("alice")
    bob = await make_user("bob")
    await cache.set(alice.id, {"user_id": alice.id})
    await cache.set(bob.id, {"user_id": bob.id})

    await FollowService.toggle_follow(session, alice.id, bob.id)

    assert await cache.get(alice.id) is None
    assert await cache.get(bob.id) is None


async def test_following_and_follower_lists(session, make_user):
    alice = await make_user("alice")
    bob = await make_user("bob")
    carol = await make_user("carol")
    await FollowService.toggle_follow(session, alice.id, bob.id)
    await FollowService.toggle_follow(session, alice.id, carol.id)
    await FollowService.toggle_follow(session, bob.id, carol.id)

    following = await FollowService.get_following_list(session, "alice", viewer_id=bob.id)
    assert {item.username for item in following} == {"bob", "carol"}
    flags = {item.username: item.is_following for item in following}
    assert flags == {"bob": False, "carol": True}

    followers = await FollowService.get_follower_list(session, "carol")
    assert {item.username for item in followers} == {"alice", "bob"}
    assert all(item.is_following is False for item in followers)

    with pytest.raises(NotFoundError):
        await FollowService.get_follower_list(session, "nobody")


async def test_existing_edge_to_deleted_user_can_be_unfollowed(session, make_user):
    alice = await make_user("alice")
    bob = await make_user("bob")
    await FollowService.toggle_follow(session, alice.id, bob.id)
    await UserDAO.soft_delete(session, bob)

    result = await FollowService.toggle_follow(session, alice.id, bob.id)

    assert result.action == "unfollowed"
    assert result.following_count == 0
    assert not await FollowDAO.is_following(session, alice.id, bob.id)

    with pytest.raises(NotFoundError):
        await FollowService.toggle_follow(session, alice.id, bob.id)


async def test_deleting_account_detaches_follow_edges(session, make_user, cache):
    alice = await make_user("alice")
    bob = await make_user("bob")
    carol = await make_user("carol")
    await FollowService.toggle_follow(session, alice.id, bob.id)
    await FollowService.toggle_follow(session, bob.id, carol.id)
    await cache.set(alice.id, {"user_id": alice.id})

    await UserService.delete_me(session, bob.id)

    await session.refresh(alice)
    await session.refresh(carol)
    assert alice.following_count == len(await FollowDAO.get_following_list(session, alice.id)) == 0
    assert carol.follower_count == len(await FollowDAO.get_follower_list(session, carol.id)) == 0
    assert await cache.get(alice.id) is None

    with pytest.raises(NotFoundError):
        await FollowService.toggle_follow(session, alice.id, bob.id)
