import pytest

from threadline.db.dao import LikeDAO, PostDAO
from threadline.models import TargetKind
from threadline.services.like_service import LikeService
from threadline.utils.exceptions import NotFoundError, ValidationError


async def test_toggle_like_is_its_own_inverse(session, make_user, make_post):
    alice = await make_user("alice")
    bob = await make_user("bob")
    post = await make_post(alice)
    await LikeDAO.create(session, alice.id, "post", post.id)

    liked = await LikeService.toggle_like(session, bob.id, "post", post.id)
    assert liked.is_liked is True
    assert liked.like_count == 2

    unliked = await LikeService.toggle_like(session, bob.id, "post", post.id)
    assert unliked.is_liked is False
    assert unliked.like_count == 1


async def test_toggle_like_on_comment_and_reply(session, make_user, make_post, make_comment):
    alice = await make_user("alice")
    post = await make_post(alice)
    comment = await make_comment(alice, post)
    reply = await make_comment(alice, post, parent=comment)

    on_comment = await LikeService.toggle_like(session, alice.id, TargetKind.COMMENT, comment.id)
    on_reply = await LikeService.toggle_like(session, alice.id, "reply", reply.id)

    assert on_comment.target_type == TargetKind.COMMENT
    assert on_comment.is_liked is True
    assert on_reply.target_type == TargetKind.REPLY
    assert on_reply.like_count == 1


async def test_target_kind_must_match_record(session, make_user, make_post, make_comment):
    alice = await make_user("alice")
    post = await make_post(alice)
    comment = await make_comment(alice, post)

    with pytest.raises(NotFoundError):
        await LikeService.toggle_like(session, alice.id, "reply", comment.id)
    with pytest.raises(NotFoundError):
        await LikeService.toggle_like(session, alice.id, "comment", post.id)


async def test_unknown_target_kind(session, make_user):
    alice = await make_user("alice")

    with pytest.raises(ValidationError):
        await LikeService.toggle_like(session, alice.id, "story", "whatever")


async def test_like_missing_or_deleted_post(session, make_user, make_post):
    alice = await make_user("alice")
    post = await make_post(alice)
    await PostDAO.soft_delete(session, post)

    with pytest.raises(NotFoundError):
        await LikeService.toggle_like(session, alice.id, "post", "post_missing")
    with pytest.raises(NotFoundError):
        await LikeService.toggle_like(session, alice.id, "post", post.id)


async def test_self_like_is_allowed(session, make_user, make_post):
    alice = await make_user("alice")
    post = await make_post(alice)

    result = await LikeService.toggle_like(session, alice.id, "post", post.id)

    assert result.is_liked is True


async def test_duplicate_like_race_is_absorbed(session, monkeypatch, make_user, make_post):
    alice = await make_user("alice")
    post = await make_post(alice)
    await LikeService.toggle_like(session, alice.id, "post", post.id)

    async def stale_find(session, user_id, target_type, target_id):
        return None

    monkeypatch.setattr(LikeDAO, "find", staticmethod(stale_find))

    result = await LikeService.toggle_like(session, alice.id, "post", post.id)

    assert result.is_liked is True
    assert result.like_count == 1


async def test_user_likes_are_enriched_and_skip_deleted(session, make_user, make_post, make_comment):
    alice = await make_user("alice")
    bob = await make_user("bob")
    first = await make_post(bob, created=1)
    second = await make_post(bob, created=2)
    comment = await make_comment(bob, first)

    await LikeService.toggle_like(session, alice.id, "post", first.id)
    await LikeService.toggle_like(session, alice.id, "post", second.id)
    await LikeService.toggle_like(session, alice.id, "comment", comment.id)
    await PostDAO.soft_delete(session, second)

    items = await LikeService.get_user_likes(session, "alice", viewer_id=alice.id)

    assert {item.target_id for item in items} == {first.id, comment.id}
    post_item = next(item for item in items if item.post is not None)
    assert post_item.post.is_liked is True
    assert post_item.post.like_count == 1
    comment_item = next(item for item in items if item.comment is not None)
    assert comment_item.target_type == TargetKind.COMMENT

    only_posts = await LikeService.get_user_likes(session, "alice", target_type="post")
    assert [item.target_id for item in only_posts] == [first.id]


async def test_post_likers(session, make_user, make_post):
    alice = await make_user("alice")
    bob = await make_user("bob")
    post = await make_post(alice)
    await LikeService.toggle_like(session, bob.id, "post", post.id)

    likers = await LikeService.get_post_likers(session, post.id)

    assert [user.username for user in likers] == ["bob"]
