import pytest

from threadline.db.dao import PostDAO
from threadline.services.repost_service import RepostService
from threadline.services.user_service import UserService
from threadline.utils.exceptions import NotFoundError, ValidationError


async def test_same_post_can_be_reposted_many_times(session, make_user, make_post):
    alice = await make_user("alice")
    post = await make_post(alice)

    first = await RepostService.create_repost(session, alice.id, post.id)
    second = await RepostService.create_repost(session, alice.id, post.id, comment="again")

    assert first.repost_id != second.repost_id
    assert second.comment == "again"
    assert second.user.username == "alice"

    reposts = await RepostService.get_post_reposts(session, post.id)
    assert len(reposts) == 2


async def test_repost_comment_length_limit(session, make_user, make_post):
    alice = await make_user("alice")
    post = await make_post(alice)

    with pytest.raises(ValidationError):
        await RepostService.create_repost(session, alice.id, post.id, comment="x" * 257)

    ok = await RepostService.create_repost(session, alice.id, post.id, comment="x" * 256)
    assert len(ok.comment) == 256


async def test_repost_missing_post(session, make_user, make_post):
    alice = await make_user("alice")
    post = await make_post(alice)
    await PostDAO.soft_delete(session, post)

    with pytest.raises(NotFoundError):
        await RepostService.create_repost(session, alice.id, "post_missing")
    with pytest.raises(NotFoundError):
        await RepostService.create_repost(session, alice.id, post.id)


async def test_user_reposts_carry_enriched_originals(session, make_user, make_post, make_repost):
    alice = await make_user("alice")
    bob = await make_user("bob")
    kept = await make_post(alice, created=1)
    gone = await make_post(alice, created=2)
    await make_repost(bob, kept, created=3, comment="look")
    await make_repost(bob, gone, created=4)
    await PostDAO.soft_delete(session, gone)

    items = await RepostService.get_user_reposts(session, "bob", viewer_id=bob.id)

    assert len(items) == 1
    assert items[0].comment == "look"
    assert items[0].reposted_by.username == "bob"
    assert items[0].original_post.post_id == kept.id
    assert items[0].original_post.is_reposted is True
    assert items[0].original_post.repost_count == 1


async def test_user_reposts_pages_are_full_after_original_deleted(session, make_user, make_post, make_repost):
    alice = await make_user("alice")
    bob = await make_user("bob")
    gone = await make_post(alice, created=1)
    survivors = [await make_post(alice, created=2 + index) for index in range(3)]
    await make_repost(bob, gone, created=20)
    for index, post in enumerate(survivors):
        await make_repost(bob, post, created=10 + index)
    await PostDAO.soft_delete(session, gone)

    first_page = await RepostService.get_user_reposts(session, "bob", limit=2)
    second_page = await RepostService.get_user_reposts(session, "bob", limit=2, offset=2)

    assert [item.original_post.post_id for item in first_page] == [survivors[2].id, survivors[1].id]
    assert [item.original_post.post_id for item in second_page] == [survivors[0].id]


async def test_explore_reposts_skip_deleted_originals_and_reposters(
    session, make_user, make_post, make_repost, cache
):
    alice = await make_user("alice")
    bob = await make_user("bob")
    carol = await make_user("carol")
    kept = await make_post(alice, created=1)
    gone = await make_post(alice, created=2)
    visible = await make_repost(bob, kept, created=3)
    await make_repost(bob, gone, created=4)
    await make_repost(carol, kept, created=5)
    await PostDAO.soft_delete(session, gone)
    await UserService.delete_me(session, carol.id)

    items = await RepostService.list_reposts(session, viewer_id=alice.id)

    assert [item.repost_id for item in items] == [visible.id]
    assert items[0].reposted_by.username == "bob"
    assert items[0].original_post.repost_count == 2
