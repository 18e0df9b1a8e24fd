import pytest

from threadline.models import PostCreate, PostUpdate, CommentCreate, CommentUpdate, TargetKind
from threadline.db.dao import PostDAO
from threadline.services.comment_service import CommentService
from threadline.services.like_service import LikeService
from threadline.services.post_service import PostService
from threadline.services.share_service import ShareService
from threadline.utils.exceptions import AuthorizationError, NotFoundError, ValidationError


async def test_create_post_requires_content(session, make_user):
    alice = await make_user("alice")

    with pytest.raises(ValidationError):
        await PostService.create_post(session, alice.id, PostCreate(text="   "))
    with pytest.raises(ValidationError):
        await PostService.create_post(session, alice.id, PostCreate(text="x" * 281))

    media_only = await PostService.create_post(session, alice.id, PostCreate(image_url="https://img/1.png"))
    assert media_only.text is None
    assert media_only.author.username == "alice"


async def test_nested_post_needs_existing_parent(session, make_user):
    alice = await make_user("alice")
    parent = await PostService.create_post(session, alice.id, PostCreate(text="root"))

    child = await PostService.create_post(session, alice.id, PostCreate(text="child"), parent_id=parent.post_id)
    assert child.parent_id == parent.post_id

    with pytest.raises(NotFoundError):
        await PostService.create_post(session, alice.id, PostCreate(text="orphan"), parent_id="post_missing")

    nested = await PostService.get_nested_posts(session, parent.post_id)
    assert [post.post_id for post in nested] == [child.post_id]

    refreshed = await PostService.get_post(session, parent.post_id)
    assert refreshed.nested_count == 1


async def test_only_author_can_update_or_delete(session, make_user):
    alice = await make_user("alice")
    bob = await make_user("bob")
    post = await PostService.create_post(session, alice.id, PostCreate(text="mine"))

    with pytest.raises(AuthorizationError):
        await PostService.update_post(session, bob.id, post.post_id, PostUpdate(text="hijack"))
    with pytest.raises(AuthorizationError):
        await PostService.delete_post(session, bob.id, post.post_id)

    updated = await PostService.update_post(session, alice.id, post.post_id, PostUpdate(text="edited"))
    assert updated.text == "edited"

    await PostService.delete_post(session, alice.id, post.post_id)
    with pytest.raises(NotFoundError):
        await PostService.get_post(session, post.post_id)


async def test_comment_and_replies(session, make_user, make_post):
    alice = await make_user("alice")
    bob = await make_user("bob")
    post = await make_post(alice)

    comment = await CommentService.create_comment(session, bob.id, post.id, CommentCreate(text="first"))
    reply = await CommentService.create_comment(
        session, alice.id, post.id, CommentCreate(text="thanks", parent_id=comment.comment_id)
    )

    assert comment.kind == TargetKind.COMMENT
    assert reply.kind == TargetKind.REPLY

    comments = await CommentService.get_post_comments(session, post.id)
    assert [item.comment_id for item in comments] == [comment.comment_id]
    assert comments[0].reply_count == 1

    replies = await CommentService.get_replies(session, comment.comment_id)
    assert [item.comment_id for item in replies] == [reply.comment_id]

    history = await CommentService.get_user_comments(session, "bob")
    assert [item.comment_id for item in history] == [comment.comment_id]


async def test_reply_must_belong_to_same_post(session, make_user, make_post):
    alice = await make_user("alice")
    post = await make_post(alice)
    other = await make_post(alice)
    comment = await CommentService.create_comment(session, alice.id, post.id, CommentCreate(text="here"))

    with pytest.raises(ValidationError):
        await CommentService.create_comment(
            session, alice.id, other.id, CommentCreate(text="there", parent_id=comment.comment_id)
        )
    with pytest.raises(NotFoundError):
        await CommentService.create_comment(session, alice.id, "post_missing", CommentCreate(text="x"))


async def test_comment_length_and_ownership(session, make_user, make_post):
    alice = await make_user("alice")
    bob = await make_user("bob")
    post = await make_post(alice)

    with pytest.raises(ValidationError):
        await CommentService.create_comment(session, alice.id, post.id, CommentCreate(text="x" * 501))

    comment = await CommentService.create_comment(session, alice.id, post.id, CommentCreate(text="typo"))
    with pytest.raises(AuthorizationError):
        await CommentService.update_comment(session, bob.id, comment.comment_id, CommentUpdate(text="no"))

    fixed = await CommentService.update_comment(session, alice.id, comment.comment_id, CommentUpdate(text="fixed"))
    assert fixed.text == "fixed"


async def test_share_records_event(session, make_user, make_post, make_comment):
    alice = await make_user("alice")
    post = await make_post(alice)
    comment = await make_comment(alice, post)

    shared = await ShareService.share(session, alice.id, "post", post.id, message="read this")
    await ShareService.share(session, alice.id, "comment", comment.id)

    assert shared.target_type == TargetKind.POST
    assert shared.message == "read this"

    shares = await ShareService.get_shares(session, "post", post.id)
    assert [item.share_id for item in shares] == [shared.share_id]

    with pytest.raises(ValidationError):
        await ShareService.share(session, alice.id, "profile", alice.id)
    with pytest.raises(NotFoundError):
        await ShareService.share(session, alice.id, "reply", comment.id)
    with pytest.raises(ValidationError):
        await ShareService.share(session, alice.id, "post", post.id, message="x" * 281)


async def test_explore_posts_are_newest_first_and_enriched(session, make_user, make_post):
    alice = await make_user("alice")
    bob = await make_user("bob")
    older = await make_post(alice, created=1)
    newer = await make_post(bob, created=2)
    gone = await make_post(bob, created=3)
    await PostDAO.soft_delete(session, gone)
    await LikeService.toggle_like(session, bob.id, "post", older.id)

    posts = await PostService.list_posts(session, viewer_id=bob.id)

    assert [post.post_id for post in posts] == [newer.id, older.id]
    assert posts[1].like_count == 1
    assert posts[1].is_liked is True

    second_page = await PostService.list_posts(session, limit=1, offset=1)
    assert [post.post_id for post in second_page] == [older.id]


async def test_single_comment_and_explore_comments(session, make_user, make_post, make_comment):
    alice = await make_user("alice")
    post = await make_post(alice)
    hidden_post = await make_post(alice)
    top = await make_comment(alice, post, "top", created=1)
    reply = await make_comment(alice, post, "reply", parent=top, created=2)
    hidden = await make_comment(alice, hidden_post, "hidden", created=3)
    await PostDAO.soft_delete(session, hidden_post)
    await LikeService.toggle_like(session, alice.id, "reply", reply.id)

    single = await CommentService.get_comment(session, top.id, alice.id)
    assert single.reply_count == 1
    assert single.kind == TargetKind.COMMENT

    with pytest.raises(NotFoundError):
        await CommentService.get_comment(session, hidden.id)
    with pytest.raises(NotFoundError):
        await CommentService.get_comment(session, "comment_missing")

    recent = await CommentService.list_comments(session, viewer_id=alice.id)
    assert [comment.comment_id for comment in recent] == [reply.id, top.id]
    assert recent[0].kind == TargetKind.REPLY
    assert recent[0].is_liked is True
