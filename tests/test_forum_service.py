import pytest

from core.exceptions import ParentNotFoundError, PermissionDeniedError, PostNotFoundError, ReplyNotFoundError


def test_post_captures_active_role(forum, alice_identity):
    post = forum.create_post(alice_identity, "hello")

    assert post.author == "alice"
    assert post.author_role == "Role1"


def test_author_can_edit_and_delete(forum, alice_identity):
    post = forum.create_post(alice_identity, "hello")

    assert forum.edit_post(alice_identity, post.id, "edited").content == "edited"
    forum.delete_post(alice_identity, post.id)

    with pytest.raises(PostNotFoundError):
        forum.get_post(post.id)


def test_stranger_is_denied_and_record_unchanged(forum, alice_identity, bob_identity):
    post = forum.create_post(alice_identity, "hello")

    with pytest.raises(PermissionDeniedError):
        forum.edit_post(bob_identity, post.id, "defaced")
    with pytest.raises(PermissionDeniedError):
        forum.delete_post(bob_identity, post.id)

    assert forum.get_post(post.id).content == "hello"


def test_not_found_is_distinct_from_denied(forum, bob_identity):
    with pytest.raises(PostNotFoundError):
        forum.edit_post(bob_identity, 404, "x")
    with pytest.raises(ReplyNotFoundError):
        forum.delete_reply(bob_identity, 404)


def test_admin_deletes_any_post_with_replies(forum, alice_identity, bob_identity, admin_identity):
    post = forum.create_post(alice_identity, "hello")
    reply = forum.create_reply(bob_identity, post.id, "hi alice")

    forum.delete_post(admin_identity, post.id)

    with pytest.raises(ReplyNotFoundError):
        forum.get_reply(reply.id)


def test_reply_ownership(forum, alice_identity, bob_identity, admin_identity):
    post = forum.create_post(alice_identity, "hello")
    reply = forum.create_reply(bob_identity, post.id, "hi alice")

    with pytest.raises(PermissionDeniedError):
        forum.edit_reply(alice_identity, reply.id, "rewritten")

    assert forum.edit_reply(bob_identity, reply.id, "hi again").content == "hi again"
    assert forum.edit_reply(admin_identity, reply.id, "moderated").content == "moderated"
    forum.delete_reply(bob_identity, reply.id)
    assert forum.list_replies(post.id) == []


def test_reply_to_missing_post(forum, bob_identity):
    with pytest.raises(ParentNotFoundError):
        forum.create_reply(bob_identity, 404, "anyone?")
    with pytest.raises(PostNotFoundError):
        forum.list_replies(404)


def test_thread_contains_replies(forum, alice_identity, bob_identity):
    post = forum.create_post(alice_identity, "hello")
    forum.create_reply(bob_identity, post.id, "one")
    forum.create_reply(alice_identity, post.id, "two")

    thread = forum.get_thread(post.id)

    assert thread.post == post
    assert [r.content for r in thread.replies] == ["one", "two"]
