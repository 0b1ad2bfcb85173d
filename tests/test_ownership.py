import pytest

from core.exceptions import PermissionDeniedError
from schemas.content import Post, Reply
from schemas.user import Identity, Role
from utils.ownership import can_mutate, ensure_can_mutate

POST = Post(id=1, author="alice", content="hi", author_role="Role1", create_at="t", update_at="t")
REPLY = Reply(id=7, post_id=1, author="bob", content="re", author_role="Role2", create_at="t", update_at="t")


def _identity(username, *roles):
    return Identity(username=username, roles=frozenset(roles), active_role=roles[0] if roles else Role.ROLE1)


@pytest.mark.parametrize("record", [POST, REPLY])
def test_non_admin_may_change_only_own_records(record):
    author = _identity(record.author, Role.ROLE1, Role.ROLE2)
    stranger = _identity("mallory", Role.ROLE1, Role.ROLE2)

    assert can_mutate(author, record)
    assert not can_mutate(stranger, record)


@pytest.mark.parametrize("record", [POST, REPLY])
def test_admin_may_change_anything(record):
    assert can_mutate(_identity("root", Role.ADMIN), record)


def test_ensure_can_mutate_raises_with_details():
    with pytest.raises(PermissionDeniedError) as excinfo:
        ensure_can_mutate(_identity("alice", Role.ROLE1), REPLY)

    assert excinfo.value.record_kind == "reply"
    assert excinfo.value.record_id == 7
    assert excinfo.value.username == "alice"


def test_ensure_can_mutate_passes_for_author():
    ensure_can_mutate(_identity("alice", Role.ROLE1), POST)
