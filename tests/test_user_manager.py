import pytest

from config import USER_LIST_PLACEHOLDER
from core.exceptions import DuplicateUsernameError, StoreUnavailableError
from models.base import Base
from schemas.user import Account, ProfileField, Role
from utils.user_manager import get_number_of_roles, hash_password, verify_password


def test_register_and_read_back(users):
    users.register(
        Account(username="alice", first_name="Alice", email="a@b.com", has_role1=True), "pw"
    )

    account = users.get_account("alice")
    assert account.first_name == "Alice"
    assert account.email == "a@b.com"
    assert account.roles == frozenset({Role.ROLE1})
    assert account.password_hash != "pw"
    assert verify_password("pw", account.password_hash)


def test_duplicate_username_rejected_regardless_of_other_fields(users, make_account):
    make_account("alice", has_role1=True)

    with pytest.raises(DuplicateUsernameError) as excinfo:
        users.register(
            Account(username="alice", first_name="Other", email="x@y.z", is_admin=True), "other"
        )

    assert excinfo.value.username == "alice"
    assert users.count() == 1
    assert not users.get_account("alice").is_admin


def test_exists_count_and_is_empty(users, make_account):
    assert users.is_empty()
    assert not users.exists("alice")

    make_account("alice")
    make_account("bob")

    assert users.exists("alice")
    assert users.count() == 2
    assert not users.is_empty()


def test_list_usernames_starts_with_placeholder(users, make_account):
    assert users.list_usernames() == [USER_LIST_PLACEHOLDER]

    make_account("carol")
    make_account("alice")

    assert users.list_usernames() == [USER_LIST_PLACEHOLDER, "alice", "carol"]


def test_field_accessors(users, make_account):
    make_account("alice")

    assert users.get_field("alice", ProfileField.MIDDLE_NAME) is None
    assert users.update_field("alice", ProfileField.MIDDLE_NAME, "Q")
    assert users.update_field("alice", "preferred_first_name", "Al")

    assert users.get_field("alice", ProfileField.MIDDLE_NAME) == "Q"
    assert users.get_field("alice", "preferred_first_name") == "Al"


def test_field_update_of_unknown_user_has_no_effect(users):
    assert users.update_field("ghost", ProfileField.EMAIL, "g@h.st") is False
    assert users.get_field("ghost", ProfileField.EMAIL) is None


def test_update_profile_rejects_non_profile_fields(users, make_account):
    make_account("alice")

    with pytest.raises(ValueError):
        users.update_profile("alice", is_admin=True)


def test_update_role_sets_and_clears_flags(users, make_account):
    make_account("alice")

    assert users.update_role("alice", "Admin", True)
    assert users.update_role("alice", Role.ROLE2, True)
    assert users.get_account("alice").roles == frozenset({Role.ADMIN, Role.ROLE2})

    assert users.update_role("alice", "Admin", False)
    assert users.get_account("alice").roles == frozenset({Role.ROLE2})


def test_update_role_failure_indicators(users, make_account):
    make_account("alice")

    assert users.update_role("alice", "Moderator", True) is False
    assert users.update_role("ghost", "Role1", True) is False


def test_update_role_reports_storage_errors(users, engine, make_account):
    make_account("alice")
    Base.metadata.drop_all(engine)

    assert users.update_role("alice", "Role1", True) is False


def test_register_surfaces_storage_errors(users, engine):
    Base.metadata.drop_all(engine)

    with pytest.raises(StoreUnavailableError):
        users.register(Account(username="alice"), "pw")


@pytest.mark.parametrize(
    "flags, expected",
    [
        ({}, 0),
        ({"has_role2": True}, 1),
        ({"is_admin": True, "has_role1": True}, 2),
        ({"is_admin": True, "has_role1": True, "has_role2": True}, 3),
    ],
)
def test_get_number_of_roles(flags, expected):
    assert get_number_of_roles(Account(username="u", **flags)) == expected


def test_verify_password_rejects_wrong_and_empty_hash():
    hashed = hash_password("secret", rounds=4)

    assert verify_password("secret", hashed)
    assert not verify_password("Secret", hashed)
    assert not verify_password("secret", "")
    assert not verify_password("secret", "not-a-bcrypt-hash")
