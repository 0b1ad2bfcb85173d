import pytest

from schemas.user import Role


@pytest.fixture
def alice(make_account):
    return make_account("alice", password="pw", has_role1=True)


def test_authenticate_requires_matching_role(authenticator, alice):
    assert authenticator.authenticate("alice", "pw", Role.ROLE1)
    assert authenticator.authenticate("alice", "pw", "Role1")
    assert not authenticator.authenticate("alice", "pw", Role.ADMIN)
    assert not authenticator.authenticate("alice", "pw", Role.ROLE2)


def test_each_input_perturbation_fails(authenticator, alice):
    assert authenticator.authenticate("alice", "pw", Role.ROLE1)

    assert not authenticator.authenticate("alicia", "pw", Role.ROLE1)
    assert not authenticator.authenticate("alice", "pw2", Role.ROLE1)
    assert not authenticator.authenticate("alice", "pw", Role.ROLE2)


def test_unknown_role_name_is_rejected(authenticator, alice):
    assert not authenticator.authenticate("alice", "pw", "Superuser")


def test_user_without_roles_cannot_log_in_anywhere(authenticator, make_account):
    make_account("nobody", password="pw")

    for role in Role:
        assert not authenticator.authenticate("nobody", "pw", role)


def test_login_returns_identity_for_active_role(authenticator, make_account):
    make_account("multi", password="pw", is_admin=True, has_role2=True)

    identity = authenticator.login("multi", "pw", Role.ROLE2)

    assert identity.username == "multi"
    assert identity.active_role is Role.ROLE2
    assert identity.roles == frozenset({Role.ADMIN, Role.ROLE2})
    assert identity.is_admin


def test_identity_for_drops_revoked_role(authenticator, users, alice):
    assert authenticator.identity_for("alice", "Role1") is not None

    users.update_role("alice", "Role1", False)

    assert authenticator.identity_for("alice", "Role1") is None
    assert authenticator.identity_for("ghost", "Role1") is None
