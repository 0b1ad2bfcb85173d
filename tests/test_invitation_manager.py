import itertools

import pytest

from config import INVITATION_CODE_ALPHABET, INVITATION_CODE_LENGTH
from core.exceptions import CodeGenerationExhaustedError, StoreUnavailableError
from models.base import Base
from schemas.user import Role
from utils.invitation_manager import InvitationManager, generate_code


def test_generate_code_shape():
    code = generate_code()

    assert len(code) == INVITATION_CODE_LENGTH
    assert set(code) <= set(INVITATION_CODE_ALPHABET)


def test_issue_and_lookup_until_redeemed(invitations):
    code = invitations.issue("a@b.com", Role.ROLE1, created_by="root")

    assert invitations.lookup_email(code) == "a@b.com"
    assert invitations.lookup_role(code) is Role.ROLE1
    assert invitations.outstanding_count() == 1

    assert invitations.redeem(code) is True

    assert invitations.lookup_email(code) is None
    assert invitations.lookup_role(code) is None
    assert invitations.outstanding_count() == 0


def test_second_redeem_is_a_noop(invitations):
    code = invitations.issue("a@b.com", "Role2")
    other = invitations.issue("c@d.com", "Role1")
    invitations.redeem(code)

    assert invitations.redeem(code) is False
    assert invitations.redeem("NEVER1") is False
    assert invitations.lookup_email(other) == "c@d.com"
    assert invitations.outstanding_count() == 1


def test_issue_rejects_unknown_role(invitations):
    with pytest.raises(ValueError):
        invitations.issue("a@b.com", "Moderator")


def test_collision_is_retried(db):
    candidates = iter(["AAAAAA", "AAAAAA", "BBBBBB"])
    manager = InvitationManager(db, code_generator=lambda: next(candidates))

    assert manager.issue("a@b.com", Role.ROLE1) == "AAAAAA"
    assert manager.issue("c@d.com", Role.ROLE2) == "BBBBBB"
    assert manager.lookup_email("AAAAAA") == "a@b.com"


def test_saturated_code_space_raises(db):
    manager = InvitationManager(db, code_generator=lambda: "AB12CD", max_attempts=3)
    manager.issue("a@b.com", Role.ROLE1)

    with pytest.raises(CodeGenerationExhaustedError) as excinfo:
        manager.issue("c@d.com", Role.ROLE1)

    assert excinfo.value.attempts == 3
    assert manager.outstanding_count() == 1


def test_tiny_alphabet_exhausts(db):
    counter = itertools.count()
    manager = InvitationManager(
        db, code_generator=lambda: "X" if next(counter) % 2 else "Y", max_attempts=4
    )
    manager.issue("1@x.com", Role.ROLE1)
    manager.issue("2@x.com", Role.ROLE1)

    with pytest.raises(CodeGenerationExhaustedError):
        manager.issue("3@x.com", Role.ROLE1)


def test_email_already_invited(invitations):
    assert not invitations.email_already_invited("a@b.com")

    code = invitations.issue("a@b.com", Role.ROLE1)
    assert invitations.email_already_invited("a@b.com")

    invitations.redeem(code)
    assert not invitations.email_already_invited("a@b.com")


def test_email_check_degrades_on_storage_error(invitations, engine):
    Base.metadata.drop_all(engine)

    assert invitations.email_already_invited("a@b.com") is False


def test_issue_surfaces_storage_errors(invitations, engine):
    Base.metadata.drop_all(engine)

    with pytest.raises(StoreUnavailableError):
        invitations.issue("a@b.com", Role.ROLE1)


def test_revoke_and_list(invitations):
    first = invitations.issue("a@b.com", Role.ROLE1, created_by="root")
    second = invitations.issue("c@d.com", Role.ADMIN, created_by="root")

    assert {c.code for c in invitations.list_codes()} == {first, second}
    assert [c.code for c in invitations.list_codes(role=Role.ADMIN)] == [second]

    assert invitations.revoke(first) is True
    assert invitations.revoke(first) is False
    assert invitations.get(first) is None
    assert invitations.get(second).created_by == "root"
