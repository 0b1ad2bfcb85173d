"""Conversions between ORM models and pydantic schemas."""

from models.invitation_code import InvitationCodeModel
from models.post import PostModel
from models.reply import ReplyModel
from models.user import AccountModel
from schemas.content import Post, Reply
from schemas.user import Account, InvitationCode, Role


def account_to_model(account: Account) -> AccountModel:
    return AccountModel(
        username=account.username,
        password_hash=account.password_hash,
        first_name=account.first_name,
        middle_name=account.middle_name,
        last_name=account.last_name,
        preferred_first_name=account.preferred_first_name,
        email=account.email,
        is_admin=account.is_admin,
        has_role1=account.has_role1,
        has_role2=account.has_role2,
        create_at=account.create_at,
    )


def model_to_account(model: AccountModel) -> Account:
    return Account(
        username=model.username,
        password_hash=model.password_hash,
        first_name=model.first_name,
        middle_name=model.middle_name,
        last_name=model.last_name,
        preferred_first_name=model.preferred_first_name,
        email=model.email,
        is_admin=bool(model.is_admin),
        has_role1=bool(model.has_role1),
        has_role2=bool(model.has_role2),
        create_at=model.create_at,
    )


def model_to_invitation(model: InvitationCodeModel) -> InvitationCode:
    return InvitationCode(
        code=model.code,
        email=model.email,
        role=Role(model.role),
        created_by=model.created_by,
        created_at=model.created_at,
    )


def model_to_post(model: PostModel) -> Post:
    return Post.model_validate(model)


def model_to_reply(model: ReplyModel) -> Reply:
    return Reply.model_validate(model)
