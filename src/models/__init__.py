from .base import Base
from .user import AccountModel
from .invitation_code import InvitationCodeModel
from .post import PostModel
from .reply import ReplyModel

__all__ = ["Base", "AccountModel", "InvitationCodeModel", "PostModel", "ReplyModel"]
