"""Account, role and identity schema definitions.

This module defines the Account data model, the explicit Identity passed
into authorization calls, and the request/response models of the auth,
profile and admin routes.
"""

from datetime import datetime
from enum import Enum
from typing import FrozenSet, List, Optional

import pytz
from pydantic import BaseModel, Field


class Role(str, Enum):
    """Named capabilities an account may hold zero or more of."""

    ADMIN = "Admin"
    ROLE1 = "Role1"
    ROLE2 = "Role2"

    @classmethod
    def parse(cls, value) -> Optional["Role"]:
        """Return the matching Role, or None for an unrecognized name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


# Role -> account column holding its flag
ROLE_COLUMNS = {
    Role.ADMIN: "is_admin",
    Role.ROLE1: "has_role1",
    Role.ROLE2: "has_role2",
}


class ProfileField(str, Enum):
    """Single-valued profile attributes readable and writable by username."""

    FIRST_NAME = "first_name"
    MIDDLE_NAME = "middle_name"
    LAST_NAME = "last_name"
    PREFERRED_FIRST_NAME = "preferred_first_name"
    EMAIL = "email"


class Account(BaseModel):
    username: str = Field(description="Globally unique username.", frozen=True)
    password_hash: str = Field(default="", description="Bcrypt hash of the password.")
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    preferred_first_name: Optional[str] = None
    email: Optional[str] = None
    is_admin: bool = False
    has_role1: bool = False
    has_role2: bool = False
    create_at: str = Field(
        description="The time when the account was created.",
        default_factory=lambda: datetime.now(pytz.utc).isoformat(),
    )

    @property
    def roles(self) -> FrozenSet[Role]:
        return frozenset(role for role, column in ROLE_COLUMNS.items() if getattr(self, column))

    def has_role(self, role: Role) -> bool:
        return bool(getattr(self, ROLE_COLUMNS[role]))


class Identity(BaseModel):
    """The acting user of a request, obtained from a successful login.

    Carried explicitly into every authorization and mutation call.
    """

    username: str
    roles: FrozenSet[Role] = frozenset()
    active_role: Role = Field(description="The role surface the user logged in to.")

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles

    model_config = {"frozen": True}


class InvitationCode(BaseModel):
    code: str
    email: str
    role: Role
    created_by: Optional[str] = None
    created_at: str


# --- Request / response models ---


class ProfileFields(BaseModel):
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    preferred_first_name: Optional[str] = None


class FirstAdminRequest(ProfileFields):
    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)
    email: Optional[str] = None


class RegisterRequest(ProfileFields):
    invitation_code: str = Field(min_length=1)
    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    username: str
    password: str
    role: Role


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    username: str
    role: Role
    roles: List[Role]


class AccountInfo(ProfileFields):
    """Account without its credential, safe to return to clients."""

    username: str
    email: Optional[str] = None
    roles: List[Role]
    create_at: str

    @classmethod
    def from_account(cls, account: Account) -> "AccountInfo":
        return cls(
            username=account.username,
            first_name=account.first_name,
            middle_name=account.middle_name,
            last_name=account.last_name,
            preferred_first_name=account.preferred_first_name,
            email=account.email,
            roles=sorted(account.roles, key=lambda r: r.value),
            create_at=account.create_at,
        )


class UpdateProfileRequest(ProfileFields):
    email: Optional[str] = None


class UpdateRoleRequest(BaseModel):
    role: str = Field(description="'Admin', 'Role1' or 'Role2'.")
    value: bool


class GenerateInvitationCodeRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    role: Role


class InvitationCodeListResponse(BaseModel):
    codes: List[InvitationCode]
    total: int
