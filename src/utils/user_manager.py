"""User management utilities.

This module provides the credential and role store: account registration,
password hashing, profile field access and role flag updates.
"""

import logging
from typing import Any, List, Optional

import bcrypt
from sqlalchemy import func, insert
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from config import BCRYPT_ROUNDS, USER_LIST_PLACEHOLDER
from core.exceptions import DuplicateUsernameError, StoreUnavailableError
from models.user import AccountModel
from schemas.user import ROLE_COLUMNS, Account, ProfileField, Role
from utils.converters import account_to_model, model_to_account

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password) -> bytes:
    if isinstance(password, str):
        password = password.encode("utf-8")
    return password[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password.
        rounds: Bcrypt cost factor.

    Returns:
        Hashed password (bcrypt hash string).
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a bcrypt hash.

    Args:
        plain_password: Plain text password to verify.
        hashed_password: Bcrypt hash string to verify against.

    Returns:
        True if password matches, False otherwise.
    """
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(
            _password_bytes(plain_password), hashed_password.encode("utf-8")
        )
    except ValueError as e:
        # Malformed hash in the store
        logger.error("Password verification error: %s", e)
        return False


def get_number_of_roles(account: Account) -> int:
    """Count the role flags set on an account (0 to 3)."""
    return len(account.roles)


class UserManager:
    """Manages account persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def register(
        self, account: Account, password: Optional[str] = None, commit: bool = True
    ) -> Account:
        """Insert a new account.

        The primary key on username is the authority for uniqueness, no
        existence check is made before the insert.

        Args:
            account: Account to store. Its password_hash is used as-is unless
                password is given.
            password: Optional plain text password to hash.
            commit: Commit the transaction. Pass False to let the caller
                combine the insert with other writes.

        Returns:
            The stored Account.

        Raises:
            DuplicateUsernameError: If the username already exists.
            StoreUnavailableError: If the store cannot be written.
        """
        if password is not None:
            account = account.model_copy(update={"password_hash": hash_password(password)})
        model = account_to_model(account)
        values = {c.name: getattr(model, c.name) for c in AccountModel.__table__.columns}
        try:
            self.db.execute(insert(AccountModel).values(**values))
            if commit:
                self.db.commit()
            else:
                self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateUsernameError(account.username) from e
        except OperationalError as e:
            self.db.rollback()
            logger.error("Failed to register user %s: %s", account.username, e)
            raise StoreUnavailableError(str(e)) from e

        logger.info("Registered user: %s (roles=%s)", account.username,
                    sorted(r.value for r in account.roles))
        return account

    def _get_model(self, username: str) -> Optional[AccountModel]:
        return (
            self.db.query(AccountModel)
            .filter(AccountModel.username == username)
            .first()
        )

    def get_account(self, username: str) -> Optional[Account]:
        """Get an account by username.

        Returns:
            Account object if found, None otherwise.
        """
        model = self._get_model(username)
        if model:
            return model_to_account(model)
        return None

    def exists(self, username: str) -> bool:
        return (
            self.db.query(AccountModel.username)
            .filter(AccountModel.username == username)
            .first()
            is not None
        )

    def count(self) -> int:
        return self.db.query(func.count(AccountModel.username)).scalar() or 0

    def is_empty(self) -> bool:
        return self.count() == 0

    def list_accounts(self) -> List[Account]:
        models = self.db.query(AccountModel).order_by(AccountModel.username).all()
        return [model_to_account(m) for m in models]

    def list_usernames(self) -> List[str]:
        """List all usernames, placeholder first.

        Returns:
            ``[USER_LIST_PLACEHOLDER, *usernames]`` ordered by username.
        """
        rows = self.db.query(AccountModel.username).order_by(AccountModel.username).all()
        return [USER_LIST_PLACEHOLDER] + [row[0] for row in rows]

    def get_field(self, username: str, field: ProfileField) -> Optional[str]:
        """Read a single profile attribute.

        Returns:
            The value, or None if the user is unknown or the value unset.
        """
        field = ProfileField(field)
        row = (
            self.db.query(getattr(AccountModel, field.value))
            .filter(AccountModel.username == username)
            .first()
        )
        return row[0] if row else None

    def update_field(self, username: str, field: ProfileField, value: Optional[str]) -> bool:
        """Write a single profile attribute.

        Returns:
            True if a row was updated, False if the user does not exist.
        """
        return self.update_profile(username, **{ProfileField(field).value: value})

    def update_profile(self, username: str, **fields: Any) -> bool:
        """Write several profile attributes in one statement.

        Args:
            username: Account to update.
            **fields: ProfileField names mapped to new values.

        Returns:
            True if a row was updated, False if the user does not exist.

        Raises:
            ValueError: If a field name is not a profile attribute.
            StoreUnavailableError: If the store cannot be written.
        """
        values = {ProfileField(name).value: value for name, value in fields.items()}
        if not values:
            return self.exists(username)
        try:
            updated = (
                self.db.query(AccountModel)
                .filter(AccountModel.username == username)
                .update(values, synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to update profile of %s: %s", username, e)
            raise StoreUnavailableError(str(e)) from e
        if updated:
            logger.info("Updated profile fields %s for user: %s", sorted(values), username)
        return bool(updated)

    def update_role(self, username: str, role_name: str, value: bool) -> bool:
        """Set or clear one role flag.

        Args:
            username: Account to update.
            role_name: 'Admin', 'Role1' or 'Role2'.
            value: New flag value.

        Returns:
            True if the flag was written, False for an unrecognized role
            name, an unknown user, or a storage error.
        """
        role = Role.parse(role_name)
        if role is None:
            logger.warning("Ignoring update of unknown role '%s' for %s", role_name, username)
            return False
        try:
            updated = (
                self.db.query(AccountModel)
                .filter(AccountModel.username == username)
                .update({ROLE_COLUMNS[role]: bool(value)}, synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to update role %s of %s: %s", role.value, username, e)
            return False
        if updated:
            logger.info("Set role %s=%s for user: %s", role.value, bool(value), username)
        return bool(updated)
