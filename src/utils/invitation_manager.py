"""Invitation code issuance and redemption.

Codes are short, random and single-use. Each binds one email address to one
role and is deleted when redeemed or revoked.
"""

import logging
import secrets
from datetime import datetime
from typing import Callable, List, Optional, Union

import pytz
from sqlalchemy import func, insert
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from config import (
    INVITATION_CODE_ALPHABET,
    INVITATION_CODE_LENGTH,
    INVITATION_CODE_MAX_ATTEMPTS,
)
from core.exceptions import CodeGenerationExhaustedError, StoreUnavailableError
from models.invitation_code import InvitationCodeModel
from schemas.user import InvitationCode, Role
from utils.converters import model_to_invitation

logger = logging.getLogger(__name__)


def generate_code(
    length: int = INVITATION_CODE_LENGTH, alphabet: str = INVITATION_CODE_ALPHABET
) -> str:
    """Return a random fixed-length code drawn from ``alphabet``."""
    return "".join(secrets.choice(alphabet) for _ in range(length))


def _mask(code: str) -> str:
    return code[:2] + "*" * max(len(code) - 2, 0)


class InvitationManager:
    """Manages invitation codes using SQLAlchemy."""

    def __init__(
        self,
        db: Session,
        code_generator: Callable[[], str] = generate_code,
        max_attempts: int = INVITATION_CODE_MAX_ATTEMPTS,
    ):
        """Initialize InvitationManager.

        Args:
            db: SQLAlchemy Session.
            code_generator: Produces candidate codes.
            max_attempts: Candidates tried before giving up on collisions.
        """
        self.db = db
        self.code_generator = code_generator
        self.max_attempts = max_attempts

    def issue(self, email: str, role: Union[Role, str], created_by: Optional[str] = None) -> str:
        """Generate and store a code for ``email`` and ``role``.

        A candidate that collides with an outstanding code is rejected by the
        primary key, and a fresh candidate is tried.

        Args:
            email: Target email address of the invitee.
            role: Role granted on redemption.
            created_by: Username of the issuer.

        Returns:
            The new code. Delivering it to the invitee is up to the caller.

        Raises:
            ValueError: If role is invalid.
            CodeGenerationExhaustedError: If every candidate collided.
            StoreUnavailableError: If the store cannot be written.
        """
        parsed = Role.parse(role)
        if parsed is None:
            raise ValueError(f"Invalid role: {role}. Must be one of {[r.value for r in Role]}.")

        for attempt in range(1, self.max_attempts + 1):
            code = self.code_generator()
            try:
                self.db.execute(
                    insert(InvitationCodeModel).values(
                        code=code,
                        email=email,
                        role=parsed.value,
                        created_by=created_by,
                        created_at=datetime.now(pytz.utc).isoformat(),
                    )
                )
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                logger.debug("Invitation code collision on attempt %d", attempt)
                continue
            except OperationalError as e:
                self.db.rollback()
                logger.error("Failed to store invitation code: %s", e)
                raise StoreUnavailableError(str(e)) from e
            logger.info(
                "Generated invitation code %s for role: %s, created by: %s",
                _mask(code), parsed.value, created_by,
            )
            return code

        logger.error("Invitation code space exhausted after %d attempts", self.max_attempts)
        raise CodeGenerationExhaustedError(self.max_attempts)

    def _get_model(self, code: str) -> Optional[InvitationCodeModel]:
        return (
            self.db.query(InvitationCodeModel)
            .filter(InvitationCodeModel.code == code)
            .first()
        )

    def get(self, code: str) -> Optional[InvitationCode]:
        model = self._get_model(code)
        return model_to_invitation(model) if model else None

    def lookup_role(self, code: str) -> Optional[Role]:
        model = self._get_model(code)
        return Role(model.role) if model else None

    def lookup_email(self, code: str) -> Optional[str]:
        model = self._get_model(code)
        return model.email if model else None

    def email_already_invited(self, email: str) -> bool:
        """Check whether an outstanding code targets ``email``.

        A storage failure is reported as False.
        """
        try:
            return (
                self.db.query(InvitationCodeModel.code)
                .filter(InvitationCodeModel.email == email)
                .first()
                is not None
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning("Could not check invitations for %s: %s", email, e)
            return False

    def outstanding_count(self) -> int:
        return self.db.query(func.count(InvitationCodeModel.code)).scalar() or 0

    def list_codes(
        self, role: Optional[Role] = None, created_by: Optional[str] = None
    ) -> List[InvitationCode]:
        """List outstanding codes, newest first, with optional filters."""
        query = self.db.query(InvitationCodeModel)
        if role:
            query = query.filter(InvitationCodeModel.role == Role(role).value)
        if created_by:
            query = query.filter(InvitationCodeModel.created_by == created_by)
        models = query.order_by(InvitationCodeModel.created_at.desc()).all()
        return [model_to_invitation(m) for m in models]

    def _delete(self, code: str, commit: bool) -> bool:
        try:
            deleted = (
                self.db.query(InvitationCodeModel)
                .filter(InvitationCodeModel.code == code)
                .delete(synchronize_session=False)
            )
            if commit:
                self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to delete invitation code %s: %s", _mask(code), e)
            raise StoreUnavailableError(str(e)) from e
        return bool(deleted)

    def redeem(self, code: str, commit: bool = True) -> bool:
        """Consume a code.

        Redeeming a code that was never issued or is already consumed is a
        no-op.

        Args:
            code: Code to consume.
            commit: Commit the deletion. Pass False to make it part of the
                caller's transaction.

        Returns:
            True if the code existed and was deleted.
        """
        redeemed = self._delete(code, commit)
        if redeemed:
            logger.info("Redeemed invitation code: %s", _mask(code))
        return redeemed

    def revoke(self, code: str) -> bool:
        """Withdraw an outstanding code without registering anyone."""
        revoked = self._delete(code, commit=True)
        if revoked:
            logger.info("Revoked invitation code: %s", _mask(code))
        return revoked
