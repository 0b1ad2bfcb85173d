"""Account registration flows.

The first account of an empty store becomes the administrator. Every later
account is created by redeeming an invitation code, which fixes the new
account's email address and role.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import (
    InvalidInvitationCodeError,
    RegistrationClosedError,
    StoreUnavailableError,
)
from schemas.user import ROLE_COLUMNS, Account, Role
from utils.invitation_manager import InvitationManager
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)


class RegistrationService:
    """Creates accounts from first-admin setup or invitation codes."""

    def __init__(self, user_manager: UserManager, invitation_manager: InvitationManager):
        self.users = user_manager
        self.invitations = invitation_manager

    def register_first_admin(
        self,
        username: str,
        password: str,
        email: Optional[str] = None,
        **profile: Optional[str],
    ) -> Account:
        """Create the initial administrator.

        Raises:
            RegistrationClosedError: If any account already exists.
            DuplicateUsernameError: If a concurrent setup took the username.
        """
        if not self.users.is_empty():
            raise RegistrationClosedError("The first administrator has already been set up.")
        account = Account(username=username, email=email, is_admin=True, **profile)
        account = self.users.register(account, password, commit=False)
        try:
            if self.users.count() != 1:
                # Another account landed between the check and the insert
                self.users.db.rollback()
                raise RegistrationClosedError(
                    "The first administrator has already been set up."
                )
            self.users.db.commit()
        except SQLAlchemyError as e:
            self.users.db.rollback()
            logger.error("Failed to complete setup of %s: %s", username, e)
            raise StoreUnavailableError(str(e)) from e
        logger.info("First administrator registered: %s", username)
        return account

    def register_with_invitation(
        self, code: str, username: str, password: str, **profile: Optional[str]
    ) -> Account:
        """Redeem ``code`` and create the account it grants.

        The code deletion and the account insert share one transaction: if
        the username is taken the code stays outstanding.

        Args:
            code: Invitation code.
            username: Desired username.
            password: Plain text password.
            **profile: Optional name fields.

        Returns:
            The created Account.

        Raises:
            InvalidInvitationCodeError: If the code is unknown or consumed.
            DuplicateUsernameError: If the username already exists.
        """
        invitation = self.invitations.get(code)
        if invitation is None:
            raise InvalidInvitationCodeError("Invalid invitation code")

        flags = {ROLE_COLUMNS[Role(invitation.role)]: True}
        account = Account(username=username, email=invitation.email, **flags, **profile)

        if not self.invitations.redeem(code, commit=False):
            # Consumed by someone else since the lookup
            raise InvalidInvitationCodeError("Invalid invitation code")
        account = self.users.register(account, password, commit=False)
        try:
            self.users.db.commit()
        except SQLAlchemyError as e:
            self.users.db.rollback()
            logger.error("Failed to complete registration of %s: %s", username, e)
            raise StoreUnavailableError(str(e)) from e
        logger.info("Registered %s as %s via invitation", username, invitation.role.value)
        return account
