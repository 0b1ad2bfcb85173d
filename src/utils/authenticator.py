"""Role-gated authentication.

A user may hold several roles, so a login is always made against one role
surface at a time. Nothing here keeps session state: a successful login
yields an Identity that the caller passes into later calls.
"""

import logging
from typing import Optional, Union

from schemas.user import Identity, Role
from utils.user_manager import UserManager, verify_password

logger = logging.getLogger(__name__)


class Authenticator:
    """Validates (username, password) pairs against a single role."""

    def __init__(self, user_manager: UserManager):
        self.user_manager = user_manager

    def authenticate(self, username: str, password: str, role: Union[Role, str]) -> bool:
        """Check credentials for one role.

        Args:
            username: Username to check.
            password: Plain text password.
            role: Role surface being logged in to.

        Returns:
            True iff the account exists, the password matches and the
            account holds ``role``.
        """
        return self.login(username, password, role) is not None

    def login(
        self, username: str, password: str, role: Union[Role, str]
    ) -> Optional[Identity]:
        """Authenticate and build the identity for the requested role.

        Returns:
            Identity on success, None otherwise.
        """
        parsed = Role.parse(role)
        if parsed is None:
            logger.info("Login rejected for %s: unknown role '%s'", username, role)
            return None
        account = self.user_manager.get_account(username)
        if account is None or not verify_password(password, account.password_hash):
            logger.info("Login rejected for %s as %s: bad credentials", username, parsed.value)
            return None
        if not account.has_role(parsed):
            logger.info("Login rejected for %s: role %s not held", username, parsed.value)
            return None
        return Identity(username=account.username, roles=account.roles, active_role=parsed)

    def identity_for(self, username: str, role: Union[Role, str]) -> Optional[Identity]:
        """Rebuild an identity from a previously authenticated username.

        The role must still be held; roles removed since login are dropped.
        """
        parsed = Role.parse(role)
        account = self.user_manager.get_account(username)
        if parsed is None or account is None or not account.has_role(parsed):
            return None
        return Identity(username=account.username, roles=account.roles, active_role=parsed)
