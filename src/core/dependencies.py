"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes,
following Google Python Style Guide and FastAPI best practices.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from core.database import get_db
from utils import authenticator
from utils import content_manager
from utils import forum_service
from utils import invitation_manager
from utils import registration
from utils import user_manager


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_invitation_manager(
    db: Session = Depends(get_db),
) -> invitation_manager.InvitationManager:
    """Get InvitationManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        InvitationManager instance.
    """
    return invitation_manager.InvitationManager(db)


def get_content_manager(db: Session = Depends(get_db)) -> content_manager.ContentManager:
    """Get ContentManager instance with request-scoped DB session."""
    return content_manager.ContentManager(db)


def get_authenticator(
    users: user_manager.UserManager = Depends(get_user_manager),
) -> authenticator.Authenticator:
    """Get Authenticator bound to the request's UserManager."""
    return authenticator.Authenticator(users)


def get_registration_service(
    users: user_manager.UserManager = Depends(get_user_manager),
    invitations: invitation_manager.InvitationManager = Depends(get_invitation_manager),
) -> registration.RegistrationService:
    """Get RegistrationService sharing one DB session between its managers."""
    return registration.RegistrationService(users, invitations)


def get_forum_service(
    content: content_manager.ContentManager = Depends(get_content_manager),
) -> forum_service.ForumService:
    """Get ForumService wrapping the request's ContentManager."""
    return forum_service.ForumService(content)


# Type aliases for dependency injection
UserManagerDep = Annotated[
    user_manager.UserManager, Depends(get_user_manager)
]
InvitationManagerDep = Annotated[
    invitation_manager.InvitationManager, Depends(get_invitation_manager)
]
ContentManagerDep = Annotated[
    content_manager.ContentManager, Depends(get_content_manager)
]
AuthenticatorDep = Annotated[
    authenticator.Authenticator, Depends(get_authenticator)
]
RegistrationServiceDep = Annotated[
    registration.RegistrationService, Depends(get_registration_service)
]
ForumServiceDep = Annotated[
    forum_service.ForumService, Depends(get_forum_service)
]
