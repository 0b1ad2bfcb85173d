"""Authentication routes.

This module handles HTTP endpoints for login, first-admin setup and
invitation-based registration.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

import pytz
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, JWT_SECRET_KEY
from core.dependencies import AuthenticatorDep, RegistrationServiceDep, UserManagerDep
from core.exceptions import (
    DuplicateUsernameError,
    InvalidInvitationCodeError,
    RegistrationClosedError,
    StoreUnavailableError,
)
from schemas.user import (
    AccountInfo,
    FirstAdminRequest,
    Identity,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    Role,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

# HTTP Bearer token security
security = HTTPBearer()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token.

    Args:
        data: Data to encode in the token.
        expires_delta: Optional expiration time delta.

    Returns:
        Encoded JWT token string.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(pytz.utc) + expires_delta
    else:
        expire = datetime.now(pytz.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def verify_token(credentials: HTTPAuthorizationCredentials = Depends(security)) -> dict:
    """Verify JWT token from Authorization header.

    Args:
        credentials: HTTP Bearer token credentials.

    Returns:
        Decoded token payload.

    Raises:
        HTTPException: If token is invalid or expired.
    """
    try:
        payload = jwt.decode(credentials.credentials, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )
    if payload.get("sub") is None or payload.get("role") is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )
    return payload


def get_current_identity(
    authenticator: AuthenticatorDep,
    token_payload: dict = Depends(verify_token),
) -> Identity:
    """Get the identity of the authenticated caller.

    The role recorded at login must still be held by the account.

    Raises:
        HTTPException: If the user is gone or lost the role.
    """
    identity = authenticator.identity_for(token_payload["sub"], token_payload["role"])
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or role revoked",
        )
    return identity


def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    """Allow only callers logged in on the Admin role surface."""
    if identity.active_role is not Role.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required.",
        )
    return identity


@router.post("/setup", response_model=AccountInfo, summary="Create the first administrator")
def setup_first_admin(
    req: FirstAdminRequest,
    registration: RegistrationServiceDep,
) -> AccountInfo:
    """Create the initial administrator on an empty store."""
    try:
        account = registration.register_first_admin(
            req.username,
            req.password,
            email=req.email,
            first_name=req.first_name,
            middle_name=req.middle_name,
            last_name=req.last_name,
            preferred_first_name=req.preferred_first_name,
        )
    except RegistrationClosedError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except DuplicateUsernameError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except StoreUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Account store unavailable.",
        )
    return AccountInfo.from_account(account)


@router.post("/register", response_model=AccountInfo, summary="Register with an invitation code")
def register(
    req: RegisterRequest,
    registration: RegistrationServiceDep,
) -> AccountInfo:
    """Register a new user by redeeming an invitation code.

    The code decides the role and email address of the new account.

    Raises:
        HTTPException: 400 for a bad code, 409 for a taken username.
    """
    try:
        account = registration.register_with_invitation(
            req.invitation_code.strip(),
            req.username,
            req.password,
            first_name=req.first_name,
            middle_name=req.middle_name,
            last_name=req.last_name,
            preferred_first_name=req.preferred_first_name,
        )
    except InvalidInvitationCodeError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except DuplicateUsernameError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except StoreUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Account store unavailable.",
        )
    return AccountInfo.from_account(account)


@router.post("/login", response_model=LoginResponse, summary="Log in to one role")
def login(req: LoginRequest, authenticator: AuthenticatorDep) -> LoginResponse:
    identity = authenticator.login(req.username, req.password, req.role)
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username, password or role.",
        )
    token = create_access_token({"sub": identity.username, "role": identity.active_role.value})
    logger.info("User %s logged in as %s", identity.username, identity.active_role.value)
    return LoginResponse(
        access_token=token,
        username=identity.username,
        role=identity.active_role,
        roles=sorted(identity.roles, key=lambda r: r.value),
    )


@router.get("/me", response_model=AccountInfo, summary="Current account")
def me(
    user_manager: UserManagerDep,
    identity: Identity = Depends(get_current_identity),
) -> AccountInfo:
    account = user_manager.get_account(identity.username)
    if account is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return AccountInfo.from_account(account)
