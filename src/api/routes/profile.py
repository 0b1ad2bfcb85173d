"""Own-profile routes."""

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import get_current_identity
from core.dependencies import UserManagerDep
from core.exceptions import StoreUnavailableError
from schemas.user import AccountInfo, Identity, UpdateProfileRequest

router = APIRouter(prefix="/api/profile", tags=["Profile"])


@router.get("", response_model=AccountInfo, summary="Read own profile")
def get_profile(
    user_manager: UserManagerDep,
    identity: Identity = Depends(get_current_identity),
) -> AccountInfo:
    account = user_manager.get_account(identity.username)
    if account is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return AccountInfo.from_account(account)


@router.patch("", response_model=AccountInfo, summary="Update own profile")
def update_profile(
    req: UpdateProfileRequest,
    user_manager: UserManagerDep,
    identity: Identity = Depends(get_current_identity),
) -> AccountInfo:
    """Update the fields present in the request body; others are kept."""
    fields = req.model_dump(exclude_unset=True)
    try:
        updated = user_manager.update_profile(identity.username, **fields)
    except StoreUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Account store unavailable.",
        )
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return AccountInfo.from_account(user_manager.get_account(identity.username))
