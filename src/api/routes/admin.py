"""Administration routes: invitation codes, account listing and roles.

Every endpoint requires the caller to be logged in with the Admin role.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.routes.auth import require_admin
from core.dependencies import InvitationManagerDep, UserManagerDep
from core.exceptions import CodeGenerationExhaustedError, StoreUnavailableError
from schemas.user import (
    AccountInfo,
    GenerateInvitationCodeRequest,
    Identity,
    InvitationCode,
    InvitationCodeListResponse,
    Role,
    UpdateRoleRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.post("/invitations", response_model=InvitationCode, summary="Issue an invitation code")
def issue_invitation(
    req: GenerateInvitationCodeRequest,
    invitation_manager: InvitationManagerDep,
    admin: Identity = Depends(require_admin),
) -> InvitationCode:
    """Issue a single-use code binding an email address to a role.

    Raises:
        HTTPException: 409 if the email already has an outstanding code,
            503 if no code could be generated or stored.
    """
    email = req.email.strip()
    if invitation_manager.email_already_invited(email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"'{email}' already has an outstanding invitation.",
        )
    try:
        code = invitation_manager.issue(email, req.role, created_by=admin.username)
    except (CodeGenerationExhaustedError, StoreUnavailableError) as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    return invitation_manager.get(code)


@router.get("/invitations", response_model=InvitationCodeListResponse, summary="List invitation codes")
def list_invitations(
    invitation_manager: InvitationManagerDep,
    role: Optional[Role] = Query(default=None),
    admin: Identity = Depends(require_admin),
) -> InvitationCodeListResponse:
    codes = invitation_manager.list_codes(role=role)
    return InvitationCodeListResponse(codes=codes, total=len(codes))


@router.delete(
    "/invitations/{code}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Revoke an invitation code",
)
def revoke_invitation(
    code: str,
    invitation_manager: InvitationManagerDep,
    admin: Identity = Depends(require_admin),
) -> None:
    if not invitation_manager.revoke(code):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invitation code not found")
    logger.info("Invitation revoked by %s", admin.username)


@router.get("/users", response_model=List[AccountInfo], summary="List accounts")
def list_users(
    user_manager: UserManagerDep,
    admin: Identity = Depends(require_admin),
) -> List[AccountInfo]:
    return [AccountInfo.from_account(a) for a in user_manager.list_accounts()]


@router.get("/usernames", response_model=List[str], summary="Usernames for selection lists")
def list_usernames(
    user_manager: UserManagerDep,
    admin: Identity = Depends(require_admin),
) -> List[str]:
    return user_manager.list_usernames()


@router.put("/users/{username}/roles", response_model=AccountInfo, summary="Set or clear a role")
def update_role(
    username: str,
    req: UpdateRoleRequest,
    user_manager: UserManagerDep,
    admin: Identity = Depends(require_admin),
) -> AccountInfo:
    if not user_manager.exists(username):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if not user_manager.update_role(username, req.role, req.value):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Could not update role '{req.role}'.",
        )
    logger.info("Role %s=%s set on %s by %s", req.role, req.value, username, admin.username)
    return AccountInfo.from_account(user_manager.get_account(username))
