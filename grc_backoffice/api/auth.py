"""
Login endpoint.

Both outcomes are audited: USER_LOGIN_SUCCESS with the user, or
USER_LOGIN_FAILURE with the attempted email and no user.
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from grc_backoffice.api.deps import get_app_settings, get_current_user, client_ip
from grc_backoffice.config import Settings
from grc_backoffice.errors import UnauthorizedError
from grc_backoffice.models.base import get_db
from grc_backoffice.models.enums import AuditAction, EntityType
from grc_backoffice.models.user import User
from grc_backoffice.schemas.auth import LoginRequest, LoginResponse, UserResponse
from grc_backoffice.services.audit_service import AuditService
from grc_backoffice.services.auth_service import AuthService

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """Exchange email and password for a bearer token."""
    service = AuthService(db, settings)
    audit = AuditService(db)
    ip = client_ip(request)

    try:
        user = service.authenticate(body.email, body.password)
    except UnauthorizedError as e:
        audit.log(
            AuditAction.USER_LOGIN_FAILURE,
            EntityType.USER,
            changes={"email": body.email, "result": "failed"},
            ip_address=ip,
        )
        raise HTTPException(status_code=401, detail=e.message)

    token = service.issue_token(user)
    audit.log(
        AuditAction.USER_LOGIN_SUCCESS,
        EntityType.USER,
        entity_id=user.id,
        changes={"email": user.email},
        user_id=user.id,
        ip_address=ip,
    )
    return LoginResponse(user=UserResponse.model_validate(user), token=token)


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_current_user)):
    return user
