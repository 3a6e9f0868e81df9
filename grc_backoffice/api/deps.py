"""
Shared request dependencies: settings, the current user, role
checks and the external API key.

Settings live on app.state and are handed to endpoints through
get_app_settings(), never imported as a module global.
"""

from fastapi import Depends, HTTPException, Request, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from grc_backoffice.config import Settings
from grc_backoffice.errors import GRCError, to_http_exception
from grc_backoffice.models.base import get_db
from grc_backoffice.models.user import User
from grc_backoffice.services.auth_service import AuthService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def client_ip(request: Request) -> str | None:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


class JWTBearer(HTTPBearer):
    """
    HTTPBearer that always answers 401 for a missing or malformed
    Authorization header and returns the raw token.
    """

    def __init__(self):
        super().__init__(auto_error=False)

    async def __call__(self, request: Request) -> str:
        credentials: HTTPAuthorizationCredentials | None = await super().__call__(request)
        if not credentials or not credentials.credentials:
            raise HTTPException(status_code=401, detail="Authorization header required")
        if credentials.scheme.lower() != "bearer":
            raise HTTPException(status_code=401, detail="Invalid authentication scheme")
        return credentials.credentials


jwt_bearer = JWTBearer()


def get_current_user(
    token: str = Depends(jwt_bearer),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> User:
    try:
        return AuthService(db, settings).user_from_token(token)
    except GRCError as e:
        raise to_http_exception(e)


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


def require_api_key(
    x_api_key: str | None = Header(default=None),
    settings: Settings = Depends(get_app_settings),
) -> None:
    if not x_api_key or x_api_key != settings.EXTERNAL_API_KEY:
        raise HTTPException(status_code=401, detail="Invalid or missing API key")
