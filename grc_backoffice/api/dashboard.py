"""
Dashboard summary endpoint.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from grc_backoffice.api.deps import get_current_user
from grc_backoffice.models.base import get_db
from grc_backoffice.models.user import User
from grc_backoffice.schemas.dashboard import DashboardSummary
from grc_backoffice.services.dashboard_service import DashboardService

router = APIRouter(prefix="/api/v1/dashboard", tags=["Dashboard"])


@router.get("/summary", response_model=DashboardSummary)
def dashboard_summary(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Headline figures for the dashboard."""
    return DashboardService(db).summary()
