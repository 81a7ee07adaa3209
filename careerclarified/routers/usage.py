"""
Career Clarified - Quota status for the dashboard.
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..database import get_db
from ..rate_limit import limiter, RATE_LIMIT_READ
from ..schemas import UsageResponse
from ..auth.dependencies import check_user_id
from ..query_helpers import get_profile_or_404
from ..services.quota import usage_summary

router = APIRouter()


@router.get("/{user_id}", response_model=UsageResponse)
@limiter.limit(RATE_LIMIT_READ)
def get_usage(request: Request, user_id: str, db: Session = Depends(get_db)):
    """Today's AI usage against the user's tier limit."""
    user_id = check_user_id(request, user_id)
    profile = get_profile_or_404(db, user_id)
    return usage_summary(db, profile)
