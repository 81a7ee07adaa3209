"""
Reusable query helpers for profile lookups and user-scoped data.

These functions eliminate repetitive user_id filtering across routers.
"""
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from .models import Profile


def get_profile(db: Session, user_id: str) -> Optional[Profile]:
    """Return the profile row for a user id, or None."""
    return db.query(Profile).filter(Profile.id == user_id).first()


def get_profile_or_404(db: Session, user_id: str) -> Profile:
    profile = get_profile(db, user_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


def user_query(db: Session, model, user_id: str):
    """Return a query filtered to the given user's records."""
    return db.query(model).filter(model.user_id == user_id)


def get_owned_or_404(db: Session, model, record_id: int, user_id: str, label: str = "Record"):
    """Fetch a record by id and user_id, or raise 404."""
    record = db.query(model).filter(
        model.id == record_id,
        model.user_id == user_id
    ).first()
    if not record:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return record
