"""
Career Clarified - Tier gating and daily AI quota.

Every AI call made on behalf of a user is appended to `ai_usage_logs`.
A user's quota is the number of rows created since midnight UTC, compared
against the limit for their tier.

Known race: the check (count) and the log (insert) are separate
statements. Two concurrent requests from the same user at the boundary can
both pass the check before either is logged. Making this atomic needs an
increment-and-check in the database and is not done here.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import AIUsageLog, Profile

logger = logging.getLogger("clarified.quota")

# Daily AI calls per tier
TIER_LIMITS = {
    "free": 5,
    "pro": 50,
    "ultimate": 200,
}

# Features gated above the free tier
PRO_FEATURES = frozenset({"application_tailor", "interview_prep"})
ULTIMATE_FEATURES = frozenset({"content_engine", "skill_radar", "skill_benchmarking", "ai_portfolio"})

TIER_NAMES = {
    "free": "Free",
    "pro": "Job Seeker",
    "ultimate": "Career Architect",
}

DAILY_LIMIT_MESSAGE = "Daily limit reached"


def utc_day_start(now: Optional[datetime] = None) -> datetime:
    """Midnight UTC of the given instant (default: now)."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def normalize_tier(tier: Optional[str]) -> str:
    tier = (tier or "free").strip().lower()
    return tier if tier in TIER_LIMITS else "free"


def daily_limit(tier: Optional[str]) -> int:
    return TIER_LIMITS[normalize_tier(tier)]


def check_feature_access(tier: Optional[str], feature_name: str) -> Optional[str]:
    """Return None when the tier may use the feature, else the denial message."""
    tier = normalize_tier(tier)
    if feature_name in ULTIMATE_FEATURES and tier != "ultimate":
        return f"This feature requires {TIER_NAMES['ultimate']} (Ultimate) tier."
    if feature_name in PRO_FEATURES and tier == "free":
        return (
            f"This feature requires {TIER_NAMES['pro']} (Pro) or "
            f"{TIER_NAMES['ultimate']} (Ultimate) tier."
        )
    return None


def count_usage_today(db: Session, user_id: str, now: Optional[datetime] = None) -> int:
    """Count the user's usage rows created since midnight UTC."""
    return db.query(func.count(AIUsageLog.id)).filter(
        AIUsageLog.user_id == user_id,
        AIUsageLog.created_at >= utc_day_start(now),
    ).scalar() or 0


def enforce_quota(db: Session, profile: Profile, feature_name: str) -> int:
    """
    Apply the feature gate and the daily limit for a profile.

    Returns the usage count so far today.

    Raises:
        HTTPException: 403 when the tier may not use the feature,
                       429 when today's usage is at or above the limit
    """
    denial = check_feature_access(profile.tier, feature_name)
    if denial:
        logger.info(f"Feature '{feature_name}' denied for user {profile.id} (tier={profile.tier})")
        raise HTTPException(status_code=403, detail=denial)

    used = count_usage_today(db, profile.id)
    if used >= daily_limit(profile.tier):
        logger.info(f"Daily limit reached for user {profile.id} ({used} calls)")
        raise HTTPException(status_code=429, detail=DAILY_LIMIT_MESSAGE)
    return used


def log_usage(db: Session, user_id: str, feature_name: str) -> bool:
    """
    Append a usage row. Failures are logged and swallowed.

    Returns True when the row was written.
    """
    try:
        db.add(AIUsageLog(
            user_id=user_id,
            feature_name=feature_name,
            created_at=datetime.now(timezone.utc),
        ))
        db.commit()
        return True
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Usage log insert failed for user {user_id}: {e}")
        return False


def usage_summary(db: Session, profile: Profile, now: Optional[datetime] = None) -> dict:
    """Quota snapshot for dashboards."""
    tier = normalize_tier(profile.tier)
    limit = daily_limit(tier)
    used = count_usage_today(db, profile.id, now)
    return {
        "tier": tier,
        "tier_name": TIER_NAMES[tier],
        "limit": limit,
        "used": used,
        "remaining": max(limit - used, 0),
        "resets_at": (utc_day_start(now) + timedelta(days=1)).isoformat(),
    }
