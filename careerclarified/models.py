"""
Career Clarified - SQLAlchemy ORM models

Rows live in the hosted Postgres database: user profiles (tier gating),
the append-only AI usage log (daily quota counting), blog posts, and
tracked jobs for the job tracker board.
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, Text, Uuid

from .database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> str:
    return str(uuid.uuid4())


class Profile(Base):
    """
    Per-user profile row, keyed by the auth provider's user id.

    tier is one of free / pro / ultimate; anything else is treated as free.
    """
    __tablename__ = "profiles"

    id = Column(Uuid(as_uuid=False), primary_key=True)
    email = Column(String)
    full_name = Column(String)
    tier = Column(String, default="free")
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class AIUsageLog(Base):
    """One row per successful AI call. Counted per UTC day for quotas."""
    __tablename__ = "ai_usage_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Uuid(as_uuid=False), nullable=False, index=True)
    feature_name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)


class BlogPost(Base):
    __tablename__ = "blog_posts"

    id = Column(Uuid(as_uuid=False), primary_key=True, default=new_uuid)
    title = Column(String, nullable=False)
    slug = Column(String, nullable=False, unique=True, index=True)
    excerpt = Column(Text)
    content = Column(Text, nullable=False)
    author = Column(String)
    published_at = Column(DateTime(timezone=True))  # NULL = draft
    category = Column(String)
    featured_image = Column(String)
    related_feature_link = Column(String)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class TrackedJob(Base):
    __tablename__ = "tracked_jobs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Uuid(as_uuid=False), nullable=False, index=True)
    title = Column(String, nullable=False)
    company = Column(String, nullable=False)
    location = Column(String)
    salary = Column(String)
    match_score = Column(Integer, default=0)
    posted_date = Column(Date)
    source = Column(String)  # manual, job_finder, linkedin, ...
    status = Column(String, default="new-leads")
    notes = Column(Text)
    application_date = Column(Date)
    interview_date = Column(Date)
    contacts = Column(Text)
    url = Column(String)
    why_match = Column(Text)
    description = Column(Text)
    added_from = Column(String)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
