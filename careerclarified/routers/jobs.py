"""
Career Clarified - Job tracker API.

Saved job leads move through the pipeline
new-leads -> reviewing -> applied -> interviewing -> offer, or end up
rejected/archived. Every endpoint is scoped by the `userId` query parameter.
"""
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
from sqlalchemy import func, or_
from typing import List, Optional
from datetime import date
import logging
import math

from ..database import get_db
from ..models import TrackedJob
from ..schemas import (
    JobStatus, TrackedJobCreate, TrackedJobUpdate, TrackedJobResponse, JobAnalytics,
)
from ..auth.dependencies import get_query_user_id
from ..query_helpers import user_query, get_owned_or_404
from ..rate_limit import limiter, RATE_LIMIT_GENERAL, RATE_LIMIT_READ

router = APIRouter()
logger = logging.getLogger("clarified.jobs")

APPLIED_STATUSES = ["applied", "interviewing", "offer"]
INTERVIEW_STATUSES = ["interviewing", "offer"]
DUPLICATE_MESSAGE = "This job is already being tracked"
# Columns a PATCH may change but never clear
REQUIRED_FIELDS = ("title", "company", "match_score", "status")


def find_duplicate(db: Session, user_id: str, job: TrackedJobCreate) -> Optional[TrackedJob]:
    """A tracked job with the same URL (any case), or the same title and company."""
    conditions = [
        (TrackedJob.title == job.title) & (TrackedJob.company == job.company),
    ]
    if job.url:
        conditions.append(func.lower(TrackedJob.url) == job.url.strip().lower())
    return user_query(db, TrackedJob, user_id).filter(or_(*conditions)).first()


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@router.get("", response_model=List[TrackedJobResponse])
@limiter.limit(RATE_LIMIT_READ)
def list_jobs(
    request: Request,
    status: Optional[JobStatus] = None,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 200,
    user_id: str = Depends(get_query_user_id),
    db: Session = Depends(get_db),
):
    """List tracked jobs, newest first, optionally filtered by status or search."""
    query = user_query(db, TrackedJob, user_id)

    if status:
        query = query.filter(TrackedJob.status == status.value)
    if search:
        search_term = f"%{search}%"
        query = query.filter(
            or_(
                TrackedJob.title.ilike(search_term),
                TrackedJob.company.ilike(search_term),
                TrackedJob.location.ilike(search_term),
                TrackedJob.notes.ilike(search_term),
            )
        )

    return query.order_by(TrackedJob.created_at.desc()).offset(skip).limit(limit).all()


@router.get("/analytics", response_model=JobAnalytics)
@limiter.limit(RATE_LIMIT_READ)
def get_job_analytics(
    request: Request,
    user_id: str = Depends(get_query_user_id),
    db: Session = Depends(get_db),
):
    """Pipeline counts and averages for the tracker dashboard."""
    jobs = user_query(db, TrackedJob, user_id).all()

    by_status = {s.value: 0 for s in JobStatus}
    by_source = {}
    for job in jobs:
        by_status[job.status] = by_status.get(job.status, 0) + 1
        source = job.source or "manual"
        by_source[source] = by_source.get(source, 0) + 1

    scores = [job.match_score for job in jobs if job.match_score and job.match_score > 0]
    average = round_half_up(sum(scores) / len(scores)) if scores else 0

    return JobAnalytics(
        total=len(jobs),
        by_status=by_status,
        by_source=by_source,
        average_match_score=average,
        total_applied=sum(
            1 for job in jobs if job.status in APPLIED_STATUSES or job.application_date
        ),
        total_interviews=sum(
            1 for job in jobs if job.status in INTERVIEW_STATUSES or job.interview_date
        ),
        total_offers=sum(1 for job in jobs if job.status == "offer"),
    )


@router.get("/{job_id}", response_model=TrackedJobResponse)
@limiter.limit(RATE_LIMIT_READ)
def get_job(
    request: Request,
    job_id: int,
    user_id: str = Depends(get_query_user_id),
    db: Session = Depends(get_db),
):
    return get_owned_or_404(db, TrackedJob, job_id, user_id, "Job")


@router.post("", response_model=TrackedJobResponse, status_code=201)
@limiter.limit(RATE_LIMIT_GENERAL)
def add_job(
    request: Request,
    job: TrackedJobCreate,
    user_id: str = Depends(get_query_user_id),
    db: Session = Depends(get_db),
):
    """
    Start tracking a job.

    Raises:
        HTTPException: 409 if the same URL or title/company is already tracked
    """
    if find_duplicate(db, user_id, job):
        raise HTTPException(status_code=409, detail=DUPLICATE_MESSAGE)

    data = job.model_dump()
    data["status"] = job.status.value
    data["source"] = job.source or job.added_from
    data["posted_date"] = job.posted_date or date.today()
    db_job = TrackedJob(**data, user_id=user_id)
    if job.status == JobStatus.APPLIED:
        db_job.application_date = date.today()

    db.add(db_job)
    db.commit()
    db.refresh(db_job)
    logger.info(f"User {user_id} started tracking job {db_job.id} ({db_job.company})")
    return db_job


@router.patch("/{job_id}", response_model=TrackedJobResponse)
@limiter.limit(RATE_LIMIT_GENERAL)
def update_job(
    request: Request,
    job_id: int,
    job: TrackedJobUpdate,
    user_id: str = Depends(get_query_user_id),
    db: Session = Depends(get_db),
):
    """Update a tracked job. Moving it to `applied` stamps the application date."""
    db_job = get_owned_or_404(db, TrackedJob, job_id, user_id, "Job")

    update_data = {
        key: value for key, value in job.model_dump(exclude_unset=True).items()
        if value is not None or key not in REQUIRED_FIELDS
    }
    if "status" in update_data:
        update_data["status"] = update_data["status"].value
        if update_data["status"] == JobStatus.APPLIED.value and not db_job.application_date:
            db_job.application_date = date.today()

    for key, value in update_data.items():
        setattr(db_job, key, value)

    db.commit()
    db.refresh(db_job)
    return db_job


@router.delete("/{job_id}")
@limiter.limit(RATE_LIMIT_GENERAL)
def delete_job(
    request: Request,
    job_id: int,
    user_id: str = Depends(get_query_user_id),
    db: Session = Depends(get_db),
):
    db_job = get_owned_or_404(db, TrackedJob, job_id, user_id, "Job")
    db.delete(db_job)
    db.commit()
    return {"message": "Job deleted"}
