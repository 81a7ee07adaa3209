"""
Career Clarified - Public blog endpoints.

Only published posts are visible here; drafts live behind the admin router.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import BlogPost
from ..rate_limit import limiter, RATE_LIMIT_READ
from ..schemas import BlogPostResponse

router = APIRouter()


@router.get("", response_model=List[BlogPostResponse])
@limiter.limit(RATE_LIMIT_READ)
def list_posts(
    request: Request,
    limit: int = 50,
    db: Session = Depends(get_db),
):
    """Published posts, most recently published first."""
    return (
        db.query(BlogPost)
        .filter(BlogPost.published_at.isnot(None))
        .order_by(BlogPost.published_at.desc())
        .limit(limit)
        .all()
    )


@router.get("/{slug}", response_model=BlogPostResponse)
@limiter.limit(RATE_LIMIT_READ)
def get_post(request: Request, slug: str, db: Session = Depends(get_db)):
    post = db.query(BlogPost).filter(
        BlogPost.slug == slug,
        BlogPost.published_at.isnot(None),
    ).first()
    if not post:
        raise HTTPException(status_code=404, detail="Blog post not found")
    return post
