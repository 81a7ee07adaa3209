"""
Career Clarified - Admin blog endpoints.

AI-drafted blog posts for content marketing. Each draft links naturally to
a product feature page; drafts stay unpublished until an admin publishes
them.
"""
from datetime import datetime, timezone
from typing import List
import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..models import BlogPost, Profile
from ..rate_limit import limiter, RATE_LIMIT_AI, RATE_LIMIT_ADMIN
from ..schemas import (
    GenerateBlogRequest, GenerateBlogResponse, BlogPostResponse, PublishPostRequest,
)
from ..auth.dependencies import ensure_user_matches, get_client_ip, get_query_user_id
from ..query_helpers import get_profile
from ..services.ai_service import AIService, AIServiceError, get_ai_service
from ..services.ai_prompts import BLOG_SYSTEM_PROMPT, BLOG_USER_PROMPT
from ..services.blog import (
    DEFAULT_AUTHOR, extract_title, generate_slug, unique_slug, extract_excerpt,
)

router = APIRouter()
logger = logging.getLogger("clarified.blog")


def get_blog_admin(db: Session, user_id: str) -> Profile:
    """
    Resolve the acting admin's profile.

    Any user with a profile may act unless an admin user id is configured,
    in which case only that user or profiles flagged is_admin may.
    """
    profile = get_profile(db, user_id)
    if not profile:
        raise HTTPException(status_code=403, detail="Unauthorized")

    admin_id = settings.supabase.admin_user_id
    if admin_id and user_id != admin_id and not profile.is_admin:
        logger.warning(f"Non-admin user {user_id} attempted a blog admin action")
        raise HTTPException(status_code=403, detail="Unauthorized")
    return profile


@router.post("/generate-blog", response_model=GenerateBlogResponse)
@limiter.limit(RATE_LIMIT_AI)
async def generate_blog(
    request: Request,
    body: GenerateBlogRequest,
    db: Session = Depends(get_db),
    ai: AIService = Depends(get_ai_service),
):
    """
    Generate an SEO blog post draft about a topic and store it.

    The post links to `featurePath` as the solution for `targetFeature`.
    """
    ensure_user_matches(request, body.user_id)
    if not ai.is_configured():
        raise HTTPException(status_code=500, detail="OpenAI API key not configured")

    profile = get_blog_admin(db, body.user_id)

    try:
        content = await ai.chat(
            [
                {"role": "system", "content": BLOG_SYSTEM_PROMPT.format(topic=body.topic)},
                {
                    "role": "user",
                    "content": BLOG_USER_PROMPT.format(
                        topic=body.topic,
                        target_feature=body.target_feature,
                        feature_path=body.feature_path,
                    ),
                },
            ],
            model=settings.ai.default_model,
            temperature=0.7,
        )
    except AIServiceError as e:
        logger.error(f"Blog generation failed: {e}")
        raise HTTPException(status_code=500, detail=str(e) or "Failed to generate blog post")

    if not content:
        raise HTTPException(status_code=500, detail="No response from OpenAI")

    title = extract_title(content, body.topic)
    post = BlogPost(
        title=title,
        slug=unique_slug(db, generate_slug(title)),
        excerpt=extract_excerpt(content),
        content=content,
        author=profile.email or DEFAULT_AUTHOR,
        published_at=None,
        category=None,
        featured_image=None,
        related_feature_link=body.feature_path,
    )

    try:
        db.add(post)
        db.commit()
        db.refresh(post)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating blog post: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to save blog post", "details": str(getattr(e, "orig", None) or e)},
        )

    logger.info(f"Blog draft '{post.slug}' created by {body.user_id} from {get_client_ip(request)}")
    return GenerateBlogResponse(success=True, post=BlogPostResponse.model_validate(post))


@router.get("/blog-posts", response_model=List[BlogPostResponse])
@limiter.limit(RATE_LIMIT_ADMIN)
def list_drafts(
    request: Request,
    user_id: str = Depends(get_query_user_id),
    db: Session = Depends(get_db),
):
    """Unpublished drafts, newest first."""
    get_blog_admin(db, user_id)

    return (
        db.query(BlogPost)
        .filter(BlogPost.published_at.is_(None))
        .order_by(BlogPost.created_at.desc())
        .all()
    )


@router.post("/blog-posts/{post_id}/publish", response_model=BlogPostResponse)
@limiter.limit(RATE_LIMIT_ADMIN)
def publish_post(
    request: Request,
    post_id: str,
    body: PublishPostRequest,
    db: Session = Depends(get_db),
):
    """Publish a draft now. Publishing an already published post is a no-op."""
    ensure_user_matches(request, body.user_id)
    get_blog_admin(db, body.user_id)

    try:
        post_id = str(uuid.UUID(post_id))
    except ValueError:
        raise HTTPException(status_code=404, detail="Blog post not found")

    post = db.query(BlogPost).filter(BlogPost.id == post_id).first()
    if not post:
        raise HTTPException(status_code=404, detail="Blog post not found")

    if post.published_at is None:
        post.published_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(post)
        logger.info(f"Blog post '{post.slug}' published by {body.user_id}")
    return post
