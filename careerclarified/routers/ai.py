"""
Career Clarified - AI generation endpoints.

POST /api/generate            - quota-enforced general completion
POST /api/enhance-experience  - rewrite an experience description as bullets
POST /api/enhance-summary     - rewrite a resume summary
POST /api/enhance-text        - polish arbitrary resume text
"""
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from ..config import settings
from ..database import get_db
from ..rate_limit import limiter, RATE_LIMIT_AI
from ..schemas import (
    GenerateRequest, ContentResponse,
    EnhanceExperienceRequest, EnhanceSummaryRequest, EnhanceTextRequest,
)
from ..auth.dependencies import ensure_user_matches
from ..query_helpers import get_profile_or_404
from ..services.ai_service import AIService, AIServiceError, get_ai_service
from ..services.quota import enforce_quota, log_usage
from ..services.ai_prompts import (
    ENHANCE_EXPERIENCE_SYSTEM, ENHANCE_EXPERIENCE_PROMPT,
    ENHANCE_SUMMARY_SYSTEM, ENHANCE_SUMMARY_PROMPT,
    ENHANCE_TEXT_SYSTEM,
)

router = APIRouter()
logger = logging.getLogger("clarified.ai")

NO_RESPONSE_MESSAGE = "No response from OpenAI"
NOT_CONFIGURED_MESSAGE = "OpenAI API key not configured"


def _require_configured(ai: AIService) -> None:
    if not ai.is_configured():
        logger.error("Completion requested but no API key is configured")
        raise HTTPException(status_code=500, detail=NOT_CONFIGURED_MESSAGE)


@router.post("/generate", response_model=ContentResponse)
@limiter.limit(RATE_LIMIT_AI)
async def generate(
    request: Request,
    body: GenerateRequest,
    db: Session = Depends(get_db),
    ai: AIService = Depends(get_ai_service),
):
    """
    Run a completion on behalf of a user, counted against their daily quota.

    Errors: 400 bad body, 403 feature gated for the user's tier, 404 no
    profile, 429 daily limit reached, 500 configuration or upstream failure.
    """
    ensure_user_matches(request, body.user_id)
    _require_configured(ai)

    profile = get_profile_or_404(db, body.user_id)
    try:
        enforce_quota(db, profile, body.feature_name)
    except SQLAlchemyError as e:
        logger.error(f"Usage check failed for user {profile.id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to check usage limits")

    messages = []
    if body.system_message:
        messages.append({"role": "system", "content": body.system_message})
    messages.append({"role": "user", "content": body.prompt})

    try:
        content = await ai.chat(messages, model=body.model or settings.ai.default_model)
    except AIServiceError as e:
        logger.error(f"Generation failed for feature '{body.feature_name}': {e}")
        raise HTTPException(status_code=500, detail=str(e) or "Failed to generate response")

    if not content:
        raise HTTPException(status_code=500, detail=NO_RESPONSE_MESSAGE)

    log_usage(db, profile.id, body.feature_name)
    return ContentResponse(content=content)


@router.post("/enhance-experience")
@limiter.limit(RATE_LIMIT_AI)
async def enhance_experience(
    request: Request,
    body: EnhanceExperienceRequest,
    ai: AIService = Depends(get_ai_service),
):
    """Rewrite a work experience description into 3-4 resume bullet points."""
    _require_configured(ai)

    prompt = ENHANCE_EXPERIENCE_PROMPT.format(
        job_title=body.job_title,
        description=body.description,
    )
    try:
        enhanced = await ai.chat(
            [
                {"role": "system", "content": ENHANCE_EXPERIENCE_SYSTEM},
                {"role": "user", "content": prompt},
            ],
            temperature=0.7,
            max_tokens=300,
        )
    except AIServiceError as e:
        logger.error(f"Experience enhancement failed: {e}")
        raise HTTPException(status_code=500, detail=str(e) or "Failed to enhance experience description")

    if not enhanced:
        raise HTTPException(status_code=500, detail=NO_RESPONSE_MESSAGE)
    return {"enhancedText": enhanced.strip()}


@router.post("/enhance-summary")
@limiter.limit(RATE_LIMIT_AI)
async def enhance_summary(
    request: Request,
    body: EnhanceSummaryRequest,
    ai: AIService = Depends(get_ai_service),
):
    """Rewrite a resume summary for a target job title."""
    _require_configured(ai)

    prompt = ENHANCE_SUMMARY_PROMPT.format(job_title=body.job_title, summary=body.summary)
    try:
        enhanced = await ai.chat(
            [
                {"role": "system", "content": ENHANCE_SUMMARY_SYSTEM},
                {"role": "user", "content": prompt},
            ],
            temperature=0.7,
            max_tokens=200,
        )
    except AIServiceError as e:
        logger.error(f"Summary enhancement failed: {e}")
        raise HTTPException(status_code=500, detail=str(e) or "Failed to enhance summary")

    if not enhanced:
        raise HTTPException(status_code=500, detail=NO_RESPONSE_MESSAGE)
    return {"enhancedSummary": enhanced.strip()}


@router.post("/enhance-text")
@limiter.limit(RATE_LIMIT_AI)
async def enhance_text(
    request: Request,
    body: EnhanceTextRequest,
    ai: AIService = Depends(get_ai_service),
):
    _require_configured(ai)

    try:
        enhanced = await ai.chat(
            [
                {"role": "system", "content": ENHANCE_TEXT_SYSTEM},
                {"role": "user", "content": body.text},
            ],
            temperature=0.7,
            max_tokens=500,
        )
    except AIServiceError as e:
        logger.error(f"Text enhancement failed: {e}")
        raise HTTPException(status_code=500, detail=str(e) or "Failed to enhance text")

    if not enhanced:
        raise HTTPException(status_code=500, detail=NO_RESPONSE_MESSAGE)
    return {"enhancedText": enhanced.strip()}
