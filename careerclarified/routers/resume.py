"""
Career Clarified - Resume parsing endpoint.

POST /api/parse-resume takes a base64 PDF, stores it in the resume bucket
under the user's folder, extracts its text and asks the model for a
structured JSON resume. The response's `content` is that JSON as a string.
"""
from datetime import datetime, timezone
from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from ..config import settings
from ..database import get_db
from ..models import Profile
from ..rate_limit import limiter, RATE_LIMIT_AI
from ..schemas import ParseResumeRequest, ContentResponse
from ..auth.dependencies import ensure_user_matches
from ..query_helpers import get_profile
from ..services.ai_service import AIService, AIServiceError, describe_ai_error, get_ai_service
from ..services.storage_service import (
    StorageService, StorageServiceError, describe_storage_error, get_storage_service,
)
from ..services.quota import enforce_quota, log_usage
from ..services.resume_parser import (
    PDFParseError,
    strip_data_url,
    decode_file_data,
    is_pdf,
    build_storage_path,
    extract_pdf_text,
    build_parse_messages,
    normalize_parsed_resume,
)

router = APIRouter()
logger = logging.getLogger("clarified.resume")


def _load_profile(db: Session, user_id: str) -> Optional[Profile]:
    try:
        return get_profile(db, user_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Profile fetch failed for {user_id}: {e}")
        return None


def _ensure_profile(db: Session, user_id: str) -> None:
    """Create the profile row if it is missing. Failures are not fatal."""
    try:
        db.merge(Profile(id=user_id, updated_at=datetime.now(timezone.utc)))
        db.commit()
        logger.info(f"Created missing profile for user {user_id}")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Profile upsert failed for {user_id} (continuing): {e}")


@router.post("/parse-resume", response_model=ContentResponse)
@limiter.limit(RATE_LIMIT_AI)
async def parse_resume(
    request: Request,
    body: ParseResumeRequest,
    db: Session = Depends(get_db),
    ai: AIService = Depends(get_ai_service),
    storage: StorageService = Depends(get_storage_service),
):
    """
    Upload and AI-parse a PDF resume.

    Users without a profile row get one created and are not quota-checked
    on this request. Everyone else goes through the tier gate and the
    daily limit first.
    """
    ensure_user_matches(request, body.user_id)

    profile = _load_profile(db, body.user_id)
    if profile is None:
        _ensure_profile(db, body.user_id)
    else:
        try:
            enforce_quota(db, profile, body.feature_name)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Usage check failed for user {profile.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to check usage limits")

    raw_base64 = strip_data_url(body.file_data)
    if not is_pdf(body.mime_type, body.file_name):
        raise HTTPException(
            status_code=400,
            detail="Resume file must be a PDF for AI parsing. Please upload a PDF.",
        )

    try:
        pdf_bytes = decode_file_data(raw_base64)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    storage_path = build_storage_path(body.user_id, body.file_name)
    logger.info(f"Parsing resume for {body.user_id}: {len(pdf_bytes)} bytes")

    # Step 1: store the original file
    if storage.is_configured():
        bucket = settings.supabase.resume_bucket
        try:
            await storage.get_bucket(bucket)
        except StorageServiceError as e:
            logger.error(f"Bucket check failed: {e}")
            raise HTTPException(
                status_code=400,
                detail=f"Storage bucket '{bucket}' not found. Please create it in Supabase Storage.",
            )
        try:
            await storage.upload(
                bucket,
                storage_path,
                pdf_bytes,
                content_type=body.mime_type or "application/pdf",
                upsert=False,
            )
        except StorageServiceError as e:
            logger.error(f"Resume upload failed: {e}")
            raise HTTPException(status_code=500, detail=describe_storage_error(e))
    else:
        logger.warning("Storage not configured; skipping resume upload")

    # Step 2: text extraction and model parsing
    if not ai.is_configured():
        logger.error("Resume parse requested but no API key is configured")
        raise HTTPException(status_code=500, detail="API Key missing. Set the OpenAI API key on the server.")

    try:
        extracted_text = await run_in_threadpool(extract_pdf_text, pdf_bytes)
    except PDFParseError as e:
        logger.error(f"PDF parse error: {e}")
        raise HTTPException(
            status_code=500,
            detail=f"PDF parse error: {e}. File may be corrupted or image-only.",
        )

    messages = build_parse_messages(extracted_text, raw_base64)
    try:
        content = await ai.chat(messages, model=settings.ai.resume_parse_model)
    except AIServiceError as e:
        logger.error(f"Resume parsing completion failed: {e}")
        raise HTTPException(status_code=500, detail=describe_ai_error(e))

    if not content:
        raise HTTPException(status_code=500, detail="No response from OpenAI")

    log_usage(db, body.user_id, body.feature_name)
    return ContentResponse(content=normalize_parsed_resume(content))
