"""
Career Clarified - Pydantic schemas for request/response validation.

Request bodies use the dashboard's camelCase keys (userId, fileData, ...)
through aliases; fields are declared in the order the API reports missing
values, since only the first validation error is returned to the client.
"""
from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import Optional, List, Dict, Any
from enum import Enum
import uuid


# Human-readable names used in 400 messages ("User ID is required")
FIELD_LABELS = {
    "prompt": "Prompt",
    "userId": "User ID",
    "feature_name": "Feature name",
    "fileData": "File data (base64)",
    "description": "Description",
    "jobTitle": "Job title",
    "summary": "Summary",
    "text": "Text",
    "topic": "Topic",
    "targetFeature": "Target feature",
    "featurePath": "Feature path",
    "email": "email",
    "password": "password",
    "title": "Title",
    "company": "Company",
}


def validate_user_id(value: str) -> str:
    try:
        return str(uuid.UUID(value))
    except ValueError:
        raise ValueError("User ID must be a valid UUID")


# --- AI Generation ---

class GenerateRequest(BaseModel):
    prompt: str = Field(..., min_length=1)
    system_message: Optional[str] = Field(None, alias="systemMessage")
    model: Optional[str] = None
    user_id: str = Field(..., alias="userId", min_length=1)
    feature_name: str = Field(..., min_length=1, max_length=100)

    @field_validator("user_id")
    @classmethod
    def check_user_id(cls, v):
        return validate_user_id(v)

    class Config:
        populate_by_name = True


class ContentResponse(BaseModel):
    content: str


class EnhanceExperienceRequest(BaseModel):
    description: str = Field(..., min_length=1, max_length=5000)
    job_title: str = Field(..., alias="jobTitle", min_length=1, max_length=200)

    class Config:
        populate_by_name = True


class EnhanceSummaryRequest(BaseModel):
    summary: str = Field(..., min_length=1, max_length=5000)
    job_title: str = Field(..., alias="jobTitle", min_length=1, max_length=200)

    class Config:
        populate_by_name = True


class EnhanceTextRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=5000)

    @field_validator("text")
    @classmethod
    def check_length(cls, v):
        if len(v.strip()) < 5:
            raise ValueError("Text must be at least 5 characters long")
        return v


# --- Resume Parsing ---

class ParseResumeRequest(BaseModel):
    user_id: str = Field(..., alias="userId", min_length=1)
    file_data: str = Field(..., alias="fileData", min_length=1)
    file_name: Optional[str] = Field(None, alias="fileName", max_length=255)
    mime_type: Optional[str] = Field(None, alias="mimeType", max_length=100)
    feature_name: str = Field("job_finder", min_length=1, max_length=100)

    @field_validator("user_id")
    @classmethod
    def check_user_id(cls, v):
        return validate_user_id(v)

    class Config:
        populate_by_name = True


# --- Auth Proxy ---

class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=254)
    password: str = Field(..., min_length=1)


class SignupRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=254)
    password: str = Field(..., min_length=1)
    name: Optional[str] = Field(None, max_length=200)


class PasswordResetRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=254)
    redirect_to: Optional[str] = Field(None, alias="redirectTo", max_length=500)

    class Config:
        populate_by_name = True


# --- Blog ---

class GenerateBlogRequest(BaseModel):
    topic: str = Field(..., min_length=1, max_length=300)
    target_feature: str = Field(..., alias="targetFeature", min_length=1, max_length=200)
    feature_path: str = Field(..., alias="featurePath", min_length=1, max_length=500)
    user_id: str = Field(..., alias="userId", min_length=1)

    @field_validator("user_id")
    @classmethod
    def check_user_id(cls, v):
        return validate_user_id(v)

    class Config:
        populate_by_name = True


class PublishPostRequest(BaseModel):
    user_id: str = Field(..., alias="userId", min_length=1)

    @field_validator("user_id")
    @classmethod
    def check_user_id(cls, v):
        return validate_user_id(v)

    class Config:
        populate_by_name = True


class BlogPostResponse(BaseModel):
    id: str
    title: str
    slug: str
    excerpt: Optional[str] = None
    content: str
    author: Optional[str] = None
    published_at: Optional[datetime] = None
    category: Optional[str] = None
    featured_image: Optional[str] = None
    related_feature_link: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GenerateBlogResponse(BaseModel):
    success: bool = True
    post: BlogPostResponse


# --- Usage ---

class UsageResponse(BaseModel):
    tier: str
    tier_name: str
    limit: int
    used: int
    remaining: int
    resets_at: str


# --- Job Tracker ---

class JobStatus(str, Enum):
    NEW_LEADS = "new-leads"
    REVIEWING = "reviewing"
    APPLIED = "applied"
    INTERVIEWING = "interviewing"
    OFFER = "offer"
    REJECTED = "rejected"
    ARCHIVED = "archived"


class TrackedJobBase(BaseModel):
    title: str = Field("Untitled Position", min_length=1, max_length=300)
    company: str = Field("Unknown Company", min_length=1, max_length=200)
    location: Optional[str] = Field("Not specified", max_length=200)
    salary: Optional[str] = Field(None, max_length=100)
    match_score: int = Field(0, ge=0, le=100)
    posted_date: Optional[date] = None
    source: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=5000)
    url: Optional[str] = Field(None, max_length=1000)
    why_match: Optional[str] = Field(None, max_length=5000)
    description: Optional[str] = Field(None, max_length=20000)


class TrackedJobCreate(TrackedJobBase):
    status: JobStatus = JobStatus.NEW_LEADS
    added_from: str = Field("manual", max_length=100)


class TrackedJobUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    company: Optional[str] = Field(None, min_length=1, max_length=200)
    location: Optional[str] = Field(None, max_length=200)
    salary: Optional[str] = Field(None, max_length=100)
    match_score: Optional[int] = Field(None, ge=0, le=100)
    status: Optional[JobStatus] = None
    notes: Optional[str] = Field(None, max_length=5000)
    application_date: Optional[date] = None
    interview_date: Optional[date] = None
    contacts: Optional[str] = Field(None, max_length=5000)
    url: Optional[str] = Field(None, max_length=1000)


class TrackedJobResponse(TrackedJobBase):
    id: int
    status: JobStatus
    application_date: Optional[date] = None
    interview_date: Optional[date] = None
    contacts: Optional[str] = None
    added_from: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JobAnalytics(BaseModel):
    total: int
    by_status: Dict[str, int]
    by_source: Dict[str, int]
    average_match_score: int
    total_applied: int
    total_interviews: int
    total_offers: int


# --- System ---

class AIStatusResponse(BaseModel):
    configured: bool
    available: bool
    model: str
    models: List[str] = []


class PromptListResponse(BaseModel):
    prompts: Dict[str, Any]
    available_names: List[str]
