"""
Career Clarified - Application configuration.

Centralized configuration using Pydantic Settings for environment variable management.

Environment Variables:
    All settings can be overridden via environment variables with CLARIFIED_ prefix.

    AI Settings:
        CLARIFIED_OPENAI_API_KEY=...            - API key for the completions provider
        CLARIFIED_OPENAI_BASE_URL=...           - OpenAI-compatible base URL
        CLARIFIED_DEFAULT_MODEL=gpt-4o-mini     - Model used when a request names none

    Supabase Settings:
        CLARIFIED_SUPABASE_URL=...              - Project URL (https://<ref>.supabase.co)
        CLARIFIED_SUPABASE_ANON_KEY=...         - Public key used by the auth proxy
        CLARIFIED_SUPABASE_SERVICE_ROLE_KEY=... - Server key used for Storage uploads
        CLARIFIED_SUPABASE_JWT_SECRET=...       - Needed only with CLARIFIED_ENFORCE_JWT=true
"""
from pydantic_settings import BaseSettings
from typing import Optional


class AISettings(BaseSettings):
    """
    Chat completions configuration.

    Any OpenAI-compatible endpoint works (OpenAI, Groq, Azure proxies).
    Models used by default:
        - gpt-4o-mini: generation, enhancement, blog drafts
        - gpt-4o: resume parsing (structured extraction)
    """
    openai_api_key: Optional[str] = None
    openai_base_url: str = "https://api.openai.com/v1"
    default_model: str = "gpt-4o-mini"
    resume_parse_model: str = "gpt-4o"
    ai_temperature: float = 0.7
    ai_timeout: float = 120.0

    class Config:
        env_prefix = "CLARIFIED_"
        env_file = ".env"
        extra = "ignore"


class SupabaseSettings(BaseSettings):
    """
    Hosted auth and storage configuration.

    The database itself is reached through `database_url` (the project's
    Postgres connection string); these keys cover the REST services.
    """
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    supabase_service_role_key: Optional[str] = None
    supabase_jwt_secret: Optional[str] = None
    resume_bucket: str = "resumes"

    # Blog admin: when set, only this user (or profiles.is_admin) may generate posts
    admin_user_id: Optional[str] = None

    # Require a bearer token whose subject matches the request's userId
    enforce_jwt: bool = False
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "authenticated"

    class Config:
        env_prefix = "CLARIFIED_"
        env_file = ".env"
        extra = "ignore"


class Settings(BaseSettings):
    """Combined application settings."""
    ai: AISettings = AISettings()
    supabase: SupabaseSettings = SupabaseSettings()

    # CORS allowed origin sent on every response
    allowed_origins: str = "*"

    # Database (Supabase Postgres in production)
    database_url: str = "sqlite:///./data/clarified.db"

    # Database connection pool (PostgreSQL only)
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 1800

    # Per-IP request limiting (slowapi)
    rate_limit_enabled: bool = True

    # Create/migrate tables on startup (local and self-hosted databases)
    manage_schema: bool = False

    class Config:
        env_prefix = "CLARIFIED_"
        env_file = ".env"
        extra = "ignore"


# Global settings instance
settings = Settings()
