from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List, Literal


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Only needed by scripts/seed_categories.py

    # AWS S3 (optional; post thumbnails go to Supabase Storage when unset)
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: str = "us-east-1"
    s3_bucket_name: Optional[str] = None

    # Storage
    post_images_bucket: str = "post-images"
    thumbnail_max_bytes: int = 5 * 1024 * 1024

    # Network timeouts (seconds)
    request_timeout_seconds: int = 15
    storage_timeout_seconds: int = 30
    session_verify_timeout_seconds: float = 10.0

    # Sessions
    session_idle_timeout_seconds: int = 60 * 60 * 12
    role_fetch_attempts: int = 3
    role_retry_base_delay_seconds: float = 0.5
    author_fetch_attempts: int = 3
    author_retry_base_delay_seconds: float = 1.0

    # Onboarding: "exact" -> exactly 2 categories, "at_least_one" -> 1 or more.
    # Earlier builds disagreed on this; keep it in one place.
    onboarding_completion_rule: Literal["exact", "at_least_one"] = "exact"

    # App
    app_name: str = "filo-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def s3_configured(self) -> bool:
        return all([self.aws_access_key_id, self.aws_secret_access_key, self.s3_bucket_name])

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
