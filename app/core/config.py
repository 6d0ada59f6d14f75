"""
Application settings.
Database credentials come from the environment, or from AWS Secrets Manager
at startup when none are provided.
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # AWS
    AWS_REGION: str = "eu-central-1"

    # Database. DATABASE_URL wins over the DB_* parts.
    DATABASE_URL: Optional[str] = None
    DB_HOST: Optional[str] = None
    DB_PORT: int = 5432
    DB_NAME: Optional[str] = None
    DB_USER: Optional[str] = None
    DB_PASS: Optional[str] = None

    # Redis
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    PROFILE_CACHE_TTL: int = 1200  # 20 minutes

    # S3 (avatars). When unset, avatar URLs are omitted.
    S3_BUCKET_NAME: Optional[str] = None
    S3_REGION: Optional[str] = None  # defaults to AWS_REGION
    S3_PRESIGN_EXPIRY: int = 3600

    # Email (Amazon SES, sent by the Celery worker)
    EMAIL_ENABLED: bool = False
    EMAIL_FROM: Optional[str] = None
    SES_REGION: Optional[str] = None  # defaults to AWS_REGION
    CELERY_BROKER_URL: str = "redis://localhost:6379/1"

    # Optional
    DEBUG: bool = False
    PROJECT_NAME: str = "GetScience Backend"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    @property
    def use_s3(self) -> bool:
        return bool(self.S3_BUCKET_NAME)

    @property
    def s3_region(self) -> str:
        return self.S3_REGION or self.AWS_REGION

    @property
    def ses_region(self) -> str:
        return self.SES_REGION or self.AWS_REGION

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASS}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()

# Load secrets from AWS Secrets Manager only when DB creds aren't already
# provided via environment variables (e.g. in Docker / local dev / tests).
if not settings.DATABASE_URL and not settings.DB_HOST:
    from app.aws.secrets import get_secret

    _db_secret = get_secret("getscience-backend/db", region_name=settings.AWS_REGION)
    settings.DB_HOST = _db_secret["host"]
    settings.DB_PORT = int(_db_secret.get("port", 5432))
    settings.DB_NAME = _db_secret["database"]
    settings.DB_USER = _db_secret["username"]
    settings.DB_PASS = _db_secret["password"]
