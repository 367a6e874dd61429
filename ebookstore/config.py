import os
from typing import List, Optional


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    if os.getenv("LOCAL") == "true":
        return "sqlite:///./test.db"

    host = os.getenv("POSTGRES_HOST", "postgres")
    port = os.getenv("POSTGRES_PORT", 5432)
    user = os.getenv("POSTGRES_USER", "postgres")
    password = os.getenv("POSTGRES_PASSWORD", "postgres")
    name = os.getenv("POSTGRES_DB", "ebookstore")
    return f"postgresql://{user}:{password}@{host}:{port}/{name}"


class Settings:
    """Runtime configuration, read from the environment once at startup."""

    def __init__(
        self,
        database_url: Optional[str] = None,
        jwt_secret: Optional[str] = None,
        jwt_expires_minutes: Optional[int] = None,
        allowed_origins: Optional[List[str]] = None,
        log_level: Optional[str] = None,
        admin_email: Optional[str] = None,
        admin_password: Optional[str] = None,
        admin_name: Optional[str] = None,
    ):
        self.database_url = database_url or _database_url()
        self.jwt_secret = jwt_secret or os.getenv("JWT_SECRET")
        if not self.jwt_secret:
            raise RuntimeError("JWT_SECRET must be set")
        self.jwt_algorithm = "HS256"
        self.jwt_expires_minutes = jwt_expires_minutes or int(os.getenv("JWT_EXPIRES_MINUTES", 60 * 24))
        if allowed_origins is None:
            allowed_origins = os.getenv("ALLOWED_ORIGINS", "*").split(",")
        self.allowed_origins = [origin.strip() for origin in allowed_origins if origin.strip()]
        self.log_level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
        self.admin_email = admin_email or os.getenv("ADMIN_EMAIL")
        self.admin_password = admin_password or os.getenv("ADMIN_PASSWORD")
        self.admin_name = admin_name or os.getenv("ADMIN_NAME", "Administrator")
