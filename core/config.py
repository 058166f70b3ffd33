from pydantic_settings import BaseSettings
from functools import lru_cache
from pathlib import Path


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Bloglist API"
    APP_VERSION: str = "1.0.0"
    APP_DESCRIPTION: str = """
    REST backend for sharing blog links.

    ## Features
    * User registration and token based login
    * Post creation, update and removal by their owners
    * Aggregate statistics over the stored posts
    """
    DOCS_URL: str = "/docs"
    REDOC_URL: str = "/redoc"
    OPENAPI_URL: str = "/openapi.json"
    OPENAPI_TAGS: list[dict] = [
        {
            "name": "login",
            "description": "Exchange username and password for a bearer token"
        },
        {
            "name": "users",
            "description": "User registration and public profiles"
        },
        {
            "name": "posts",
            "description": "Post creation, retrieval, update, removal and statistics"
        },
    ]

    # CORS
    CORS_ALLOWED_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost"]

    # Database
    DATABASE_URL: str = "sqlite:///./bloglist.db"
    DB_ECHO: bool = False

    # JWT
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Validation
    USERNAME_MIN_LENGTH: int = 3
    PASSWORD_MIN_LENGTH: int = 3
    # bcrypt only looks at the first 72 bytes
    PASSWORD_MAX_BYTES: int = 72

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # console | json

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    # Get the current file's directory
    current_dir = Path(__file__).resolve().parent
    # Go up one level to the project root
    root_dir = current_dir.parent

    # Initialize settings with explicit .env path
    return Settings(_env_file=root_dir / ".env")
