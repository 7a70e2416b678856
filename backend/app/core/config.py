from pydantic_settings import BaseSettings
from typing import List, Any
import json
from pathlib import Path


def parse_cors_origins(v: Any) -> List[str]:
    """Parse CORS origins from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        # Try JSON parsing first
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        # Fall back to comma-separated
        return [origin.strip() for origin in v.split(',') if origin.strip()]
    return []


def parse_int_options(v: Any) -> List[int]:
    """Parse an allow-list of integers from "5,10,25" or "[5, 10, 25]" """
    if isinstance(v, (list, tuple)):
        return [int(item) for item in v]
    if isinstance(v, str):
        if v.startswith('['):
            try:
                return [int(item) for item in json.loads(v)]
            except (json.JSONDecodeError, TypeError, ValueError):
                pass
        return [int(item.strip()) for item in v.split(',') if item.strip().isdigit()]
    return []


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "Panel Admin"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    SECRET_KEY: str
    API_VERSION: str = "v1"

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    # ==========================================
    # Database
    # ==========================================
    DATABASE_URL: str
    DB_ECHO: bool = False
    # Production pool (development and SQLite use NullPool)
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    # ==========================================
    # Authentication
    # ==========================================
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440  # 24 hours
    BCRYPT_ROUNDS: int = 12  # 4 for dev (fast), 12 for prod (secure)

    # ==========================================
    # CORS (stored as comma-separated string, parsed to list)
    # ==========================================
    CORS_ORIGINS_STR: str = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return parse_cors_origins(self.CORS_ORIGINS_STR)

    # ==========================================
    # Rate Limiting
    # ==========================================
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 60
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"
    SLOW_REQUEST_MS: int = 1000

    # Form posts only; no uploads go through the API
    MAX_REQUEST_BYTES: int = 1024 * 1024

    # ==========================================
    # Listing (allow-listed page sizes)
    # ==========================================
    DOMAIN_PER_PAGE_OPTIONS_STR: str = "5,10,25,50,100"
    STORAGE_PER_PAGE_OPTIONS_STR: str = "10,25,50,100"
    DEFAULT_PER_PAGE: int = 10
    AUDIT_LOG_PER_PAGE: int = 20

    @property
    def DOMAIN_PER_PAGE_OPTIONS(self) -> List[int]:
        return parse_int_options(self.DOMAIN_PER_PAGE_OPTIONS_STR)

    @property
    def STORAGE_PER_PAGE_OPTIONS(self) -> List[int]:
        return parse_int_options(self.STORAGE_PER_PAGE_OPTIONS_STR)

    # ==========================================
    # Backups
    # ==========================================
    # Archives live in BACKUP_ROOT/<APP_NAME>
    BACKUP_ROOT: str = "storage/app/private"
    # Command template, e.g. "backup-db --output {backup_dir}/{timestamp}.zip --db {database_url}"
    # Empty means the backup engine is not configured.
    BACKUP_COMMAND: str = ""
    BACKUP_TIMEOUT_SECONDS: int = 600

    @property
    def BACKUP_DIR(self) -> Path:
        return Path(self.BACKUP_ROOT) / self.APP_NAME

    # ==========================================
    # Dashboard
    # ==========================================
    SYSTEM_HEALTH_STATUS: str = "Online"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.LOG_FILE:
            Path(self.LOG_FILE).parent.mkdir(exist_ok=True, parents=True)

    @property
    def BASE_DIR(self) -> Path:
        return Path(__file__).resolve().parent.parent.parent


# Create settings instance
settings = Settings()
