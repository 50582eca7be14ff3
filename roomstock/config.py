from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from functools import lru_cache
from typing import List, Optional


class Settings(BaseSettings):
    # Environment
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # Database - PostgreSQL for production, SQLite for development
    database_url: str = Field(
        default="sqlite:///./roomstock.db",
        alias="DATABASE_URL"
    )

    # Availability
    # Remaining units at or below this count are reported as limited availability
    low_stock_threshold: int = Field(default=2, alias="LOW_STOCK_THRESHOLD")
    # Calendar day boundaries are taken in this zone when timestamps carry an offset
    property_timezone: str = Field(default="UTC", alias="PROPERTY_TIMEZONE")

    # Rate limiting (public availability endpoint)
    availability_rate_limit: str = Field(default="60/minute", alias="AVAILABILITY_RATE_LIMIT")
    trust_proxy: bool = Field(default=False, alias="TRUST_PROXY")
    redis_url: Optional[str] = Field(default=None, alias="REDIS_URL")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=True, alias="LOG_JSON")

    # CORS - Frontend URLs (comma-separated)
    allowed_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        alias="ALLOWED_ORIGINS"
    )

    @field_validator('low_stock_threshold')
    @classmethod
    def validate_low_stock_threshold(cls, v: int) -> int:
        if v < 0:
            raise ValueError("LOW_STOCK_THRESHOLD cannot be negative")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cors_origins(self) -> List[str]:
        """
        Parse allowed origins from comma-separated string.
        Returns a list suitable for CORSMiddleware.
        """
        origins = []
        for origin in self.allowed_origins.split(","):
            origin = origin.strip().rstrip("/")
            if origin and origin not in origins:
                origins.append(origin)
        return origins

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Initialize settings on module load
settings = get_settings()
