from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # MongoDB Configuration
    MONGO_URI: str
    MONGO_DB_NAME: str = "mockinvi"

    # Razorpay Configuration (server-side only, never sent to the client)
    RAZORPAY_KEY_ID: Optional[str] = None
    RAZORPAY_KEY_SECRET: Optional[str] = None
    RAZORPAY_API_BASE: str = "https://api.razorpay.com/v1"
    RAZORPAY_TIMEOUT_SECONDS: float = 15.0

    # Billing Configuration
    DEFAULT_CURRENCY: str = "INR"
    PRO_PLAN_PRICE_INR: int = 999
    SUBSCRIPTION_PERIOD_MONTHS: int = 1

    # OpenRouter Configuration (Free OpenAI-compatible API)
    OPENROUTER_API_KEY: Optional[str] = None
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"

    # Model Configuration
    LLM_MODEL: str = "openai/gpt-oss-20b:free"
    LLM_TEMPERATURE: float = 0.7
    LLM_EVALUATION_TEMPERATURE: float = 0.3

    # Admin Console
    ADMIN_USERNAME: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None
    ADMIN_TOKEN_SECRET: Optional[str] = None
    ADMIN_TOKEN_TTL_MINUTES: int = 60

    # API Configuration
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "MockInvi"

    # Frontend Configuration
    FRONTEND_URL: str = "https://mockinvi.vercel.app"  # Override with production URL in env

    # Testing Configuration
    TEST_MODE: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra env variables


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
