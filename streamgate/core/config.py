"""
Application configuration, loaded from the environment (or .env).
See env.example for the variables a deployment has to provide.
"""
from decimal import Decimal

from pydantic import field_validator
from pydantic_settings import BaseSettings

WEAK_SECRETS = ("changeme", "secret", "password")


class Settings(BaseSettings):
    """
    database_url, redis_url and identity_jwt_secret have no defaults:
    the process refuses to start without them.
    """

    app_env: str = "local"
    # Comma-separated origins; empty falls back to the dev list in main.py
    cors_origins: str = ""
    # Shareable links are {public_base_url}/v/{token} and /dorama/{token}
    public_base_url: str = "https://linkproibido.com"

    # Storage
    database_url: str
    redis_url: str

    # Identity provider (bearer JWT, shared secret)
    identity_jwt_secret: str
    identity_jwt_algorithm: str = "HS256"
    identity_jwt_audience: str | None = None

    # Subscriptions
    subscription_price: Decimal = Decimal("20.00")
    subscription_period_days: int = 30
    idempotency_ttl: int = 300  # seconds a claim key blocks a repeat

    # Logging
    request_id_header: str = "X-Request-Id"
    log_file: str | None = None
    log_max_bytes: int = 10_000_000
    log_backup_count: int = 5

    @field_validator("public_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @field_validator("identity_jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if len(v) < 16:
            raise ValueError("identity_jwt_secret must be at least 16 characters")
        if v.lower() in WEAK_SECRETS:
            raise ValueError("identity_jwt_secret is too weak, please change it")
        return v

    @field_validator("subscription_period_days")
    @classmethod
    def validate_period(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("subscription_period_days must be positive")
        return v

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
