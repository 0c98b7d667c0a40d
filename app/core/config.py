from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: str = "development"

    # Database
    DATABASE_URL: str

    # JWT
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    JWT_EXPIRATION_MS: int = 86_400_000  # 24 hours
    JWT_REFRESH_EXPIRATION_MS: int = 604_800_000  # 7 days

    # Expired blacklist / reset token sweep
    TOKEN_CLEANUP_INTERVAL_MS: int = 3_600_000

    # Return the raw reset token from /password/forgot. Never enable in production.
    EXPOSE_RESET_TOKEN: bool = False

    # CORS
    FRONTEND_URL: str = "http://localhost:5173"

    def validate_required_secrets(self) -> list[str]:
        """Validate that critical secrets are set. Returns list of errors."""
        errors = []
        if not self.SECRET_KEY or len(self.SECRET_KEY) < 32:
            errors.append("SECRET_KEY must be set and at least 32 characters")
        if not self.DATABASE_URL:
            errors.append("DATABASE_URL must be set")
        if self.JWT_REFRESH_EXPIRATION_MS <= self.JWT_EXPIRATION_MS:
            errors.append("JWT_REFRESH_EXPIRATION_MS must be longer than JWT_EXPIRATION_MS")
        if self.ENVIRONMENT == "production" and self.EXPOSE_RESET_TOKEN:
            errors.append("EXPOSE_RESET_TOKEN must be disabled in production")
        return errors

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
