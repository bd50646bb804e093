from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    # Database
    # For SQLite (default, no extra driver needed)
    DATABASE_URL: str = "sqlite:///./expense_tracker.db"

    # For PostgreSQL (requires psycopg2-binary)
    # DATABASE_URL: str = "postgresql://postgres:postgres@db:5432/expense_tracker"

    # JWT Settings
    SECRET_KEY: str = Field(
        "your-secret-key-change-this-in-production",
        validation_alias=AliasChoices("SECRET_KEY", "JWT_KEY"),
    )
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 10

    # Security
    BCRYPT_ROUNDS: int = 10

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 5252
    LOG_LEVEL: str = "INFO"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("DATABASE_URL")
    @classmethod
    def fix_postgres_scheme(cls, value: str) -> str:
        # Some hosts still hand out postgres://
        if value.startswith("postgres://"):
            return value.replace("postgres://", "postgresql://", 1)
        return value


settings = Settings()
