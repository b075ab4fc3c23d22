import os
from typing import List, Optional
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Always load .env from root
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
load_dotenv(os.path.join(BASE_DIR, ".env"))


class Settings(BaseSettings):
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 1440  # 24 hours default
    JWT_REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    DATABASE_URL: Optional[str] = None
    DB_USER: Optional[str] = None
    DB_PASS: Optional[str] = None
    DB_HOST: Optional[str] = None
    DB_PORT: Optional[str] = "5432"
    DB_NAME: Optional[str] = "racktrack"

    # QuickBooks
    QUICKBOOKS_CLIENT_ID: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("QUICKBOOKS_CLIENT_ID", "QB_CLIENT_ID"))
    QUICKBOOKS_CLIENT_SECRET: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("QUICKBOOKS_CLIENT_SECRET", "QB_CLIENT_SECRET"))
    QUICKBOOKS_REDIRECT_URI: str = "http://localhost:3000/api/quickbooks/callback"
    QUICKBOOKS_ENVIRONMENT: str = "sandbox"
    QUICKBOOKS_TIMEOUT_SECONDS: int = 30

    CRON_SECRET: Optional[str] = None
    APP_BASE_URL: str = "http://localhost:3000"
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8080",
    ]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def is_sandbox(self) -> bool:
        return self.QUICKBOOKS_ENVIRONMENT.lower() != "production"


settings = Settings()

DATABASE_URL = settings.DATABASE_URL or (
    f"postgresql+psycopg2://{settings.DB_USER}:{settings.DB_PASS}@{settings.DB_HOST}:{settings.DB_PORT}/{settings.DB_NAME}?sslmode=require"
)
