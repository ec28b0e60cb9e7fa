from pathlib import Path

from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Union


PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """
    Application settings
    Loaded from environment variables and the .env file
    """
    # Database
    DATABASE_URL: str = "sqlite:///./rps.db"

    # API
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "RPS Calibration & Service Records"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # CORS (comma separated string or list)
    BACKEND_CORS_ORIGINS: Union[str, List[str]] = "http://localhost:3000,http://localhost:5173"

    # Document numbering: RPS/CER/25-26/0001
    DOCUMENT_CODE_COMPANY: str = "RPS"
    SEQUENCE_MAX_RETRIES: int = 5

    # PDF assets
    ASSETS_DIR: str = str(PACKAGE_DIR / "assets")
    LOGO_IMAGE: str = "rps.png"
    FOOTER_IMAGE: str = "handf.png"

    # Email (SMTP over SSL)
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 465
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    EMAIL_FROM: str = ""
    NOTIFICATION_EMAIL: str = ""  # Operational mailbox that receives service reports

    @field_validator("BACKEND_CORS_ORIGINS", mode="after")
    @classmethod
    def parse_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse CORS origins from string or list"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @property
    def logo_path(self) -> Path:
        return Path(self.ASSETS_DIR) / self.LOGO_IMAGE

    @property
    def footer_path(self) -> Path:
        return Path(self.ASSETS_DIR) / self.FOOTER_IMAGE

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
