import os
from typing import Optional

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "TicketD"
    VERSION: str = "0.1.0"

    # Server
    PORT: int = Field(default=8080, ge=1, le=65535)
    REQUEST_TIMEOUT_SECONDS: float = 30.0
    DEBUG: bool = False

    # Database
    DB_PATH: str = "ticketd.db"
    DATABASE_URL: Optional[str] = None

    # Admin auth
    ADMIN_USER: str = ""
    ADMIN_PASS: str = ""  # not trimmed, whitespace may be intentional
    DISABLE_AUTH: bool = False

    # Embed
    PUBLIC_BASE_URL: str = ""
    CUSTOM_CSS: str = ""

    @field_validator("ADMIN_USER", "PUBLIC_BASE_URL", "CUSTOM_CSS", "DB_PATH", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @computed_field
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"sqlite+aiosqlite:///{self.DB_PATH}"

    def check(self) -> None:
        """Validate settings that only matter when actually serving."""
        if not self.DISABLE_AUTH:
            if not self.ADMIN_USER:
                raise ValueError(
                    "TICKETD_ADMIN_USER is required (or set TICKETD_DISABLE_AUTH=true to use external authentication)"
                )
            if not self.ADMIN_PASS:
                raise ValueError(
                    "TICKETD_ADMIN_PASS is required (or set TICKETD_DISABLE_AUTH=true to use external authentication)"
                )
        if not self.DATABASE_URL and not self.DB_PATH:
            raise ValueError("TICKETD_DB_PATH cannot be empty")
        if self.CUSTOM_CSS and not os.path.isfile(self.CUSTOM_CSS):
            raise ValueError(f"TICKETD_CUSTOM_CSS file {self.CUSTOM_CSS!r} not found or not accessible")

    def describe(self) -> str:
        auth = "disabled (using external auth)" if self.DISABLE_AUTH else "enabled"
        database = "DATABASE_URL" if self.DATABASE_URL else self.DB_PATH
        return (
            f"Config{{Port: {self.PORT}, DB: {database}, Auth: {auth}, "
            f"PublicBaseURL: {self.PUBLIC_BASE_URL}, CustomCSSPath: {self.CUSTOM_CSS}}}"
        )

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_prefix="TICKETD_",
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
