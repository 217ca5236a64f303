import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


DEFAULT_GEMINI_API_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.5-flash:generateContent"
)


class Settings(BaseModel):
    """Runtime configuration handed to the quiz agent and the HTTP app."""

    gemini_api_key: Optional[str] = Field(None, description="API key for the Gemini endpoint")
    gemini_api_url: str = Field(DEFAULT_GEMINI_API_URL, description="Full generateContent URL")
    gemini_timeout_seconds: float = Field(30.0, gt=0, description="Outbound call timeout")
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_file: str = "logs/app.log"
    log_level: str = "INFO"

    @property
    def api_key_configured(self) -> bool:
        return bool(self.gemini_api_key)

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv(override=True)

        origins = os.getenv("CORS_ALLOW_ORIGINS", "*")
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            gemini_api_url=os.getenv("GEMINI_API_URL", DEFAULT_GEMINI_API_URL),
            gemini_timeout_seconds=float(os.getenv("GEMINI_TIMEOUT_SECONDS", "30")),
            cors_allow_origins=[o.strip() for o in origins.split(",") if o.strip()] or ["*"],
            log_file=os.getenv("LOG_FILE", "logs/app.log"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
