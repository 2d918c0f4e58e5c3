from __future__ import annotations

import os
from typing import List


class Settings:
    """Centralized configuration for the health-record backend."""

    def __init__(self) -> None:
        # The summarizer credential is optional; without it summaries degrade to placeholders.
        self.gemini_api_key: str | None = (
            os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY") or None
        )
        self.gemini_model: str = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")
        self.gemini_base_url: str = os.environ.get(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        )
        self.gemini_timeout: float = float(os.environ.get("GEMINI_TIMEOUT", "60"))
        self.gemini_temperature: float = float(os.environ.get("GEMINI_TEMPERATURE", "0.3"))

        self.notice_seconds: float = float(os.environ.get("CARESYNAPSE_NOTICE_SEC") or "3")
        self.import_notice_seconds: float = float(
            os.environ.get("CARESYNAPSE_IMPORT_NOTICE_SEC") or "5"
        )
        self.max_upload_mb: int = int(os.environ.get("CARESYNAPSE_MAX_UPLOAD_MB") or "10")
        self.log_level: str = (os.environ.get("CARESYNAPSE_LOG_LEVEL") or "INFO").upper()

        cors = os.environ.get("CARESYNAPSE_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
