"""Application settings and configuration"""

import os
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from eintsofia.infrastructure.constants.llm_constants import (
    GEMINI_ANALYSIS_MODEL,
    GEMINI_DERIVED_MODEL,
    GEMINI_CHAT_MODEL,
    GEMINI_TRANSCRIPTION_MODEL,
    GEMINI_TEMPERATURE,
    ENV_GEMINI_API_KEY,
    ENV_GEMINI_API_KEY_PUBLIC,
    ENV_GEMINI_ANALYSIS_MODEL,
    ENV_GEMINI_DERIVED_MODEL,
    ENV_GEMINI_CHAT_MODEL,
    ENV_GEMINI_TRANSCRIPTION_MODEL,
    ENV_GEMINI_TEMPERATURE,
    FEEDBACK_CACHE_TTL_SECONDS,
)


class Settings:
    """Manages application settings and configuration"""

    def __init__(self, env_file: Optional[str] = ".env"):
        self.logger = logging.getLogger(__name__)

        # Values already present in the environment win over the .env file
        if env_file and os.path.exists(env_file):
            load_dotenv(env_file, override=False)

        # Gemini
        self.gemini_api_key = os.getenv(ENV_GEMINI_API_KEY) or os.getenv(
            ENV_GEMINI_API_KEY_PUBLIC
        )
        self.analysis_model = os.getenv(ENV_GEMINI_ANALYSIS_MODEL, GEMINI_ANALYSIS_MODEL)
        self.derived_model = os.getenv(ENV_GEMINI_DERIVED_MODEL, GEMINI_DERIVED_MODEL)
        self.chat_model = os.getenv(ENV_GEMINI_CHAT_MODEL, GEMINI_CHAT_MODEL)
        self.transcription_model = os.getenv(
            ENV_GEMINI_TRANSCRIPTION_MODEL, GEMINI_TRANSCRIPTION_MODEL
        )
        self.temperature = self._get_float(ENV_GEMINI_TEMPERATURE, GEMINI_TEMPERATURE)

        # Document store
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./eintsofia.db")

        # Local prompt overrides, one JSON file per persona
        self.prompt_override_dir = Path(
            os.getenv("PROMPT_OVERRIDE_DIR", str(Path.home() / ".eintsofia" / "prompts"))
        )
        # Shipped prompt wording: "en" (default) or "he"
        self.prompt_language = os.getenv("PROMPT_LANGUAGE", "en").lower()

        self.feedback_cache_ttl_seconds = self._get_int(
            "FEEDBACK_CACHE_TTL_SECONDS", FEEDBACK_CACHE_TTL_SECONDS
        )
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        self.cors_origins = self._get_list(
            "CORS_ORIGINS", ["http://localhost:3000", "http://localhost:3001"]
        )

        # Set default log level for httpx and httpcore to reduce debug noise
        logging.getLogger("httpx").setLevel(logging.INFO)
        logging.getLogger("httpcore").setLevel(logging.INFO)

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Get integer value from environment"""
        value = os.getenv(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    @staticmethod
    def _get_float(key: str, default: float) -> float:
        """Get float value from environment"""
        value = os.getenv(key)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            return default

    @staticmethod
    def _get_list(key: str, default: List[str]) -> List[str]:
        """Get list value from environment (JSON array or comma separated)"""
        value = os.getenv(key)
        if value is None:
            return default
        try:
            parsed = json.loads(value)
            if isinstance(parsed, list):
                return [str(v) for v in parsed]
        except json.JSONDecodeError:
            pass
        return [v.strip() for v in value.split(",") if v.strip()]

    def get_model_config(self) -> Dict[str, Any]:
        """Get model names per call type"""
        return {
            "analysis": self.analysis_model,
            "derived": self.derived_model,
            "chat": self.chat_model,
            "transcription": self.transcription_model,
        }

    def validate_llm_config(self) -> bool:
        """Validate LLM configuration"""
        if not self.gemini_api_key:
            raise ValueError("Gemini API key is required")
        if not (0 <= self.temperature <= 2):
            raise ValueError("Gemini temperature must be between 0 and 2")
        self.logger.info("Validated configuration for gemini")
        return True


# Global instance
settings = Settings()
