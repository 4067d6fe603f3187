"""
Configuration management with environment variables.

This module provides centralized configuration management
with validation and type safety.
"""

import os
from datetime import date
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

from ..checking.policy import MIN_CONSECUTIVE_MINUTES, MIN_SESSION_MINUTES


class SecureString:
    """
    Wrapper for API keys that prevents accidental exposure.

    Examples:
        >>> api_key = SecureString("up_xxxxxxxx")
        >>> str(api_key)  # Returns "********"
        >>> api_key.get_value()  # Returns actual value
    """

    def __init__(self, value: str):
        self._value = value

    def get_value(self) -> str:
        """
        Get the actual value (use with caution).

        Warning:
            Use only when building request headers and never log the result.
        """
        return self._value

    def __str__(self) -> str:
        return "********"

    def __repr__(self) -> str:
        return "SecureString(********)"

    def __eq__(self, other) -> bool:
        if isinstance(other, SecureString):
            return self._value == other._value
        return False


def _int_env(name: str, default: int) -> int:
    """Read an integer environment variable with a clear error."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw!r}")


class Config:
    """
    Application configuration manager.

    Loads configuration from environment variables (and a ``.env`` file)
    and provides validated access to configuration values.

    Attributes:
        upstage_api_key: Upstage Document Parse API key
        upstage_base_url: Upstage API base URL
        upstage_timeout: HTTP timeout for document parsing in seconds
        vertex_project_id: Google Cloud project for Claude on Vertex AI
        vertex_region: Vertex AI region
        anthropic_model: Claude model used to structure lesson logs
        lesson_year: Year assumed for lesson dates without a year
        min_session_minutes: Minimum single session length
        min_consecutive_minutes: Minimum back-to-back session length
        output_dir: Output directory for reports and logs
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Examples:
        >>> config = Config()
        >>> if config.validate():
        ...     print(f"Session minimum: {config.min_session_minutes} min")
    """

    @staticmethod
    def _validate_url(url: str, name: str) -> str:
        """
        Validate URL format and scheme.

        Raises:
            ValueError: If URL is invalid
        """
        parsed = urlparse(url)

        if not parsed.scheme:
            raise ValueError(f"{name} must include URL scheme (http/https)")

        if parsed.scheme not in ['http', 'https']:
            raise ValueError(f"{name} must use http or https scheme, got: {parsed.scheme}")

        if not parsed.netloc:
            raise ValueError(f"{name} must have a valid domain")

        return url.rstrip("/")

    def __init__(self):
        """Initialize configuration by loading environment variables."""
        load_dotenv()

        key = os.getenv("UPSTAGE_API_KEY")
        self._upstage_api_key = SecureString(key) if key else None

        url = os.getenv("UPSTAGE_BASE_URL", "https://api.upstage.ai/v1")
        self._upstage_base_url = self._validate_url(url, "UPSTAGE_BASE_URL")
        self._upstage_timeout = _int_env("UPSTAGE_TIMEOUT", 120)

        # Claude on Vertex AI for structuring OCR text
        self._vertex_project_id = os.getenv("ANTHROPIC_VERTEX_PROJECT_ID")
        self._vertex_region = os.getenv("CLOUD_ML_REGION", "global")
        self._anthropic_model = os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-5@20250929")
        self._lesson_year = _int_env("LESSON_YEAR", date.today().year)

        # Policy thresholds
        self._min_session_minutes = _int_env("MIN_SESSION_MINUTES", MIN_SESSION_MINUTES)
        self._min_consecutive_minutes = _int_env(
            "MIN_CONSECUTIVE_MINUTES", MIN_CONSECUTIVE_MINUTES
        )

        # Output settings
        self._output_dir = Path(os.getenv("OUTPUT_DIR", "output"))
        self._log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def upstage_api_key(self) -> Optional[SecureString]:
        """
        Get the Upstage API key (wrapped in SecureString).

        Returns:
            SecureString wrapper, or None if not set
        """
        return self._upstage_api_key

    @property
    def upstage_base_url(self) -> str:
        return self._upstage_base_url

    @property
    def upstage_timeout(self) -> int:
        return self._upstage_timeout

    @property
    def vertex_project_id(self) -> Optional[str]:
        return self._vertex_project_id

    @property
    def vertex_region(self) -> str:
        return self._vertex_region

    @property
    def anthropic_model(self) -> str:
        return self._anthropic_model

    @property
    def lesson_year(self) -> int:
        return self._lesson_year

    @property
    def min_session_minutes(self) -> int:
        return self._min_session_minutes

    @property
    def min_consecutive_minutes(self) -> int:
        return self._min_consecutive_minutes

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    @property
    def log_level(self) -> str:
        return self._log_level

    def validate(self, require_document_parsing: bool = False) -> bool:
        """
        Validate configuration values.

        Args:
            require_document_parsing: Also require the OCR and LLM credentials

        Returns:
            True if all required configuration is valid

        Raises:
            ValueError: If validation fails
        """
        errors = []

        if require_document_parsing:
            if not self._upstage_api_key:
                errors.append("UPSTAGE_API_KEY is required to parse lesson logs")
            if not self._vertex_project_id:
                errors.append("ANTHROPIC_VERTEX_PROJECT_ID is required to parse lesson logs")

        if self._upstage_timeout <= 0:
            errors.append("UPSTAGE_TIMEOUT must be positive")

        if self._min_session_minutes <= 0:
            errors.append("MIN_SESSION_MINUTES must be positive")

        if self._min_consecutive_minutes <= 0:
            errors.append("MIN_CONSECUTIVE_MINUTES must be positive")

        if not (2000 <= self._lesson_year <= 2100):
            errors.append("LESSON_YEAR must be between 2000 and 2100")

        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self._log_level not in valid_levels:
            errors.append(
                f"LOG_LEVEL must be one of: {', '.join(valid_levels)}"
            )

        if errors:
            error_msg = "Configuration validation failed:\n  - " + "\n  - ".join(errors)
            raise ValueError(error_msg)

        return True

    def create_output_directories(self):
        """Create output directories if they don't exist."""
        for directory in (self.output_dir / "reports", self.output_dir / "logs"):
            directory.mkdir(parents=True, exist_ok=True)


# Singleton instance
config = Config()
