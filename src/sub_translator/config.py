"""Configuration and constants."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load environment variables once
load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if not value:
        return default
    return float(value)


@dataclass
class TranslatorConfig:
    """Configuration for subtitle translator."""

    # Language settings
    source_lang: str = "en"
    target_lang: str = "pt"

    # Retry settings
    max_attempts: int = 5
    retry_delay: float = 2.0

    # Throttle settings
    throttle_every: int = 10
    throttle_seconds: float = 30.0

    # Progress settings
    eta_min_samples: int = 10

    # Browser settings
    headless: bool = False
    page_timeout: float = 30.0
    settle_delay: float = 2.0

    # Batch settings
    abort_on_error: bool = False
    verify_resume: bool = False

    @classmethod
    def from_env(cls) -> "TranslatorConfig":
        """Create config from SUBTRANSLATOR_* environment variables."""
        return cls(
            source_lang=os.environ.get("SUBTRANSLATOR_SOURCE_LANG", "en"),
            target_lang=os.environ.get("SUBTRANSLATOR_TARGET_LANG", "pt"),
            throttle_seconds=_env_float("SUBTRANSLATOR_THROTTLE_SECONDS", 30.0),
            headless=_env_bool("SUBTRANSLATOR_HEADLESS"),
            abort_on_error=_env_bool("SUBTRANSLATOR_ABORT_ON_ERROR"),
            verify_resume=_env_bool("SUBTRANSLATOR_VERIFY_RESUME"),
        )

    @classmethod
    def from_args(cls, args) -> "TranslatorConfig":
        """Create config from environment, overlaid with argparse flags."""
        config = cls.from_env()

        if getattr(args, 'headless', None) is not None:
            config.headless = args.headless
        if getattr(args, 'abort_on_error', False):
            config.abort_on_error = True
        if getattr(args, 'verify_resume', False):
            config.verify_resume = True

        return config

    def validate(self) -> Optional[str]:
        """
        Validate configuration.

        Returns:
            Error message if invalid, None if valid
        """
        if not self.source_lang or not self.target_lang:
            return "Source and target languages are required"

        if self.source_lang == self.target_lang:
            return f"Source and target language are both '{self.source_lang}'"

        if self.max_attempts < 1:
            return f"Max attempts must be at least 1, got {self.max_attempts}"

        if self.throttle_every < 1:
            return f"Throttle interval must be at least 1, got {self.throttle_every}"

        if self.throttle_seconds < 0:
            return f"Throttle pause must not be negative, got {self.throttle_seconds}"

        return None


# Supported file extensions
SUPPORTED_EXTENSIONS = {".srt"}

# Larger files are rejected before parsing
MAX_SRT_BYTES = 50 * 1024 * 1024

# Line value recorded when every attempt failed
ERROR_SENTINEL = "ERROR"
