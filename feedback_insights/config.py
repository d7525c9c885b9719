"""Configuration settings for Feedback Insights."""

import os

# Model configuration
MODEL_CONFIG: dict[str, str | float | int] = {
    "classification_model": os.getenv("CLASSIFIER_MODEL", "gpt-4o-mini"),
    "temperature": 0.1,
    "max_tokens": 1000,
    "request_timeout": 30.0,  # seconds, per external call
}

# Requests per rolling window. Production keys sit on a constrained API tier.
RATE_LIMIT_CONFIG: dict[str, int] = {
    "production": 15,
    "development": 60,
    "window_seconds": 60,
}

# Batch classification
BATCH_CONFIG: dict[str, int] = {
    "default_batch_size": 10,
    "max_batch_size": 25,
    "inter_batch_delay_ms": 1000,
    "max_batch_chars": 8000,  # ~2000 tokens of feedback per prompt
    "max_item_chars": 2000,
}

# Values shipped in .env templates that mean "no key configured"
PLACEHOLDER_API_KEYS = {"", "your_openai_api_key_here", "sk-..."}

# Logging configuration
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVEL = "INFO"


def get_api_key() -> str | None:
    """Return the classification service credential, or None if unset."""
    api_key = os.getenv("OPENAI_API_KEY", "").strip()
    if api_key in PLACEHOLDER_API_KEYS:
        return None
    return api_key


def get_rate_limit(environment: str | None = None) -> int:
    """Resolve the per-minute request cap for the current environment.

    ``CLASSIFIER_RATE_LIMIT`` wins when set; otherwise ``APP_ENV=production``
    selects the conservative cap and anything else the development cap.
    """
    override = os.getenv("CLASSIFIER_RATE_LIMIT")
    if override:
        return int(override)

    environment = environment or os.getenv("APP_ENV", "development")
    if environment == "production":
        return RATE_LIMIT_CONFIG["production"]
    return RATE_LIMIT_CONFIG["development"]
