"""
Environment configuration for the sheet report.

Values are read lazily so that main.py can load a .env file first.
"""

import os

DEFAULT_TITLE = "title"
DEFAULT_CHART_FILE = "chart.json"
SPREADSHEET_URL_PREFIX = "https://docs.google.com/spreadsheets/d/"

# Percentile highlight palette as #RRGGBB overrides; None keeps the built-in colors.
POSITIVE_COLOR_ENV = "HIGHLIGHT_POSITIVE_COLOR"
NEGATIVE_COLOR_ENV = "HIGHLIGHT_NEGATIVE_COLOR"
NEUTRAL_COLOR_ENV = "HIGHLIGHT_NEUTRAL_COLOR"


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name, default)
    if value is None:
        return None
    value = value.strip()
    return value or default


def get_google_credentials() -> str:
    """Service account JSON, defaulting to an empty object like the CLI flag."""
    return _get_env("GOOGLE_CREDENTIALS", "{}")


def get_log_level() -> str:
    return (_get_env("SHEET_REPORT_LOG_LEVEL", "INFO") or "INFO").upper()


def get_log_file() -> str | None:
    return _get_env("SHEET_REPORT_LOG_FILE")


def get_palette_overrides() -> dict[str, str | None]:
    """Return hex overrides for the positive/negative/neutral highlight colors."""
    return {
        "positive": _get_env(POSITIVE_COLOR_ENV),
        "negative": _get_env(NEGATIVE_COLOR_ENV),
        "neutral": _get_env(NEUTRAL_COLOR_ENV),
    }


def spreadsheet_url(spreadsheet_id: str) -> str:
    return f"{SPREADSHEET_URL_PREFIX}{spreadsheet_id}"
