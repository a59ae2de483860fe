"""
Shared utilities for the sheet report tools.

Error types and the HTTP error decorator used by every Google API tool.
"""

import asyncio
import functools
import logging
import ssl
from typing import Callable

from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)


class UserInputError(Exception):
    """Raised for malformed input that no retry can fix (bad labels, empty tables, ...)."""


class GoogleApiError(Exception):
    """Raised when a Google API call fails after the tool's error handling."""


def _http_error_reason(error: HttpError) -> str:
    return str(getattr(error, "reason", None) or error)


def handle_http_errors(
    tool_name: str, is_read_only: bool = False, service_type: str = ""
) -> Callable:
    """
    Decorator translating Google API failures for an async tool.

    Args:
        tool_name: Name used in log lines and error messages.
        is_read_only: Read-only calls are retried on transient SSL errors.
        service_type: API family (sheets, drive, gmail) for messages.

    UserInputError propagates unchanged. HttpError is logged and re-raised
    as GoogleApiError.
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            max_retries = 3
            base_delay = 1
            for attempt in range(max_retries):
                try:
                    return await func(*args, **kwargs)
                except ssl.SSLError as e:
                    if is_read_only and attempt < max_retries - 1:
                        delay = base_delay * (2**attempt)
                        logger.warning(
                            f"SSL error in {tool_name} on attempt {attempt + 1}: {e}. "
                            f"Retrying in {delay} seconds..."
                        )
                        await asyncio.sleep(delay)
                        continue
                    logger.error(
                        f"SSL error in {tool_name} after {attempt + 1} attempts: {e}"
                    )
                    raise GoogleApiError(
                        f"Network error in {tool_name}: {e}"
                    ) from e
                except UserInputError:
                    raise
                except HttpError as error:
                    status = getattr(error.resp, "status", "unknown")
                    service_label = service_type or "Google"
                    message = (
                        f"{service_label.title()} API error in {tool_name} "
                        f"(HTTP {status}): {_http_error_reason(error)}"
                    )
                    logger.error(message, exc_info=True)
                    raise GoogleApiError(message) from error

        return wrapper

    return decorator
