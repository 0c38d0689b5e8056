"""Classification of provider failures into display messages."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from google.api_core import exceptions as google_exceptions

logger = logging.getLogger(__name__)

QUOTA_STATUS = "RESOURCE_EXHAUSTED"
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


@dataclass(frozen=True)
class ClassifiedError:
    """Display message for a failure and whether it means quota exhaustion."""

    message: str
    is_quota_error: bool = False


def _raw_message(failure: Any) -> Optional[str]:
    if isinstance(failure, str):
        return failure
    if isinstance(failure, BaseException):
        return str(failure)
    message = getattr(failure, "message", None)
    return message if isinstance(message, str) else None


def _parse_payload(text: str) -> Optional[dict]:
    """Best-effort extraction of a JSON object embedded in ``text``."""
    candidates = [text]
    start, end = text.find("{"), text.rfind("}")
    if 0 < start < end:
        candidates.append(text[start:end + 1])

    for candidate in candidates:
        try:
            payload = json.loads(candidate)
        except (ValueError, RecursionError):
            continue
        if isinstance(payload, dict):
            return payload
    return None


def classify_error(failure: Any) -> ClassifiedError:
    """Turn any failure raised by the provider into a ClassifiedError.

    Vertex AI reports errors as JSON bodies like
    ``{"error": {"code": 429, "message": "...", "status": "RESOURCE_EXHAUSTED"}}``;
    when such a payload can be found in the failure text its nested message is
    used and its status decides whether the quota is exhausted. Anything else
    falls back to the raw text. Never raises.
    """
    is_quota = isinstance(failure, google_exceptions.ResourceExhausted)
    raw: Optional[str] = None

    try:
        raw = _raw_message(failure)
        if not raw:
            return ClassifiedError(UNKNOWN_ERROR_MESSAGE, is_quota)

        payload = _parse_payload(raw)
        error = payload.get("error") if payload else None
        if isinstance(error, dict) and error.get("message"):
            if error.get("status") == QUOTA_STATUS:
                is_quota = True
            return ClassifiedError(f"Failed: {error['message']}", is_quota)
    except Exception:
        # Includes RecursionError from json on deeply nested text
        logger.debug("Could not classify failure; using raw text", exc_info=True)

    return ClassifiedError(raw or UNKNOWN_ERROR_MESSAGE, is_quota)
