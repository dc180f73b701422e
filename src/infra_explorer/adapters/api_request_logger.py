"""Utility for logging outgoing API requests."""

import json
import logging

logger = logging.getLogger(__name__)


def _redact_sensitive_headers(headers: dict[str, str]) -> dict[str, str]:
    """Redact sensitive headers from logging."""
    sensitive_keys = {"authorization", "cookie", "x-api-key"}
    return {k: "***REDACTED***" if k.lower() in sensitive_keys else v for k, v in headers.items()}


def log_api_request(method: str, url: str, headers: dict[str, str] | None = None) -> None:
    """Log API request details at INFO level.

    Args:
        method: HTTP method (GET, POST, etc.).
        url: Request URL.
        headers: Request headers (optional, sensitive headers are redacted).
    """
    log_parts = [f"{method} {url}"]

    if headers:
        safe_headers = _redact_sensitive_headers(headers)
        log_parts.append(f"Headers: {json.dumps(safe_headers, sort_keys=True)}")

    logger.info("API Request: " + " | ".join(log_parts))
