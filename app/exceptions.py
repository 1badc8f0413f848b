"""
EXCEPTIONS MODULE
=================

Errors raised by the translator service. Every one of them is terminal for the
request: app.main catches AIServiceError and answers {"error": message} with
status 500, whatever the kind. The kind is kept on the exception for logging.

  ConfigurationError  - No API key configured; no upstream call was made.
  InvalidRequestError - Unknown request type or missing/empty fields.
  RateLimitedError    - Upstream answered 429.
  QuotaExhaustedError - Upstream answered 402.
  UpstreamError       - Any other upstream failure (non-2xx or network error).
"""

from typing import Optional


class AIServiceError(Exception):
    """Base exception for the AI translator service."""
    kind = "AIServiceError"
    default_message = "An unknown error occurred"

    def __init__(self, message: Optional[str] = None, status: Optional[int] = None, body: Optional[str] = None):
        self.message = message or self.default_message
        self.status = status   # Upstream HTTP status, when there was one.
        self.body = body       # Raw upstream body text, for diagnostics only.
        super().__init__(self.message)


class ConfigurationError(AIServiceError):
    kind = "ConfigurationError"
    default_message = "GOOGLE_AI_API_KEY is not configured"


class InvalidRequestError(AIServiceError):
    kind = "ValidationError"
    default_message = "Invalid request type"


class RateLimitedError(AIServiceError):
    kind = "RateLimited"
    default_message = "Rate limit exceeded. Please wait a moment and try again."


class QuotaExhaustedError(AIServiceError):
    kind = "QuotaExhausted"
    default_message = "AI usage quota exhausted. Please add credits or try again later."


class UpstreamError(AIServiceError):
    kind = "UpstreamError"
    default_message = "AI API error"
