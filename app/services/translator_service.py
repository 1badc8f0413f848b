"""
AI TRANSLATOR SERVICE MODULE
============================

Turns one AI tool request (summarize, quiz, flashcards, presentation, chat,
study-plan) into exactly one upstream chat-completion call, and the upstream
reply into one result string.

FLOW:
  1. Refuse to do anything if no API key is configured (ConfigurationError).
  2. parse_ai_request(payload): pick the request model from "type" and validate it.
  3. request.to_messages(): prompt template as one user message, or the chat history as-is.
  4. POST {model, messages, temperature, max_tokens} with "Authorization: Bearer <key>".
  5. Non-2xx: 429 -> RateLimitedError, 402 -> QuotaExhaustedError, else UpstreamError.
  6. 2xx: return choices[0].message.content, or "No response generated" if it is missing.

Nothing is kept between calls: no cache, no history, no cookies. The service holds
only its configuration, and every upstream call goes through requests.post, which
opens and closes its own session, so one instance is safely shared by all requests.
Structured results (quiz, flashcards, presentation) are returned verbatim;
parsing them is up to the caller.
"""

import logging
from typing import Any, Dict, Optional

import requests

from app.exceptions import (
    AIServiceError,
    ConfigurationError,
    QuotaExhaustedError,
    RateLimitedError,
    UpstreamError,
)
from app.models import AIRequest, parse_ai_request
from app.utils.retry import with_retry
from config import (
    AI_API_URL,
    AI_MAX_TOKENS,
    AI_MODEL,
    AI_MODEL_ROLE,
    AI_RATE_LIMIT_RETRIES,
    AI_REQUEST_TIMEOUT,
    AI_TEMPERATURE,
    FALLBACK_RESPONSE_TEXT,
    GOOGLE_AI_API_KEY,
)

logger = logging.getLogger("StudyPortal.AI")


def classify_upstream_error(status: int, body: str) -> AIServiceError:
    """Map a non-2xx upstream answer to the matching error, keeping status and body."""
    if status == 429:
        return RateLimitedError(
            "Rate limit exceeded. Please wait a moment and try again.",
            status=status,
            body=body,
        )
    if status == 402:
        return QuotaExhaustedError(
            "AI usage quota exhausted. Please add credits to continue.",
            status=status,
            body=body,
        )
    return UpstreamError(f"AI API error: {status} - {body}", status=status, body=body)


def extract_result_text(data: Any) -> str:
    """
    Return the first completion's message content. A reply without one is not an
    error: we return FALLBACK_RESPONSE_TEXT so the caller always gets a result.
    """
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        content = None

    if not isinstance(content, str) or not content:
        logger.warning("AI API response had no completion text; returning fallback")
        return FALLBACK_RESPONSE_TEXT
    return content


# ==============================================================================
# TRANSLATOR SERVICE CLASS
# ==============================================================================

class AITranslatorService:
    """
    Stateless translator between portal requests and the upstream chat-completion API.
    Every argument defaults to the value in config.py.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        model: Optional[str] = None,
        model_role: Optional[str] = None,
        timeout: Optional[int] = None,
        rate_limit_retries: Optional[int] = None,
        retry_delay: float = 1.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = GOOGLE_AI_API_KEY if api_key is None else api_key
        self.api_url = api_url or AI_API_URL
        self.model = model or AI_MODEL
        self.model_role = model_role or AI_MODEL_ROLE
        self.timeout = AI_REQUEST_TIMEOUT if timeout is None else timeout
        self.rate_limit_retries = AI_RATE_LIMIT_RETRIES if rate_limit_retries is None else rate_limit_retries
        self.retry_delay = retry_delay
        # Tests pass a fake here; by default each call is a standalone requests.post.
        self.session = session

        if not self.api_key:
            logger.warning("GOOGLE_AI_API_KEY not set. AI requests will fail until it is configured.")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def build_payload(self, request: AIRequest) -> Dict[str, Any]:
        """Upstream request body for one parsed request."""
        return {
            "model": self.model,
            "messages": [msg.to_payload(self.model_role) for msg in request.to_messages()],
            "temperature": AI_TEMPERATURE,
            "max_tokens": AI_MAX_TOKENS,
        }

    def generate(self, payload: Dict[str, Any]) -> str:
        """
        Handle one inbound JSON body end to end and return the result text.
        Raises an AIServiceError subclass on any failure.
        """
        if not self.api_key:
            raise ConfigurationError()

        request = parse_ai_request(payload)
        body = self.build_payload(request)

        logger.info("Calling AI API with request type: %s", request.type)
        data = with_retry(
            lambda: self._post(body),
            max_retries=self.rate_limit_retries,
            initial_delay=self.retry_delay,
            retry_on=(RateLimitedError,),
        )
        logger.info("AI API response received for request type: %s", request.type)
        return extract_result_text(data)

    def _post(self, body: Dict[str, Any]) -> Any:
        """One upstream call. Returns the decoded JSON, or None if the body was not JSON."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            post = self.session.post if self.session is not None else requests.post
            response = post(self.api_url, headers=headers, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("AI API request failed: %s", e.__class__.__name__)
            raise UpstreamError(f"AI API request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.error("AI API error: status %s", response.status_code)
            raise classify_upstream_error(response.status_code, response.text)

        try:
            return response.json()
        except ValueError:
            logger.warning("AI API returned a non-JSON body (status %s)", response.status_code)
            return None
