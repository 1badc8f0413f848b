import email.message
import json
from types import SimpleNamespace

import pytest
import requests
import requests.adapters

from app.exceptions import (
    ConfigurationError,
    InvalidRequestError,
    QuotaExhaustedError,
    RateLimitedError,
    UpstreamError,
)
from app.services.translator_service import (
    AITranslatorService,
    classify_upstream_error,
    extract_result_text,
)
from tests.fakes import FakeResponse, completion


def test_study_plan_request_end_to_end(make_service):
    service, session = make_service(completion("Plan: ..."))

    result = service.generate({"type": "study-plan", "topic": "Thermodynamics"})

    assert result == "Plan: ..."
    assert len(session.calls) == 1
    call = session.calls[0]
    assert call["url"] == "https://upstream.test/v1/chat/completions"
    assert call["headers"]["Authorization"] == "Bearer test-key"
    body = call["json"]
    assert body["model"] == "test-model"
    assert body["temperature"] == 0.7
    assert body["max_tokens"] == 2048
    assert len(body["messages"]) == 1
    assert body["messages"][0]["role"] == "user"
    assert body["messages"][0]["content"].startswith(
        "Create a comprehensive study plan for learning: Thermodynamics"
    )


def test_missing_api_key_makes_no_call(make_service):
    service, session = make_service(completion("unused"), api_key="")

    with pytest.raises(ConfigurationError) as exc_info:
        service.generate({"type": "summarize", "notes": "n"})

    assert exc_info.value.message == "GOOGLE_AI_API_KEY is not configured"
    assert session.calls == []
    assert not service.is_configured


def test_invalid_type_makes_no_call(make_service):
    service, session = make_service(completion("unused"))

    with pytest.raises(InvalidRequestError, match="Invalid request type"):
        service.generate({"type": "essay", "notes": "n"})
    assert session.calls == []


def test_chat_history_roles_are_mapped(make_service):
    service, session = make_service(completion("Sure."), model_role="model")
    history = [
        {"role": "user", "content": "What is entropy?"},
        {"role": "assistant", "content": "A measure of disorder."},
        {"role": "user", "content": "Give an example."},
    ]

    assert service.generate({"type": "chat", "messages": history}) == "Sure."

    sent = session.calls[0]["json"]["messages"]
    assert sent == [
        {"role": "user", "content": "What is entropy?"},
        {"role": "model", "content": "A measure of disorder."},
        {"role": "user", "content": "Give an example."},
    ]


def test_rate_limited(make_service):
    service, session = make_service(FakeResponse(429, text="Too Many Requests"))

    with pytest.raises(RateLimitedError) as exc_info:
        service.generate({"type": "summarize", "notes": "n"})

    err = exc_info.value
    assert "try again" in err.message
    assert err.status == 429
    assert err.body == "Too Many Requests"
    assert len(session.calls) == 1


def test_quota_exhausted(make_service):
    service, _ = make_service(FakeResponse(402, text="Payment Required"))

    with pytest.raises(QuotaExhaustedError) as exc_info:
        service.generate({"type": "flashcards", "notes": "n"})
    assert exc_info.value.status == 402
    assert exc_info.value.kind == "QuotaExhausted"


@pytest.mark.parametrize("status", [400, 401, 404, 500, 503])
def test_other_statuses_are_upstream_errors(make_service, status):
    service, session = make_service(FakeResponse(status, text="boom"))

    with pytest.raises(UpstreamError) as exc_info:
        service.generate({"type": "presentation", "notes": "n"})

    assert exc_info.value.message == f"AI API error: {status} - boom"
    assert exc_info.value.status == status
    assert len(session.calls) == 1


def test_network_failure_is_upstream_error(make_service):
    service, _ = make_service(requests.ConnectionError("connection refused"))

    with pytest.raises(UpstreamError) as exc_info:
        service.generate({"type": "summarize", "notes": "n"})
    assert exc_info.value.status is None


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(200, {"id": "x"}),
        FakeResponse(200, {"choices": []}),
        FakeResponse(200, {"choices": [{"message": {}}]}),
        FakeResponse(200, {"choices": [{"message": {"content": None}}]}),
        FakeResponse(200, {"choices": [{"message": {"content": ""}}]}),
        FakeResponse(200, text="<html>not json</html>"),
    ],
)
def test_missing_completion_falls_back(make_service, response):
    service, _ = make_service(response)
    assert service.generate({"type": "summarize", "notes": "n"}) == "No response generated"


def test_structured_result_is_returned_verbatim(make_service):
    raw = '```json\n[\n  {"front": "Q", "back": "A"}\n]\n```'
    service, _ = make_service(completion(raw))
    assert service.generate({"type": "flashcards", "notes": "n"}) == raw


def test_rate_limit_retry_when_enabled(make_service):
    service, session = make_service(
        FakeResponse(429, text="slow down"),
        completion("ok"),
        rate_limit_retries=3,
    )

    assert service.generate({"type": "summarize", "notes": "n"}) == "ok"
    assert len(session.calls) == 2


def test_retry_is_only_for_rate_limits(make_service):
    service, session = make_service(
        FakeResponse(500, text="down"),
        completion("never reached"),
        rate_limit_retries=3,
    )

    with pytest.raises(UpstreamError):
        service.generate({"type": "summarize", "notes": "n"})
    assert len(session.calls) == 1


def test_classify_upstream_error_kinds():
    assert isinstance(classify_upstream_error(429, ""), RateLimitedError)
    assert isinstance(classify_upstream_error(402, ""), QuotaExhaustedError)
    assert type(classify_upstream_error(418, "")) is UpstreamError


def test_extract_result_text_handles_non_dict():
    assert extract_result_text(None) == "No response generated"
    assert extract_result_text(["x"]) == "No response generated"


def _cookie_setting_send(seen_cookies):
    """HTTPAdapter.send replacement: records the Cookie header and sets a cookie on every answer."""
    def send(adapter, request, **kwargs):
        seen_cookies.append(request.headers.get("Cookie"))
        response = requests.Response()
        response.status_code = 200
        response.headers["Content-Type"] = "application/json"
        response._content = json.dumps(
            {"choices": [{"message": {"content": "ok"}}]}
        ).encode("utf-8")
        set_cookie = email.message.Message()
        set_cookie["Set-Cookie"] = "upstream_session=user-A-state; Path=/"
        response.raw = SimpleNamespace(_original_response=SimpleNamespace(msg=set_cookie))
        response.url = request.url
        response.request = request
        return response
    return send


def test_upstream_cookies_do_not_carry_over_between_requests(monkeypatch):
    seen_cookies = []
    monkeypatch.setattr(requests.adapters.HTTPAdapter, "send", _cookie_setting_send(seen_cookies))
    service = AITranslatorService(
        api_key="test-key",
        api_url="https://upstream.test/v1/chat/completions",
        rate_limit_retries=1,
    )

    assert service.generate({"type": "summarize", "notes": "first user"}) == "ok"
    assert service.generate({"type": "summarize", "notes": "second user"}) == "ok"

    assert seen_cookies == [None, None]
    assert service.session is None
