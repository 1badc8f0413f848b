"""
Shared fixtures: a translator service wired to a fake requests session,
so no test touches the network.
"""
import pytest

from app.services.translator_service import AITranslatorService
from tests.fakes import FakeSession


@pytest.fixture
def make_service():
    def _make(*replies, **kwargs):
        session = FakeSession(*replies)
        kwargs.setdefault("api_key", "test-key")
        kwargs.setdefault("api_url", "https://upstream.test/v1/chat/completions")
        kwargs.setdefault("model", "test-model")
        kwargs.setdefault("model_role", "assistant")
        kwargs.setdefault("rate_limit_retries", 1)
        kwargs.setdefault("retry_delay", 0)
        return AITranslatorService(session=session, **kwargs), session
    return _make
