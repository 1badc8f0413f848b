import pytest

from app.utils.retry import with_retry


class Flaky:
    def __init__(self, failures, exc_type=ValueError):
        self.failures = failures
        self.exc_type = exc_type
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc_type(f"failure {self.calls}")
        return "done"


def test_returns_after_retries_with_backoff():
    fn = Flaky(2)
    delays = []

    assert with_retry(fn, max_retries=3, initial_delay=1.0, retry_on=(ValueError,), sleep=delays.append) == "done"
    assert fn.calls == 3
    assert delays == [1.0, 2.0]


def test_gives_up_after_max_retries():
    fn = Flaky(5)

    with pytest.raises(ValueError, match="failure 3"):
        with_retry(fn, max_retries=3, retry_on=(ValueError,), sleep=lambda _: None)
    assert fn.calls == 3


def test_unlisted_exceptions_propagate_immediately():
    fn = Flaky(1, exc_type=KeyError)

    with pytest.raises(KeyError):
        with_retry(fn, max_retries=3, retry_on=(ValueError,), sleep=lambda _: None)
    assert fn.calls == 1


def test_single_attempt_means_no_retry():
    fn = Flaky(1)

    with pytest.raises(ValueError):
        with_retry(fn, max_retries=1, retry_on=(ValueError,), sleep=lambda _: None)
    assert fn.calls == 1
