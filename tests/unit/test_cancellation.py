"""
tests/unit/test_cancellation.py

Verifies:
✔ A fresh token is not cancelled and has no deadline
✔ cancel() is observed by cancelled, raise_if_cancelled() and wait()
✔ A deadline caps network timeouts and expires the token
"""

import time

import pytest

from generation import CancellationToken, GenerationCancelled


class TestCancellationToken:
    def test_fresh_token(self):
        token = CancellationToken()
        assert not token.cancelled
        assert token.remaining() is None
        assert token.bound_timeout(60) == 60
        token.raise_if_cancelled()

    def test_cancel(self):
        token = CancellationToken()
        token.cancel()
        assert token.cancelled
        with pytest.raises(GenerationCancelled):
            token.raise_if_cancelled()

    def test_wait_returns_immediately_when_cancelled(self):
        token = CancellationToken()
        token.cancel()
        started = time.monotonic()
        assert token.wait(30) is True
        assert time.monotonic() - started < 1

    def test_wait_times_out_without_cancel(self):
        assert CancellationToken().wait(0.01) is False

    def test_deadline_bounds_timeout(self):
        token = CancellationToken(deadline_s=5)
        assert 0 < token.remaining() <= 5
        assert token.bound_timeout(60) <= 5
        assert token.bound_timeout(1) == 1

    def test_deadline_expires(self):
        token = CancellationToken(deadline_s=0.01)
        time.sleep(0.05)
        assert token.cancelled
        assert token.remaining() == 0.0
        with pytest.raises(GenerationCancelled):
            token.raise_if_cancelled()

    def test_wait_is_cut_short_by_deadline(self):
        token = CancellationToken(deadline_s=0.05)
        started = time.monotonic()
        assert token.wait(30) is True
        assert time.monotonic() - started < 5
