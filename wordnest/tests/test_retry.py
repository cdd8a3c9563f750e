from __future__ import annotations

import asyncio

import pytest

from wordnest.services.remote.client import RemoteError
from wordnest.services.remote.retry import RetryPolicy


class _Sleeps:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def _flaky(failures: list[Exception], result="ok"):
    calls = {"count": 0}

    async def operation():
        calls["count"] += 1
        if failures:
            raise failures.pop(0)
        return result

    return operation, calls


def _transient(exc: Exception) -> bool:
    return isinstance(exc, RemoteError) and exc.is_transient


def test_retries_transient_failures_until_success():
    sleeps = _Sleeps()
    policy = RetryPolicy(max_attempts=3, base_delay=0.5, multiplier=2.0, max_delay=10, sleep=sleeps)
    operation, calls = _flaky([RemoteError("down"), RemoteError("busy", status_code=503)])

    assert asyncio.run(policy.run(operation, should_retry=_transient)) == "ok"
    assert calls["count"] == 3
    assert sleeps.delays == [0.5, 1.0]


def test_gives_up_after_max_attempts():
    sleeps = _Sleeps()
    policy = RetryPolicy(max_attempts=2, base_delay=0.1, sleep=sleeps)
    operation, calls = _flaky([RemoteError("down"), RemoteError("still down"), RemoteError("never")])

    with pytest.raises(RemoteError, match="still down"):
        asyncio.run(policy.run(operation, should_retry=_transient))
    assert calls["count"] == 2
    assert len(sleeps.delays) == 1


def test_client_errors_are_not_retried():
    sleeps = _Sleeps()
    policy = RetryPolicy(max_attempts=5, sleep=sleeps)
    operation, calls = _flaky([RemoteError("conflict", status_code=409)])

    with pytest.raises(RemoteError):
        asyncio.run(policy.run(operation, should_retry=_transient))
    assert calls["count"] == 1
    assert sleeps.delays == []


def test_delay_is_capped():
    policy = RetryPolicy(max_attempts=10, base_delay=1.0, multiplier=3.0, max_delay=5.0)
    assert [policy.delay_for(n) for n in range(1, 5)] == [1.0, 3.0, 5.0, 5.0]


def test_rejects_zero_attempts():
    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0)
