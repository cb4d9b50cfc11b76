import httpx
import pytest

from smartobjects_client import ApiError, BackoffConfig, PlatformUnavailableError, RequestDescriptor
from smartobjects_client.retry import ExponentialBackoff, retry_notify


class _ScriptedBackoff:
    def __init__(self, delays):
        self.delays = list(delays)
        self.resets = 0

    def reset(self) -> None:
        self.resets += 1

    def elapsed(self) -> float:
        return 0.0

    def next_delay(self):
        return self.delays.pop(0) if self.delays else None


def test_503_is_retried_until_success(make_client, platform, no_sleep) -> None:
    notified = []
    client = make_client(backoff=BackoffConfig(notify=lambda err, delay: notified.append((err, delay))))
    platform.queue(*[httpx.Response(503) for _ in range(4)], httpx.Response(200, json={"ok": True}))

    result = client.call_authenticated(RequestDescriptor(method="GET", path="/api/v3/things"))

    assert result == {"ok": True}
    assert len(notified) == 4
    assert all(isinstance(err, PlatformUnavailableError) for err, _ in notified)
    assert [delay for _, delay in notified] == no_sleep
    assert len(platform.api_requests) == 5


def test_token_fetch_is_retried_on_503(make_client, platform, no_sleep) -> None:
    notified = []

    def _recover(err, delay) -> None:
        notified.append(delay)
        platform.token_failure = None

    client = make_client(backoff=BackoffConfig(notify=_recover))
    platform.token_failure = httpx.Response(503)

    token = client.get_access_token()

    assert token.value == "token-1"
    assert len(notified) == 1


def test_retry_gives_up_after_max_elapsed() -> None:
    calls = []

    def _unavailable():
        calls.append(1)
        raise PlatformUnavailableError("maintenance")

    backoff = _ScriptedBackoff([0.0, 0.0])
    with pytest.raises(PlatformUnavailableError) as exc:
        retry_notify(_unavailable, backoff)

    assert exc.value.status_code == 503
    assert len(calls) == 3
    assert backoff.resets == 1


def test_client_gives_up_once_max_elapsed_has_passed(make_client, platform, monkeypatch) -> None:
    now = [0.0]
    slept = []

    def _sleep(delay) -> None:
        slept.append(delay)
        now[0] += delay

    monkeypatch.setattr("smartobjects_client.retry.time.monotonic", lambda: now[0])
    monkeypatch.setattr("smartobjects_client.retry.time.sleep", _sleep)
    notified = []
    client = make_client(
        backoff=BackoffConfig(
            max_elapsed_s=2.0,
            initial_interval_s=1.0,
            multiplier=1.0,
            randomization_factor=0.0,
            notify=lambda err, delay: notified.append(err),
        )
    )
    platform.queue(*[httpx.Response(503, text=f"down {i}") for i in range(6)])

    with pytest.raises(PlatformUnavailableError) as exc:
        client.call_authenticated(RequestDescriptor(method="GET", path="/api/v3/things"))

    # retries scheduled at t=0, 1 and 2; the attempt at t=3 is past the limit
    assert len(platform.api_requests) == 4
    assert exc.value.body == "down 3"
    assert len(notified) == len(slept) == 3
    assert [err.body for err in notified] == ["down 0", "down 1", "down 2"]


def test_permanent_errors_stop_immediately() -> None:
    calls = []
    notified = []

    def _rejected():
        calls.append(1)
        raise ApiError(404, "not found")

    with pytest.raises(ApiError):
        retry_notify(_rejected, _ScriptedBackoff([0.0] * 5), lambda e, d: notified.append(e))

    assert calls == [1]
    assert notified == []


def test_returns_first_success_without_notifying() -> None:
    notified = []
    assert retry_notify(lambda: 7, _ScriptedBackoff([]), lambda e, d: notified.append(e)) == 7
    assert notified == []


def test_backoff_grows_and_is_capped() -> None:
    backoff = ExponentialBackoff(initial_interval_s=1.0, multiplier=2.0, randomization_factor=0.0, max_interval_s=5.0)
    assert [backoff.next_delay() for _ in range(6)] == [1.0, 2.0, 4.0, 5.0, 5.0, 5.0]


def test_backoff_randomization_stays_in_range() -> None:
    backoff = ExponentialBackoff(initial_interval_s=2.0, multiplier=1.0, randomization_factor=0.5)
    for _ in range(50):
        assert 1.0 <= backoff.next_delay() <= 3.0


def test_backoff_stops_after_max_elapsed(monkeypatch) -> None:
    now = [100.0]
    monkeypatch.setattr("smartobjects_client.retry.time.monotonic", lambda: now[0])
    backoff = ExponentialBackoff(max_elapsed_s=10.0)

    assert backoff.next_delay() is not None
    now[0] = 110.0
    assert backoff.next_delay() is not None
    now[0] = 110.5
    assert backoff.next_delay() is None


def test_zero_max_elapsed_never_stops(monkeypatch) -> None:
    now = [0.0]
    monkeypatch.setattr("smartobjects_client.retry.time.monotonic", lambda: now[0])
    backoff = ExponentialBackoff(max_elapsed_s=0.0)
    now[0] = 1e9
    assert backoff.next_delay() is not None


def test_from_config() -> None:
    backoff = ExponentialBackoff.from_config(BackoffConfig(max_elapsed_s=30.0, max_interval_s=2.0))
    assert backoff.max_elapsed_s == 30.0
    assert backoff.max_interval_s == 2.0
    assert backoff.initial_interval_s == 0.5
