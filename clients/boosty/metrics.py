from __future__ import annotations

from prometheus_client import Counter, Histogram

# Counters
requests_total = Counter(
    "boosty_requests_total",
    "Total logical Boosty API requests",
    labelnames=("endpoint",),
)

attempts_total = Counter(
    "boosty_request_attempts_total",
    "Outbound HTTP attempts, including the post-refresh retry",
    labelnames=("endpoint", "outcome"),
)

token_refresh_total = Counter(
    "boosty_token_refresh_total",
    "Token refresh calls by result",
    labelnames=("result",),
)

# Histograms
request_time_seconds = Histogram(
    "boosty_request_time_seconds",
    "Time spent in a single outbound HTTP attempt",
    labelnames=("endpoint",),
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)


def inc_request(endpoint: str) -> None:
    try:
        requests_total.labels(endpoint=endpoint).inc()
    except Exception:
        pass


def inc_attempt(endpoint: str, outcome: str) -> None:
    try:
        attempts_total.labels(endpoint=endpoint, outcome=outcome).inc()
    except Exception:
        pass


def inc_refresh(result: str) -> None:
    try:
        token_refresh_total.labels(result=result).inc()
    except Exception:
        pass


class AttemptTimer:
    def __init__(self, endpoint: str):
        self._endpoint = endpoint

    def __enter__(self):
        try:
            timer = request_time_seconds.labels(endpoint=self._endpoint).time()
            timer.__enter__()
            self._timer = timer
        except Exception:
            pass
        return self

    def __exit__(self, exc_type, exc, tb):
        if hasattr(self, "_timer"):
            try:
                self._timer.__exit__(exc_type, exc, tb)
            except Exception:
                pass
        return False


def measure_attempt(endpoint: str) -> AttemptTimer:
    return AttemptTimer(endpoint)
