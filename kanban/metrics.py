from __future__ import annotations

from collections import Counter, deque
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from threading import Lock
from time import monotonic

_RETENTION = timedelta(hours=24)
_WINDOWS = {"15m": timedelta(minutes=15), "24h": _RETENTION}


@dataclass
class RequestSample:
  ts: datetime
  status_code: int
  latency_ms: float


def _p95(latencies: list[float]) -> float:
  if not latencies:
    return 0.0
  ordered = sorted(latencies)
  return ordered[max(0, int(len(ordered) * 0.95) - 1)]


class RuntimeMetrics:
  """In-process request and mutation counters for the status endpoint."""

  def __init__(self) -> None:
    self._started_monotonic = monotonic()
    self._started_at = datetime.now(timezone.utc)
    self._samples: deque[RequestSample] = deque()
    self._mutations: Counter[str] = Counter()
    self._lock = Lock()

  @property
  def started_at(self) -> datetime:
    return self._started_at

  def uptime_seconds(self) -> int:
    return max(0, int(monotonic() - self._started_monotonic))

  def observe_request(self, status_code: int, latency_ms: float) -> None:
    now = datetime.now(timezone.utc)
    with self._lock:
      self._samples.append(RequestSample(ts=now, status_code=status_code, latency_ms=latency_ms))
      self._prune_locked(now)

  def count_mutation(self, op: str) -> None:
    with self._lock:
      self._mutations[op] += 1

  def _prune_locked(self, now: datetime) -> None:
    cutoff = now - _RETENTION
    while self._samples and self._samples[0].ts < cutoff:
      self._samples.popleft()

  def snapshot(self) -> dict:
    now = datetime.now(timezone.utc)
    with self._lock:
      self._prune_locked(now)
      samples = list(self._samples)
      mutations = dict(self._mutations)

    out: dict = {
      "uptimeSeconds": self.uptime_seconds(),
      "p95LatencyMs24h": round(_p95([s.latency_ms for s in samples]), 2),
      "mutations": mutations,
    }
    for label, span in _WINDOWS.items():
      recent = [s for s in samples if s.ts >= now - span]
      errors = sum(1 for s in recent if s.status_code >= 500)
      out[f"requestCount{label}"] = len(recent)
      out[f"errorCount{label}"] = errors
      out[f"errorRate{label}"] = round(errors / len(recent) * 100, 2) if recent else 0.0
    return out
