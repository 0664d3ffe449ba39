# pricing/services/error_tracking.py

"""
PATH: pricing/services/error_tracking.py

ENGINE ERROR TRACKING (IN-PROCESS)

Purpose:
- Count engine failures (rejected cart discount, invalid tax, total fallback,
  unexpected view errors) so the health endpoint can report an error rate.

Rules:
- Per-process memory only; not shared between workers (Sentry is the
  cross-process view).
- A failure is "recent" for WINDOW_SECONDS; at most MAX_RECENT_ERRORS are kept.
- Health: 0-4 recent errors healthy, 5-9 warning, 10+ critical.
"""

from __future__ import annotations

import threading
import time
from collections import Counter, deque
from typing import Callable, Dict

CALCULATION_ERROR = "calculation_error"
DISCOUNT_ERROR = "discount_error"
TAX_ERROR = "tax_error"
VALIDATION_ERROR = "validation_error"

WINDOW_SECONDS = 300
MAX_RECENT_ERRORS = 100

WARNING_THRESHOLD = 5
CRITICAL_THRESHOLD = 10

HEALTH_HEALTHY = "healthy"
HEALTH_WARNING = "warning"
HEALTH_CRITICAL = "critical"


class ErrorTracker:
    def __init__(
        self,
        window_seconds: float = WINDOW_SECONDS,
        max_recent: int = MAX_RECENT_ERRORS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.window_seconds = float(window_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._counts: Counter = Counter()
        # (recorded_at, error_type, operation)
        self._recent: deque = deque(maxlen=int(max_recent))

    def record(self, error_type: str, operation: str = "") -> None:
        key = f"{error_type}_{operation}" if operation else error_type
        with self._lock:
            self._counts[key] += 1
            self._recent.append((self._clock(), error_type, operation))

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()
            self._recent.clear()

    def _recent_in_window(self) -> list:
        cutoff = self._clock() - self.window_seconds
        return [entry for entry in self._recent if entry[0] > cutoff]

    def stats(self) -> Dict:
        with self._lock:
            recent = self._recent_in_window()
            counts = dict(self._counts)

        error_types: Counter = Counter(error_type for _, error_type, _ in recent)
        return {
            "errorCounts": counts,
            "recentErrorCount": len(recent),
            "errorTypes": dict(error_types),
        }

    def recent_error_count(self) -> int:
        with self._lock:
            return len(self._recent_in_window())

    def is_high_error_rate(self) -> bool:
        return self.recent_error_count() >= CRITICAL_THRESHOLD

    def system_health(self) -> Dict:
        error_rate = self.recent_error_count()

        if error_rate == 0:
            status, details = HEALTH_HEALTHY, "No recent financial errors detected"
        elif error_rate < WARNING_THRESHOLD:
            status, details = HEALTH_HEALTHY, "Low error rate within normal parameters"
        elif error_rate < CRITICAL_THRESHOLD:
            status, details = HEALTH_WARNING, "Elevated error rate detected"
        else:
            status, details = HEALTH_CRITICAL, "High error rate requires attention"

        return {"status": status, "errorRate": error_rate, "details": details}


error_tracker = ErrorTracker()
