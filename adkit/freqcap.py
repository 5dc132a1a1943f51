"""Frequency caps: how many impressions are allowed per span of time."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

# The largest span a nanosecond count in 63 bits holds, about 292 years.
LIFETIME_SPAN = timedelta(microseconds=(2**63 - 1) // 1000)


class TimeUnit(enum.IntEnum):
    """Unit of the span of a frequency cap."""

    UNSPECIFIED = 0
    MINUTE = 1
    HOUR = 2
    DAY = 3
    WEEK = 4
    MONTH = 5
    LIFETIME = 6


_UNIT_SPANS = {
    TimeUnit.MINUTE: timedelta(minutes=1),
    TimeUnit.HOUR: timedelta(hours=1),
    TimeUnit.DAY: timedelta(days=1),
    TimeUnit.WEEK: timedelta(days=7),
    TimeUnit.MONTH: timedelta(days=30),
}


@dataclass
class FrequencyCap:
    """A cap specified by the user: max_impressions per num_time_units units."""

    max_impressions: int = 0
    num_time_units: int = 0
    time_unit: TimeUnit = TimeUnit.UNSPECIFIED
    span: timedelta = field(default_factory=timedelta)


def to_duration(cap: FrequencyCap) -> timedelta:
    """Span covered by cap; unspecified and lifetime units span ~292 years."""
    unit = _UNIT_SPANS.get(TimeUnit(cap.time_unit))
    if unit is None:
        return LIFETIME_SPAN
    return unit * cap.num_time_units


class Fcap:
    """Impression counter for one cap; the default allows a single impression."""

    def __init__(self, span: timedelta = timedelta(0), limit: int = 0) -> None:
        self._lock = threading.Lock()
        self._last: Optional[datetime] = None
        self.span = span
        self.limit = limit
        self._count = 0

    @property
    def count(self) -> int:
        """Impressions counted in the current span."""
        return self._count

    def check_cap_met(self) -> bool:
        """Whether the count has gone past the limit."""
        with self._lock:
            return self._count > self.limit

    def mark(self, now: datetime) -> bool:
        """Count an impression at now if the cap allows it; return whether it did."""
        with self._lock:
            if self._count == 0:
                self._last = now
                self._count = 1
                return True
            if not self.span:
                return False
            diff = now - self._last
            if diff < self.span:
                if self._count < self.limit:
                    self._count += 1
                    return True
                return False
            self._count = 1
            self._last = now
            return True


def new_fcap_of(spec: FrequencyCap) -> Fcap:
    """Return a counter enforcing spec."""
    return Fcap(span=to_duration(spec), limit=spec.max_impressions)