from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Protocol, Tuple

from app.core.exceptions import PermissionDeniedError, UnavailableError
from app.modules.steps.schemas import StepSample, StepSourceStatus


class StepSource(Protocol):
    def fetch_step_count(self, window_start: datetime, window_end: datetime) -> int:
        ...


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def current_week_window(now: datetime, week_start_day: int = 0) -> Tuple[datetime, datetime]:
    """[start of the current week, now]; week_start_day follows datetime.weekday() (0 = Monday)"""
    now = as_utc(now)
    days_back = (now.weekday() - week_start_day) % 7
    start = (now - timedelta(days=days_back)).replace(hour=0, minute=0, second=0, microsecond=0)
    return start, now


class ReportedStepSource:
    """Step source backed by samples the device read from its health store"""

    def __init__(self, samples: Iterable[StepSample], status: StepSourceStatus = StepSourceStatus.OK):
        self.samples: List[StepSample] = list(samples)
        self.status = status

    def fetch_step_count(self, window_start: datetime, window_end: datetime) -> int:
        if self.status == StepSourceStatus.DENIED:
            raise PermissionDeniedError("Step data access denied on device")
        if self.status == StepSourceStatus.UNAVAILABLE:
            raise UnavailableError("Step data unavailable on device")
        start = as_utc(window_start)
        end = as_utc(window_end)
        # Cumulative sum over samples starting inside the window
        return sum(s.count for s in self.samples if start <= as_utc(s.start) <= end)
