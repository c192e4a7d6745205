from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from ..core.enums import PunchType
from .model import AttendanceRecord, PunchEvent

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600.0


@dataclass(frozen=True)
class WorkedTime:
    """Worked and break time for one day.

    `worked_hours` includes the open segment only when a reference `now` was
    given; in that case `provisional` is set and the value must not be persisted.
    """

    worked_hours: float
    closed_hours: float
    break_hours: float
    provisional: bool = False


ZERO_WORKED_TIME = WorkedTime(worked_hours=0.0, closed_hours=0.0, break_hours=0.0)


class HoursCalculator:
    """Turn check-in/check-out instants into worked hours."""

    def hours_between(self, check_in: datetime, check_out: datetime) -> float:
        """|check_out - check_in| in hours; out-of-order instants never go negative."""
        seconds = (check_out - check_in).total_seconds()
        if seconds < 0:
            logger.warning(
                "Negative time difference: check-in %s, check-out %s; using absolute value",
                check_in.isoformat(),
                check_out.isoformat(),
            )
        return abs(seconds) / SECONDS_PER_HOUR

    def worked_time(self, punches: Iterable[PunchEvent], *, now: Optional[datetime] = None) -> WorkedTime:
        """Sum closed segments, gaps between them, and optionally the open segment.

        Punches are sorted chronologically first. A repeated IN while a segment is
        open keeps the earlier IN; an OUT before any IN is ignored.
        """
        ordered = sorted(punches, key=lambda p: p.at)

        closed = 0.0
        breaks = 0.0
        open_in: Optional[datetime] = None
        last_out: Optional[datetime] = None

        for punch in ordered:
            if punch.kind == PunchType.IN:
                if open_in is not None:
                    continue
                open_in = punch.at
                if last_out is not None:
                    breaks += self.hours_between(last_out, punch.at)
            elif open_in is not None:
                closed += self.hours_between(open_in, punch.at)
                open_in = None
                last_out = punch.at
            elif last_out is not None:
                # A repeated check-out moves the end of the last segment.
                closed += self.hours_between(last_out, punch.at)
                last_out = punch.at

        if open_in is not None and now is not None:
            in_progress = self.hours_between(open_in, now)
            return WorkedTime(
                worked_hours=closed + in_progress,
                closed_hours=closed,
                break_hours=breaks,
                provisional=True,
            )
        return WorkedTime(worked_hours=closed, closed_hours=closed, break_hours=breaks)

    def for_record(self, record: Optional[AttendanceRecord], *, now: Optional[datetime] = None) -> WorkedTime:
        if record is None:
            return ZERO_WORKED_TIME
        return self.worked_time(record.effective_punches(), now=now)
