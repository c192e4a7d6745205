"""Codec for the JSON check-in/out history stored in attendance notes.

Notes are parsed once when a record is loaded and dumped once when it is saved;
nothing else in the package reads the raw text.

Stored shape::

    {"firstCheckIn": iso, "checkInOutHistory": [{"type": "in"|"out", "time": iso}],
     "userNotes": str|null, "autoCheckedOut": bool}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import PunchType
from .model import PunchEvent


@dataclass(frozen=True)
class AttendanceNotes:
    punches: tuple[PunchEvent, ...] = field(default_factory=tuple)
    first_check_in: Optional[datetime] = None
    user_notes: Optional[str] = None
    auto_checked_out: bool = False


def _parse_instant(value) -> Optional[datetime]:
    if not value:
        return None
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    # Database datetimes are naive local time; offset-aware instants are converted to it.
    if parsed.tzinfo is not None:
        return parsed.astimezone().replace(tzinfo=None)
    return parsed


def _fallback(raw: Optional[str], check_in: Optional[datetime], check_out: Optional[datetime]) -> AttendanceNotes:
    punches = []
    if check_in is not None:
        punches.append(PunchEvent(PunchType.IN, check_in))
    if check_out is not None:
        punches.append(PunchEvent(PunchType.OUT, check_out))
    return AttendanceNotes(punches=tuple(punches), first_check_in=check_in, user_notes=raw or None)


def parse_notes(
    raw: Optional[str],
    *,
    check_in: Optional[datetime] = None,
    check_out: Optional[datetime] = None,
) -> AttendanceNotes:
    """Parse stored notes; plain text is kept as user notes with a synthesized history."""

    if not raw:
        return _fallback(None, check_in, check_out)
    try:
        data = json.loads(raw)
    except ValueError:
        return _fallback(raw, check_in, check_out)
    if not isinstance(data, dict):
        return _fallback(raw, check_in, check_out)

    punches = []
    for item in data.get("checkInOutHistory") or []:
        try:
            kind = PunchType(str(item.get("type", "")).lower())
            at = _parse_instant(item.get("time"))
        except (AttributeError, ValueError):
            continue
        if at is not None:
            punches.append(PunchEvent(kind, at))

    return AttendanceNotes(
        punches=tuple(punches) or _fallback(None, check_in, check_out).punches,
        first_check_in=_parse_instant(data.get("firstCheckIn")) or check_in,
        user_notes=data.get("userNotes"),
        auto_checked_out=bool(data.get("autoCheckedOut", False)),
    )


def dump_notes(notes: AttendanceNotes) -> str:
    payload = {
        "firstCheckIn": notes.first_check_in.isoformat() if notes.first_check_in else None,
        "checkInOutHistory": [{"type": p.kind.value, "time": p.at.isoformat()} for p in notes.punches],
        "userNotes": notes.user_notes,
    }
    if notes.auto_checked_out:
        payload["autoCheckedOut"] = True
    return json.dumps(payload)
