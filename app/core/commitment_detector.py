"""
Commitment detection: three ordered pattern tiers (time, action, vague).

The first matching pattern in tier order decides the commitment type and its
deadline. Deadlines are computed from the evaluation clock, with calendar
rules evaluated in the helpdesk's local timezone. Returned datetimes are UTC.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from app.constants.helpdesk import CasePriority, CommitmentType
from app.core.commitment_patterns import (
    LANGUAGES,
    RULE_CLOCK,
    RULE_MORNING,
    RULE_NEXT_DAY_CLOCK,
    RULE_NEXT_MORNING,
    UNIT_HOURS,
    LanguagePatterns,
    TimePattern,
)
from app.schemas.helpdesk import CommitmentDetection
from app.utils.dates import ensure_aware, utcnow

ACTION_DEFAULT_DEADLINE = timedelta(hours=4)
VAGUE_DEFAULT_DEADLINE = timedelta(minutes=30)
REMINDER_LEAD = timedelta(minutes=60)
VAGUE_REMINDER_LEAD = timedelta(minutes=30)
HIGH_PRIORITY_WINDOW = timedelta(hours=2)

MORNING_HOUR = 9
MIDDAY_HOUR = 12
EVENING_CUTOFF_HOUR = 18


class CommitmentDetector:
    """Scans text for promise language."""

    def __init__(
        self,
        languages: Iterable[LanguagePatterns] = LANGUAGES,
        tz: str | ZoneInfo = "UTC",
    ) -> None:
        languages = tuple(languages)
        self.tz = tz if isinstance(tz, ZoneInfo) else ZoneInfo(tz)
        self._time = [
            (re.compile(p.regex, re.IGNORECASE), p)
            for lang in languages
            for p in lang.time
        ]
        self._action = [
            re.compile(p, re.IGNORECASE) for lang in languages for p in lang.action
        ]
        self._vague = [
            re.compile(p, re.IGNORECASE) for lang in languages for p in lang.vague
        ]

    def detect(self, text: str, now: Optional[datetime] = None) -> CommitmentDetection:
        """
        Detect a commitment in `text`.

        Args:
            text: Message text (or transcript).
            now: Evaluation clock; defaults to the current UTC time.

        Returns:
            CommitmentDetection with has_commitment=False when no tier matches.
        """
        now = ensure_aware(now) or utcnow()
        if not text:
            return CommitmentDetection(has_commitment=False)

        for regex, pattern in self._time:
            match = regex.search(text)
            if match:
                detected = self._time_deadline(pattern, match, now)
                deadline = detected or now + ACTION_DEFAULT_DEADLINE
                return self._result(
                    CommitmentType.TIME, match.group(0), deadline, detected, now
                )

        for regex in self._action:
            match = regex.search(text)
            if match:
                return self._result(
                    CommitmentType.ACTION,
                    match.group(0),
                    now + ACTION_DEFAULT_DEADLINE,
                    None,
                    now,
                )

        for regex in self._vague:
            match = regex.search(text)
            if match:
                return self._result(
                    CommitmentType.VAGUE,
                    match.group(0),
                    now + VAGUE_DEFAULT_DEADLINE,
                    None,
                    now,
                )

        return CommitmentDetection(has_commitment=False)

    def _time_deadline(
        self, pattern: TimePattern, match: re.Match, now: datetime
    ) -> Optional[datetime]:
        local_now = now.astimezone(self.tz)
        if pattern.rule == RULE_NEXT_MORNING:
            return self._at_hour(local_now + timedelta(days=1), MORNING_HOUR)
        if pattern.rule == RULE_MORNING:
            if local_now.hour >= EVENING_CUTOFF_HOUR:
                return self._at_hour(local_now + timedelta(days=1), MORNING_HOUR)
            return self._at_hour(local_now, MIDDAY_HOUR)
        if pattern.rule == RULE_CLOCK:
            return self._at_clock(local_now, int(match.group(1)), int(match.group(2)))
        if pattern.rule == RULE_NEXT_DAY_CLOCK:
            return self._at_clock(
                local_now, int(match.group(1)), int(match.group(2)), days=1
            )

        minutes = 0
        if pattern.minutes is not None:
            minutes = pattern.minutes
        elif pattern.hours is not None:
            minutes = pattern.hours * 60
        elif match.groups() and match.group(1):
            number = int(match.group(1))
            minutes = number * 60 if pattern.unit == UNIT_HOURS else number
        if minutes <= 0:
            return None
        return now + timedelta(minutes=minutes)

    def _at_hour(self, local_day: datetime, hour: int) -> datetime:
        local = datetime(
            local_day.year, local_day.month, local_day.day, hour, tzinfo=self.tz
        )
        return local.astimezone(timezone.utc)

    def _at_clock(
        self, local_now: datetime, hour: int, minute: int, days: int = 0
    ) -> Optional[datetime]:
        """HH:MM local on the day `days` ahead; a past time today rolls to tomorrow."""
        if hour > 23 or minute > 59:
            return None
        day = local_now + timedelta(days=days)
        local = datetime(day.year, day.month, day.day, hour, minute, tzinfo=self.tz)
        if days == 0 and local <= local_now:
            local += timedelta(days=1)
        return local.astimezone(timezone.utc)

    def _result(
        self,
        commitment_type: CommitmentType,
        matched_text: str,
        deadline: datetime,
        detected_deadline: Optional[datetime],
        now: datetime,
    ) -> CommitmentDetection:
        deadline = deadline.astimezone(timezone.utc)
        is_vague = commitment_type == CommitmentType.VAGUE
        lead = VAGUE_REMINDER_LEAD if is_vague else REMINDER_LEAD
        return CommitmentDetection(
            has_commitment=True,
            is_vague=is_vague,
            commitment_type=commitment_type,
            matched_text=matched_text,
            deadline=deadline,
            detected_deadline=detected_deadline,
            reminder_at=deadline - lead,
            priority=commitment_priority(commitment_type, deadline, now),
        )


def commitment_priority(
    commitment_type: CommitmentType, deadline: datetime, now: datetime
) -> str:
    """high: time commitment due within 2h; low: vague; otherwise medium."""
    if commitment_type == CommitmentType.TIME and deadline - now <= HIGH_PRIORITY_WINDOW:
        return CasePriority.HIGH.value
    if commitment_type == CommitmentType.VAGUE:
        return CasePriority.LOW.value
    return CasePriority.MEDIUM.value
