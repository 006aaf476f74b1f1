"""Case lifecycle rules: resolution keywords and urgency to priority mapping."""

from __future__ import annotations

import re
from typing import Optional

from app.constants.helpdesk import CasePriority

# Per-language phrases that mark a staff reply as resolving the case.
RESOLUTION_KEYWORDS: dict[str, tuple[str, ...]] = {
    "ru": (
        r"(?<!будет )решено",
        r"проблема\s+решена",
        r"исправлено",
        r"исправили",
        r"починили",
        r"устранено",
        r"(?<!будет )готово",
        r"(?<!будет )сделано",
    ),
    "uz": (
        r"hal\s+qilindi",
        r"tuzatildi",
        r"bajarildi",
        r"tayyor\b(?!\s+bo)",
    ),
    "en": (
        r"\bfixed\b",
        r"\bresolved\b",
        r"\bsolved\b",
        r"\bdone\b",
    ),
}

_RESOLUTION_REGEXES = [
    re.compile(pattern, re.IGNORECASE)
    for patterns in RESOLUTION_KEYWORDS.values()
    for pattern in patterns
]


def find_resolution_keyword(text: Optional[str]) -> Optional[str]:
    """Return the matched resolution phrase, or None."""
    if not text:
        return None
    for regex in _RESOLUTION_REGEXES:
        match = regex.search(text)
        if match:
            return match.group(0)
    return None


def priority_from_urgency(urgency: Optional[int]) -> CasePriority:
    """>= 4 urgent, >= 3 high, otherwise medium."""
    if urgency is not None and urgency >= 4:
        return CasePriority.URGENT
    if urgency is not None and urgency >= 3:
        return CasePriority.HIGH
    return CasePriority.MEDIUM
