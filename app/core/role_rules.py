"""
Role classification contract and the storage-free staff name heuristic.

A RoleClassifier maps a sender to client / employee / partner and reports how
it decided. The default implementation lives in
`app.services.agent_directory_classifier`.
"""

from __future__ import annotations

from typing import Optional, Protocol

from app.schemas.helpdesk import RoleClassification

# Display names that always belong to staff accounts (lowercase).
STAFF_NAME_SUBSTRINGS = ("support bot", "helpdesk bot", "support team")
STAFF_NAME_EXACT = ("support", "helpdesk")


class RoleClassifier(Protocol):
    def classify(
        self,
        sender_id: Optional[str],
        username: Optional[str],
        display_name: Optional[str],
    ) -> RoleClassification: ...


def matches_staff_name(display_name: Optional[str]) -> bool:
    name = (display_name or "").strip().lower()
    if not name:
        return False
    if name in STAFF_NAME_EXACT:
        return True
    return any(fragment in name for fragment in STAFF_NAME_SUBSTRINGS)


def normalize_username(username: Optional[str]) -> Optional[str]:
    """Strip a leading '@' and lowercase; None for empty values."""
    if not username:
        return None
    cleaned = username.strip().lstrip("@").lower()
    return cleaned or None
