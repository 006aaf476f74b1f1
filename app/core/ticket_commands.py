"""Recognition of the "create a ticket from the quoted message" command."""

from __future__ import annotations

import re
from typing import Optional

TICKET_COMMAND_PHRASES = (
    "/ticket",
    "/тикет",
    "создай тикет",
    "создать тикет",
    "create ticket",
    "#ticket",
    "#тикет",
    "тикет",
    "ticket",
    "tiket",
)

_PHRASES = "|".join(
    re.escape(p).replace(r"\ ", r"\s+")
    for p in sorted(TICKET_COMMAND_PHRASES, key=len, reverse=True)
)
# Optional leading @mention, optional /command@bot suffix, optional trailing punctuation.
_COMMAND_RE = re.compile(
    rf"^(?:@\w+[\s,:]+)?(?:{_PHRASES})(?:@\w+)?\s*[.!]*$", re.IGNORECASE
)

USAGE_TEXT = (
    "To create a ticket, reply to the client's message with /ticket.\n"
    "Чтобы создать тикет, ответьте на сообщение клиента командой /тикет."
)


def is_ticket_command(text: Optional[str]) -> bool:
    """True when the whole message is a ticket command phrase."""
    if not text:
        return False
    return bool(_COMMAND_RE.match(text.strip()))
