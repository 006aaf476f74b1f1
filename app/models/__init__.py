from app.models.agent import Agent
from app.models.case import Case, CaseActivity, TicketCounter
from app.models.channel import Channel
from app.models.commitment import Commitment
from app.models.message import Message
from app.models.user import HelpdeskUser

__all__ = [
    "Agent",
    "Case",
    "CaseActivity",
    "Channel",
    "Commitment",
    "HelpdeskUser",
    "Message",
    "TicketCounter",
]
