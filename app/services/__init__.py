from app.services.agent_directory_classifier import AgentDirectoryClassifier
from app.services.case_service import CaseService, TicketSequence
from app.services.channel_service import ChannelService
from app.services.commitment_service import CommitmentService
from app.services.content_classifier import ContentClassifier
from app.services.message_service import MessageService
from app.services.reaction_service import ReactionService
from app.services.user_service import UserService

__all__ = [
    "AgentDirectoryClassifier",
    "CaseService",
    "ChannelService",
    "CommitmentService",
    "ContentClassifier",
    "MessageService",
    "ReactionService",
    "TicketSequence",
    "UserService",
]
