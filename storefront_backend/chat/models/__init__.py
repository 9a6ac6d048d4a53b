# chat/models/__init__.py

from .conversation import Conversation, ConversationParticipant
from .message import Message

__all__ = ["Conversation", "ConversationParticipant", "Message"]
