# chat/services/exceptions.py

"""
CHAT SERVICE ERRORS
"""


class ChatError(Exception):
    """Base exception for conversations and messages."""


class ConversationNotFound(ChatError):
    pass


class MessageNotFound(ChatError):
    pass


class ChatPermissionError(ChatError):
    """Caller is not a participant, or not the sender of the message."""


class InvalidParticipantsError(ChatError):
    pass


class InvalidMessageError(ChatError):
    pass
