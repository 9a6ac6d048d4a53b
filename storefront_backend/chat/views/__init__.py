# chat/views/__init__.py

from .conversation import (
    ConversationDetailView,
    ConversationListCreateView,
    MarkReadView,
    MessageDetailView,
    MessageListCreateView,
    UnreadCountView,
)

__all__ = [
    "ConversationDetailView",
    "ConversationListCreateView",
    "MarkReadView",
    "MessageDetailView",
    "MessageListCreateView",
    "UnreadCountView",
]
