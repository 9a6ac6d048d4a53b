# chat/views/errors.py

from rest_framework import status

from backend.api_errors import error_response
from chat.services.exceptions import (
    ChatError,
    ChatPermissionError,
    ConversationNotFound,
    InvalidMessageError,
    InvalidParticipantsError,
    MessageNotFound,
)

ERROR_MAP = (
    (ConversationNotFound, "CONVERSATION_NOT_FOUND", status.HTTP_404_NOT_FOUND),
    (MessageNotFound, "MESSAGE_NOT_FOUND", status.HTTP_404_NOT_FOUND),
    (ChatPermissionError, "NOT_A_PARTICIPANT", status.HTTP_403_FORBIDDEN),
    (InvalidParticipantsError, "INVALID_PARTICIPANTS", status.HTTP_400_BAD_REQUEST),
    (InvalidMessageError, "INVALID_MESSAGE", status.HTTP_400_BAD_REQUEST),
)


def chat_error_response(exc: ChatError):
    for exc_type, code, http_status in ERROR_MAP:
        if isinstance(exc, exc_type):
            return error_response(code=code, message=str(exc), http_status=http_status)
    return error_response(code="CHAT_ERROR", message=str(exc), http_status=status.HTTP_400_BAD_REQUEST)
