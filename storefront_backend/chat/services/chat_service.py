# chat/services/chat_service.py

"""
CHAT SERVICE

Rules:
- a participant set maps to exactly one conversation
- only participants read or write a conversation
- sending bumps unread_count for every participant except the sender,
  inside the same transaction as the message insert
- clients poll (conversations / messages / unread) instead of listening
"""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import F, Q, Sum

from chat.models import Conversation, ConversationParticipant, Message
from chat.services.exceptions import (
    ChatPermissionError,
    ConversationNotFound,
    InvalidMessageError,
    InvalidParticipantsError,
    MessageNotFound,
)

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE_LIMIT = 20
MAX_MESSAGE_LIMIT = 100


# ============================================================
# CONVERSATIONS
# ============================================================


def list_conversations(user):
    """Newest activity first."""
    return (
        Conversation.objects.filter(participants__user=user)
        .prefetch_related("participants")
        .order_by("-updated_at")
        .distinct()
    )


def get_conversation(*, user, conversation_id) -> Conversation:
    conversation = Conversation.objects.filter(id=conversation_id).prefetch_related("participants").first()
    if conversation is None:
        raise ConversationNotFound("Conversation not found")
    if not conversation.participants.filter(user=user).exists():
        raise ChatPermissionError("You are not a participant of this conversation")
    return conversation


def _default_participant(user) -> dict:
    return {
        "id": user.id,
        "name": user.public_name,
        "type": user.role if user.role in dict(ConversationParticipant.TYPE_CHOICES) else "buyer",
        "avatar": getattr(user, "avatar_url", "") or "",
    }


def _clean_participants(*, user, participants) -> list:
    cleaned = {}
    for p in participants or []:
        pid = str(p.get("id") or "").strip()
        name = str(p.get("name") or "").strip()
        ptype = p.get("type")
        if not (pid and name and ptype):
            raise InvalidParticipantsError("Each participant needs id, name and type")
        if ptype not in dict(ConversationParticipant.TYPE_CHOICES):
            raise InvalidParticipantsError(f"Unknown participant type: {ptype}")
        cleaned[pid] = {"id": pid, "name": name, "type": ptype, "avatar": p.get("avatar") or ""}

    # The caller always takes part in conversations they open.
    if str(user.id) not in cleaned:
        me = _default_participant(user)
        cleaned[str(user.id)] = {**me, "id": str(user.id)}

    if len(cleaned) < 2:
        raise InvalidParticipantsError("A conversation needs at least two distinct participants")

    User = get_user_model()
    found = set(str(pk) for pk in User.objects.filter(id__in=list(cleaned)).values_list("id", flat=True))
    missing = set(cleaned) - found
    if missing:
        raise InvalidParticipantsError(f"Unknown participant ids: {', '.join(sorted(missing))}")

    return list(cleaned.values())


def find_or_create_conversation(*, user, participants, related_to=None) -> tuple:
    """
    Returns (conversation, created). related_to only applies on creation.
    """
    cleaned = _clean_participants(user=user, participants=participants)
    key = Conversation.build_participant_key(p["id"] for p in cleaned)

    existing = Conversation.objects.filter(participant_key=key).first()
    if existing is not None:
        return existing, False

    related_to = related_to or {}
    try:
        with transaction.atomic():
            conversation = Conversation.objects.create(
                participant_key=key,
                related_type=related_to.get("type") or "",
                related_id=str(related_to.get("id") or ""),
                related_name=related_to.get("name") or "",
            )
            ConversationParticipant.objects.bulk_create(
                [
                    ConversationParticipant(
                        conversation=conversation,
                        user_id=p["id"],
                        display_name=p["name"],
                        participant_type=p["type"],
                        avatar=p["avatar"],
                    )
                    for p in cleaned
                ]
            )
    except IntegrityError:
        # Lost a create race for the same participant set.
        return Conversation.objects.get(participant_key=key), False

    logger.info(
        "Conversation created",
        extra={"conversation_id": str(conversation.id), "participants": len(cleaned)},
    )
    return conversation, True


# ============================================================
# MESSAGES
# ============================================================


def _participant(conversation: Conversation, user) -> ConversationParticipant:
    participant = conversation.participants.filter(user=user).first()
    if participant is None:
        raise ChatPermissionError("You are not a participant of this conversation")
    return participant


def _clean_attachments(attachments) -> list:
    cleaned = []
    for a in attachments or []:
        if a.get("type") not in ("image", "document", "product") or not a.get("url"):
            raise InvalidMessageError("Attachments need a type (image/document/product) and a url")
        item = {"type": a["type"], "url": a["url"], "name": a.get("name") or ""}
        if a.get("size"):
            item["size"] = int(a["size"])
        cleaned.append(item)
    return cleaned


@transaction.atomic
def send_message(*, user, conversation: Conversation, text: str, attachments=None) -> Message:
    text = (text or "").strip()
    if not text:
        raise InvalidMessageError("Message text is required")

    sender = _participant(conversation, user)

    message = Message.objects.create(
        conversation=conversation,
        sender=user,
        sender_name=sender.display_name,
        sender_type=sender.participant_type,
        sender_avatar=sender.avatar,
        text=text,
        attachments=_clean_attachments(attachments),
    )

    ConversationParticipant.objects.filter(conversation=conversation).exclude(user=user).update(
        unread_count=F("unread_count") + 1
    )

    conversation.last_message_text = text
    conversation.last_message_sender = user
    conversation.last_message_at = message.created_at
    conversation.save(update_fields=["last_message_text", "last_message_sender", "last_message_at", "updated_at"])

    return message


def get_messages(*, user, conversation: Conversation, limit: int = DEFAULT_MESSAGE_LIMIT, before=None):
    """
    Newest first. `before` is a message id; only older messages are returned.
    """
    _participant(conversation, user)
    limit = max(1, min(int(limit or DEFAULT_MESSAGE_LIMIT), MAX_MESSAGE_LIMIT))

    qs = conversation.messages.order_by("-created_at", "-id")
    if before:
        anchor = conversation.messages.filter(id=before).first()
        if anchor is None:
            raise MessageNotFound("Cursor message not found")
        # id breaks ties between messages sharing a timestamp
        qs = qs.filter(
            Q(created_at__lt=anchor.created_at) | Q(created_at=anchor.created_at, id__lt=anchor.id)
        )

    return list(qs[:limit])


@transaction.atomic
def mark_as_read(*, user, conversation: Conversation) -> int:
    """Flags messages from others as read and resets the caller's unread count."""
    participant = _participant(conversation, user)

    updated = conversation.messages.filter(read=False).exclude(sender=user).update(read=True)
    participant.unread_count = 0
    participant.save(update_fields=["unread_count"])
    return updated


def total_unread(user) -> int:
    total = ConversationParticipant.objects.filter(user=user).aggregate(total=Sum("unread_count"))["total"]
    return int(total or 0)


def delete_message(*, user, conversation: Conversation, message_id):
    _participant(conversation, user)
    message = conversation.messages.filter(id=message_id).first()
    if message is None:
        raise MessageNotFound("Message not found")
    if message.sender_id != user.id:
        raise ChatPermissionError("Only the sender can delete a message")

    message.delete()
    logger.info(
        "Message deleted",
        extra={"conversation_id": str(conversation.id), "message_id": str(message_id)},
    )
