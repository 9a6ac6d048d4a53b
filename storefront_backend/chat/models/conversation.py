# chat/models/conversation.py

import uuid

from django.conf import settings
from django.db import models


class Conversation(models.Model):
    """
    One thread between a fixed set of users.

    participant_key is the sorted, comma-joined participant ids; the same
    participant set always resolves to the same conversation.
    """

    RELATED_ORDER = "order"
    RELATED_PRODUCT = "product"
    RELATED_GENERAL = "general"

    RELATED_CHOICES = [
        (RELATED_ORDER, "Order"),
        (RELATED_PRODUCT, "Product"),
        (RELATED_GENERAL, "General"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    participant_key = models.CharField(max_length=512, unique=True)

    related_type = models.CharField(max_length=20, choices=RELATED_CHOICES, blank=True, default="")
    related_id = models.CharField(max_length=64, blank=True, default="")
    related_name = models.CharField(max_length=255, blank=True, default="")

    last_message_text = models.TextField(blank=True, default="")
    last_message_sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    last_message_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True, db_index=True)

    class Meta:
        ordering = ["-updated_at"]

    @staticmethod
    def build_participant_key(user_ids) -> str:
        return ",".join(sorted({str(uid) for uid in user_ids}))

    def __str__(self):
        return f"Conversation {self.id} ({self.participant_key})"


class ConversationParticipant(models.Model):
    TYPE_BUYER = "buyer"
    TYPE_SELLER = "seller"
    TYPE_ADMIN = "admin"

    TYPE_CHOICES = [
        (TYPE_BUYER, "Buyer"),
        (TYPE_SELLER, "Seller"),
        (TYPE_ADMIN, "Admin"),
    ]

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="participants",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="chat_participations",
    )

    display_name = models.CharField(max_length=150)
    participant_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    avatar = models.URLField(max_length=500, blank=True, default="")

    unread_count = models.PositiveIntegerField(default=0)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["conversation", "user"],
                name="unique_participant_per_conversation",
            )
        ]

    def __str__(self):
        return f"{self.display_name} in {self.conversation_id}"
