# chat/models/message.py

import uuid

from django.conf import settings
from django.db import models


class Message(models.Model):
    """
    Chat message. Sender name / type / avatar are snapshotted from the
    participant row at send time.

    attachments: [{"type": "image"|"document"|"product", "url", "name", "size"?}]
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    conversation = models.ForeignKey(
        "chat.Conversation",
        on_delete=models.CASCADE,
        related_name="messages",
    )
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="chat_messages",
    )

    sender_name = models.CharField(max_length=150)
    sender_type = models.CharField(max_length=20)
    sender_avatar = models.URLField(max_length=500, blank=True, default="")

    text = models.TextField()
    read = models.BooleanField(default=False)
    attachments = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.sender_name}: {self.text[:40]}"
