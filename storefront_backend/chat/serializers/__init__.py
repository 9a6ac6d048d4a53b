# chat/serializers/__init__.py

from rest_framework import serializers

from chat.models import Conversation, ConversationParticipant, Message
from chat.services.chat_service import DEFAULT_MESSAGE_LIMIT, MAX_MESSAGE_LIMIT
from users.services import profile_service


class ParticipantSerializer(serializers.ModelSerializer):
    id = serializers.UUIDField(source="user_id", read_only=True)
    name = serializers.CharField(source="display_name", read_only=True)
    type = serializers.CharField(source="participant_type", read_only=True)

    class Meta:
        model = ConversationParticipant
        fields = ["id", "name", "type", "avatar", "unread_count"]
        read_only_fields = fields


class ConversationSerializer(serializers.ModelSerializer):
    participants = ParticipantSerializer(many=True, read_only=True)
    other_participant = serializers.SerializerMethodField()
    related_to = serializers.SerializerMethodField()
    last_message = serializers.SerializerMethodField()
    unread_count = serializers.SerializerMethodField()

    class Meta:
        model = Conversation
        fields = [
            "id",
            "participants",
            "other_participant",
            "related_to",
            "last_message",
            "unread_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_other_participant(self, obj):
        """The counterpart shown in the inbox row for the requesting user."""
        request = self.context.get("request")
        participants = ParticipantSerializer(obj.participants.all(), many=True).data
        current_user_id = request.user.id if request is not None else None
        return profile_service.get_other_participant(participants, current_user_id)

    def get_related_to(self, obj):
        if not obj.related_type:
            return None
        return {"type": obj.related_type, "id": obj.related_id, "name": obj.related_name}

    def get_last_message(self, obj):
        if obj.last_message_at is None:
            return None
        return {
            "text": obj.last_message_text,
            "sender_id": str(obj.last_message_sender_id) if obj.last_message_sender_id else None,
            "created_at": obj.last_message_at,
        }

    def get_unread_count(self, obj):
        request = self.context.get("request")
        if request is None:
            return 0
        for p in obj.participants.all():
            if p.user_id == request.user.id:
                return p.unread_count
        return 0


class MessageSerializer(serializers.ModelSerializer):
    sender_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Message
        fields = [
            "id",
            "sender_id",
            "sender_name",
            "sender_type",
            "sender_avatar",
            "text",
            "read",
            "attachments",
            "created_at",
        ]
        read_only_fields = fields


# ---------------- INPUT ----------------
class ParticipantInputSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField(max_length=150)
    type = serializers.ChoiceField(choices=ConversationParticipant.TYPE_CHOICES)
    avatar = serializers.URLField(required=False, allow_blank=True)


class RelatedToInputSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=Conversation.RELATED_CHOICES)
    id = serializers.CharField(max_length=64, required=False, allow_blank=True)
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)


class ConversationCreateSerializer(serializers.Serializer):
    participants = ParticipantInputSerializer(many=True)
    related_to = RelatedToInputSerializer(required=False)


class AttachmentInputSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=["image", "document", "product"])
    url = serializers.URLField(max_length=500)
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    size = serializers.IntegerField(min_value=0, required=False)


class SendMessageInputSerializer(serializers.Serializer):
    text = serializers.CharField()
    attachments = AttachmentInputSerializer(many=True, required=False)


class MessageQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=MAX_MESSAGE_LIMIT, default=DEFAULT_MESSAGE_LIMIT)
    before = serializers.UUIDField(required=False)
