# chat/admin.py

from django.contrib import admin

from chat.models import Conversation, ConversationParticipant, Message


class ParticipantInline(admin.TabularInline):
    model = ConversationParticipant
    extra = 0


@admin.register(Conversation)
class ConversationAdmin(admin.ModelAdmin):
    list_display = ("id", "related_type", "related_name", "last_message_at", "updated_at")
    list_filter = ("related_type",)
    search_fields = ("participant_key", "related_name")
    inlines = [ParticipantInline]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ("conversation", "sender_name", "sender_type", "read", "created_at")
    list_filter = ("read", "sender_type")
    search_fields = ("text", "sender__email")
