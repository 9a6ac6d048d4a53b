# chat/views/conversation.py

"""
CHAT VIEWS (polling)

    GET  conversations/                       newest activity first
    POST conversations/                       find-or-create by participant set
    GET  conversations/<id>/
    GET  conversations/<id>/messages/         ?limit=&before=
    POST conversations/<id>/messages/         send
    POST conversations/<id>/read/
    DELETE conversations/<id>/messages/<mid>/ sender only
    GET  unread/                              total unread count
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiTypes, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from chat.serializers import (
    ConversationCreateSerializer,
    ConversationSerializer,
    MessageQuerySerializer,
    MessageSerializer,
    SendMessageInputSerializer,
)
from chat.services import chat_service
from chat.services.exceptions import ChatError
from chat.views.errors import chat_error_response


class ConversationListCreateView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ConversationSerializer

    @extend_schema(responses={200: ConversationSerializer(many=True)})
    def get(self, request):
        conversations = chat_service.list_conversations(request.user)
        return Response(ConversationSerializer(conversations, many=True, context={"request": request}).data)

    @extend_schema(
        request=ConversationCreateSerializer,
        responses={200: ConversationSerializer, 201: ConversationSerializer},
        description="Returns the existing conversation for this participant set, or creates it",
    )
    def post(self, request):
        serializer = ConversationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            conversation, created = chat_service.find_or_create_conversation(
                user=request.user,
                participants=data["participants"],
                related_to=data.get("related_to"),
            )
        except ChatError as exc:
            return chat_error_response(exc)

        return Response(
            ConversationSerializer(conversation, context={"request": request}).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class ConversationDetailView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ConversationSerializer

    @extend_schema(responses={200: ConversationSerializer})
    def get(self, request, conversation_id):
        try:
            conversation = chat_service.get_conversation(user=request.user, conversation_id=conversation_id)
        except ChatError as exc:
            return chat_error_response(exc)

        return Response(ConversationSerializer(conversation, context={"request": request}).data)


class MessageListCreateView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = MessageSerializer

    @extend_schema(
        parameters=[
            OpenApiParameter("limit", int, required=False),
            OpenApiParameter("before", str, required=False, description="Message id; older messages only"),
        ],
        responses={200: MessageSerializer(many=True)},
    )
    def get(self, request, conversation_id):
        query = MessageQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        try:
            conversation = chat_service.get_conversation(user=request.user, conversation_id=conversation_id)
            messages = chat_service.get_messages(
                user=request.user,
                conversation=conversation,
                limit=query.validated_data["limit"],
                before=query.validated_data.get("before"),
            )
        except ChatError as exc:
            return chat_error_response(exc)

        return Response(MessageSerializer(messages, many=True).data)

    @extend_schema(request=SendMessageInputSerializer, responses={201: MessageSerializer})
    def post(self, request, conversation_id):
        serializer = SendMessageInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            conversation = chat_service.get_conversation(user=request.user, conversation_id=conversation_id)
            message = chat_service.send_message(
                user=request.user,
                conversation=conversation,
                text=serializer.validated_data["text"],
                attachments=serializer.validated_data.get("attachments"),
            )
        except ChatError as exc:
            return chat_error_response(exc)

        return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)


class MessageDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={204: None})
    def delete(self, request, conversation_id, message_id):
        try:
            conversation = chat_service.get_conversation(user=request.user, conversation_id=conversation_id)
            chat_service.delete_message(user=request.user, conversation=conversation, message_id=message_id)
        except ChatError as exc:
            return chat_error_response(exc)

        return Response(status=status.HTTP_204_NO_CONTENT)


class MarkReadView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: OpenApiTypes.OBJECT})
    def post(self, request, conversation_id):
        try:
            conversation = chat_service.get_conversation(user=request.user, conversation_id=conversation_id)
            marked = chat_service.mark_as_read(user=request.user, conversation=conversation)
        except ChatError as exc:
            return chat_error_response(exc)

        return Response({"marked": marked, "unread_count": 0})


class UnreadCountView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        return Response({"unread_count": chat_service.total_unread(request.user)})
