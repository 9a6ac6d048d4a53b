# users/views/addresses.py

"""
Saved shipping addresses (owner-scoped).

Default rule:
- Marking an address default clears the previous default in the same transaction.
"""

from django.db import transaction
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from users.models import Address
from users.serializers import AddressSerializer


class AddressViewSet(viewsets.ModelViewSet):
    serializer_class = AddressSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None

    def get_queryset(self):
        return Address.objects.filter(user=self.request.user)

    def _clear_other_defaults(self, keep_id=None):
        qs = Address.objects.filter(user=self.request.user, is_default=True)
        if keep_id is not None:
            qs = qs.exclude(id=keep_id)
        qs.update(is_default=False)

    @transaction.atomic
    def perform_create(self, serializer):
        if serializer.validated_data.get("is_default"):
            self._clear_other_defaults()
        serializer.save(user=self.request.user)

    @transaction.atomic
    def perform_update(self, serializer):
        if serializer.validated_data.get("is_default"):
            self._clear_other_defaults(keep_id=serializer.instance.id)
        serializer.save()
