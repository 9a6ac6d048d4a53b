# wishlist/views/__init__.py

"""
WISHLIST API

GET    /api/wishlist/                      items newest first (+ count)
DELETE /api/wishlist/                      clear
GET    /api/wishlist/<product_id>/         status
PUT    /api/wishlist/<product_id>/         add (idempotent)
DELETE /api/wishlist/<product_id>/         remove
"""

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from products.models import Product
from wishlist.serializers import WishlistItemSerializer, WishlistStatusSerializer
from wishlist.services import wishlist_service


class WishlistView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = WishlistItemSerializer

    @extend_schema(responses={200: WishlistItemSerializer(many=True)})
    def get(self, request):
        items = wishlist_service.get_wishlist(user=request.user)
        data = WishlistItemSerializer(items, many=True).data
        return Response({"count": len(data), "results": data})

    @extend_schema(responses={204: None}, description="Remove every wishlist item")
    def delete(self, request):
        wishlist_service.clear_wishlist(user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)


class WishlistItemView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = WishlistStatusSerializer

    @extend_schema(responses={200: WishlistStatusSerializer})
    def get(self, request, product_id):
        in_wishlist = wishlist_service.is_in_wishlist(user=request.user, product_id=product_id)
        return Response({"product_id": product_id, "in_wishlist": in_wishlist})

    @extend_schema(request=None, responses={200: WishlistItemSerializer})
    def put(self, request, product_id):
        product = get_object_or_404(Product, id=product_id)
        item = wishlist_service.add_to_wishlist(user=request.user, product=product)
        return Response(WishlistItemSerializer(item).data, status=status.HTTP_200_OK)

    @extend_schema(responses={204: None})
    def delete(self, request, product_id):
        wishlist_service.remove_from_wishlist(user=request.user, product_id=product_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


__all__ = ["WishlistView", "WishlistItemView"]
