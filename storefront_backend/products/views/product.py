# products/views/product.py

"""
PRODUCT VIEWSET

Public (AllowAny, throttled):
- list / retrieve, filterable by ?category= ?owner= ?status= ?brand=
- mine (GET, authenticated) : caller's own listings
- featured / popular / related
- view (POST) : atomic view counter
- reviews (GET)

Sellers (owner or admin):
- create / update / delete

Buyers:
- reviews (POST) : submit or edit own review
"""

import uuid

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiParameter, OpenApiTypes, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle

from backend.api_errors import error_response
from products.models import Product
from products.serializers import (
    ProductSerializer,
    ReviewSerializer,
    SubmitReviewInputSerializer,
)
from products.services import catalog_service, review_service
from products.services.exceptions import (
    ProductNotFound,
    ProductPermissionError,
    ReviewError,
)
from users.permissions import IsSellerOrAdmin


class PublicCatalogThrottle(AnonRateThrottle):
    scope = "public_catalog"


def _limit_param(request, default: int) -> int:
    raw = (request.query_params.get("limit") or "").strip()
    try:
        value = int(raw) if raw else default
    except ValueError:
        value = default
    return max(1, min(value, 50))


class ProductViewSet(viewsets.ModelViewSet):
    serializer_class = ProductSerializer
    filterset_fields = ["category_name", "status", "brand"]

    def get_queryset(self):
        params = self.request.query_params
        if params.get("category"):
            return catalog_service.products_by_category(params["category"])
        if params.get("owner"):
            try:
                owner_id = uuid.UUID(params["owner"])
            except ValueError:
                return Product.objects.none()
            return catalog_service.products_by_owner(owner_id)
        return catalog_service.list_products()

    def get_permissions(self):
        if self.action in {"create", "update", "partial_update", "destroy"}:
            return [IsAuthenticated(), IsSellerOrAdmin()]
        if self.action == "mine" or (self.action == "reviews" and self.request.method == "POST"):
            return [IsAuthenticated()]
        return [AllowAny()]

    def get_throttles(self):
        if self.request.method == "GET":
            return [PublicCatalogThrottle()]
        return super().get_throttles()

    # -----------------------------
    # Writes go through the service (owner checks)
    # -----------------------------
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        product = catalog_service.add_product(owner=request.user, data=serializer.validated_data)
        return Response(self.get_serializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        product = self.get_object()

        serializer = self.get_serializer(product, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            product = catalog_service.update_product(
                user=request.user,
                product=product,
                data=serializer.validated_data,
            )
        except ProductPermissionError as exc:
            return error_response(
                code="NOT_PRODUCT_OWNER",
                message=str(exc),
                http_status=status.HTTP_403_FORBIDDEN,
            )

        return Response(self.get_serializer(product).data)

    def destroy(self, request, *args, **kwargs):
        product = self.get_object()

        try:
            catalog_service.delete_product(user=request.user, product=product)
        except ProductPermissionError as exc:
            return error_response(
                code="NOT_PRODUCT_OWNER",
                message=str(exc),
                http_status=status.HTTP_403_FORBIDDEN,
            )

        return Response(status=status.HTTP_204_NO_CONTENT)

    # -----------------------------
    # Storefront read models
    # -----------------------------
    @extend_schema(
        parameters=[OpenApiParameter("limit", int, required=False)],
        responses={200: ProductSerializer(many=True)},
        description="Most recently listed products",
    )
    @action(detail=False, methods=["get"])
    def featured(self, request):
        products = catalog_service.featured_products(limit=_limit_param(request, 10))
        return Response(self.get_serializer(products, many=True).data)

    @extend_schema(responses={200: ProductSerializer(many=True)}, description="The caller's own listings")
    @action(detail=False, methods=["get"], permission_classes=[IsAuthenticated])
    def mine(self, request):
        page = self.paginate_queryset(catalog_service.products_by_owner(request.user.id).order_by("-created_at"))
        return self.get_paginated_response(self.get_serializer(page, many=True).data)

    @extend_schema(
        parameters=[OpenApiParameter("limit", int, required=False)],
        responses={200: ProductSerializer(many=True)},
        description="Products ordered by view count",
    )
    @action(detail=False, methods=["get"])
    def popular(self, request):
        products = catalog_service.popular_products(limit=_limit_param(request, 10))
        return Response(self.get_serializer(products, many=True).data)

    @extend_schema(
        parameters=[OpenApiParameter("limit", int, required=False)],
        responses={200: ProductSerializer(many=True)},
        description="Shuffled products from the same category",
    )
    @action(detail=True, methods=["get"])
    def related(self, request, pk=None):
        product = self.get_object()
        products = catalog_service.related_products(product, limit=_limit_param(request, 5))
        return Response(self.get_serializer(products, many=True).data)

    @extend_schema(request=None, responses={200: OpenApiTypes.OBJECT}, description="Increment the view counter")
    @action(detail=True, methods=["post"], url_path="view")
    def record_view(self, request, pk=None):
        try:
            view_count = catalog_service.increment_view_count(pk)
        except ProductNotFound as exc:
            return error_response(
                code="PRODUCT_NOT_FOUND",
                message=str(exc),
                http_status=status.HTTP_404_NOT_FOUND,
            )
        return Response({"id": pk, "view_count": view_count})

    # -----------------------------
    # Reviews
    # -----------------------------
    @extend_schema(
        methods=["GET"],
        responses={200: ReviewSerializer(many=True)},
        description="Reviews for a product, newest first",
    )
    @extend_schema(
        methods=["POST"],
        request=SubmitReviewInputSerializer,
        responses={200: ReviewSerializer},
        description="Submit a review, or edit your existing one",
    )
    @action(detail=True, methods=["get", "post"])
    def reviews(self, request, pk=None):
        product = get_object_or_404(Product, id=pk)

        if request.method == "GET":
            reviews = review_service.get_reviews(product)
            return Response(ReviewSerializer(reviews, many=True).data)

        serializer = SubmitReviewInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            review = review_service.submit_review(
                user=request.user,
                product=product,
                rating=serializer.validated_data["rating"],
                text=serializer.validated_data["text"],
            )
        except ReviewError as exc:
            return error_response(
                code="INVALID_REVIEW",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        return Response(ReviewSerializer(review).data, status=status.HTTP_200_OK)
