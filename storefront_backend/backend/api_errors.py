# backend/api_errors.py

"""
API ERROR NORMALIZATION

Every domain failure leaves the API with the same envelope:

    {"error": {"code": "EMPTY_CART", "message": "Cart is empty"}}

Validation errors keep DRF's default field -> messages shape.
"""

from rest_framework.response import Response


def error_response(*, code: str, message: str, http_status: int):
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )
