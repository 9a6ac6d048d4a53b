# payments/services/razorpay.py

"""
RAZORPAY CLIENT

Transport:
- JSON over HTTPS with urllib, HTTP basic auth (key id / key secret)
- amounts are integers in paise

Signatures:
- checkout: HMAC-SHA256("{order_id}|{payment_id}", key_secret)
- webhook : HMAC-SHA256(raw_body, webhook_secret)
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from django.conf import settings

from payments.services.exceptions import RazorpayConfigError, RazorpayError

logger = logging.getLogger(__name__)

RAZORPAY_BASE = "https://api.razorpay.com/v1"
REQUEST_TIMEOUT_SECONDS = 25


def _razorpay_cfg() -> dict:
    payments = getattr(settings, "PAYMENTS", {}) or {}
    cfg = payments.get("RAZORPAY") if isinstance(payments, dict) else None
    return cfg if isinstance(cfg, dict) else {}


def get_key_id() -> str:
    key_id = (_razorpay_cfg().get("KEY_ID") or "").strip()
    if not key_id:
        raise RazorpayConfigError("RAZORPAY_KEY_ID is not configured")
    return key_id


def _get_key_secret() -> str:
    secret = (_razorpay_cfg().get("KEY_SECRET") or "").strip()
    if not secret:
        raise RazorpayConfigError("RAZORPAY_KEY_SECRET is not configured")
    return secret


def _get_webhook_secret() -> str:
    secret = (_razorpay_cfg().get("WEBHOOK_SECRET") or "").strip()
    if not secret:
        raise RazorpayConfigError("RAZORPAY_WEBHOOK_SECRET is not configured")
    return secret


def to_paise(amount) -> int:
    try:
        rupees = Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValueError("amount must be a valid Decimal") from exc
    paise = (rupees * Decimal("100")).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(paise)


def _safe_preview(text: str, limit: int = 500) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + " ...(truncated)"


def _parse_json(raw: str) -> Optional[Any]:
    try:
        return json.loads(raw or "")
    except ValueError:
        return None


def _request_json(method: str, path: str, *, body: dict | None = None, timeout: int = REQUEST_TIMEOUT_SECONDS) -> dict:
    credentials = f"{get_key_id()}:{_get_key_secret()}".encode("utf-8")
    data = None
    if body is not None:
        data = json.dumps(body, ensure_ascii=False).encode("utf-8")

    req = Request(
        f"{RAZORPAY_BASE}/{path.lstrip('/')}",
        data=data,
        headers={
            "Authorization": "Basic " + base64.b64encode(credentials).decode("ascii"),
            "Content-Type": "application/json",
            "Accept": "application/json",
        },
        method=method,
    )

    try:
        with urlopen(req, timeout=timeout) as resp:
            raw = resp.read().decode("utf-8", errors="replace")
    except HTTPError as e:
        try:
            raw = e.read().decode("utf-8", errors="replace")
        except OSError:
            raw = ""

        parsed = _parse_json(raw)
        message = ""
        if isinstance(parsed, dict):
            error = parsed.get("error") or {}
            message = str(error.get("description") or "") if isinstance(error, dict) else str(error)
        message = message or _safe_preview(raw) or str(e.reason)

        logger.warning("Razorpay request failed", extra={"path": path, "status_code": e.code})
        raise RazorpayError(f"Razorpay HTTPError: {e.code} {message}", status_code=e.code) from e
    except URLError as e:
        logger.error("Razorpay unreachable", extra={"path": path})
        raise RazorpayError(f"Razorpay URLError: {e.reason}") from e

    parsed = _parse_json(raw)
    if not isinstance(parsed, dict):
        raise RazorpayError(f"Razorpay returned non-JSON: {_safe_preview(raw)}")
    return parsed


def create_order(*, amount, currency: str, receipt: str, notes: dict | None = None) -> dict:
    """POST /v1/orders. Returns the gateway order ({id, amount, currency, status, ...})."""
    payload = {
        "amount": to_paise(amount),
        "currency": currency,
        "receipt": str(receipt)[:40],
        "notes": notes or {},
    }
    order = _request_json("POST", "orders", body=payload)
    if not order.get("id"):
        raise RazorpayError("Razorpay did not return an order id")
    return order


def fetch_payment(payment_id: str) -> dict:
    return _request_json("GET", f"payments/{payment_id}")


def _hmac_sha256(secret: str, message: bytes) -> str:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_payment_signature(*, order_id: str, payment_id: str, signature: str | None) -> bool:
    if not (order_id and payment_id and signature):
        return False
    expected = _hmac_sha256(_get_key_secret(), f"{order_id}|{payment_id}".encode("utf-8"))
    return hmac.compare_digest(expected, str(signature).strip())


def verify_webhook_signature(*, raw_body: bytes, signature: str | None) -> bool:
    if not signature:
        return False
    expected = _hmac_sha256(_get_webhook_secret(), raw_body or b"")
    return hmac.compare_digest(expected, str(signature).strip())
