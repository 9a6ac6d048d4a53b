# shipping/services/bigship.py

"""
BIGSHIP CLIENT (shipping-rate aggregator)

Transport:
- JSON over HTTPS with urllib (no SDK)
- base URL + credentials from settings.SHIPPING["BIGSHIP"]

Auth:
- bearer token from api/login/user, valid 12 hours
- refreshed when missing or within 5 minutes of expiry
- one transparent retry after a 401 with a fresh token
- the token lives in the Django cache so every worker shares it

Envelope:
    {"data": ..., "success": bool, "message": str, "responseCode": int}
success=false raises BigShipError with the aggregator's message.
"""

from __future__ import annotations

import json
import logging
import re
import time
from typing import Any, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode, urljoin
from urllib.request import Request, urlopen

from django.conf import settings
from django.core.cache import cache

from shipping.services.estimator import SHIPMENT_B2B, ensure_product_details
from shipping.services.exceptions import (
    BigShipAuthError,
    BigShipError,
    BigShipRateLimited,
    ShippingConfigError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.bigship.in/"
TOKEN_CACHE_KEY = "shipping:bigship:token"
TOKEN_TTL_SECONDS = 12 * 60 * 60
TOKEN_REFRESH_MARGIN_SECONDS = 5 * 60
REQUEST_TIMEOUT_SECONDS = 25

SHIPMENT_DATA_AWB = 1
SHIPMENT_DATA_LABEL = 2
SHIPMENT_DATA_MANIFEST = 3
SHIPMENT_DATA_TYPES = {SHIPMENT_DATA_AWB, SHIPMENT_DATA_LABEL, SHIPMENT_DATA_MANIFEST}

TRACKING_TYPES = {"lrn", "awb"}

SYSTEM_ORDER_ID_RE = re.compile(r"Order ID: (\d+)")


# ============================================================
# CONFIG
# ============================================================


def _bigship_cfg() -> dict:
    shipping = getattr(settings, "SHIPPING", {}) or {}
    cfg = shipping.get("BIGSHIP") if isinstance(shipping, dict) else None
    return cfg if isinstance(cfg, dict) else {}


def _base_url() -> str:
    base = (_bigship_cfg().get("BASE_URL") or DEFAULT_BASE_URL).strip()
    return base if base.endswith("/") else base + "/"


def _credentials() -> dict:
    cfg = _bigship_cfg()
    creds = {
        "user_name": (cfg.get("USERNAME") or "").strip(),
        "password": (cfg.get("PASSWORD") or "").strip(),
        "access_key": (cfg.get("ACCESS_KEY") or "").strip(),
    }
    missing = [k for k, v in creds.items() if not v]
    if missing:
        raise ShippingConfigError(
            "BigShip credentials are not configured "
            f"(missing: {', '.join(missing)}). Set BIGSHIP_USERNAME, BIGSHIP_PASSWORD, BIGSHIP_ACCESS_KEY."
        )
    return creds


def _now() -> float:
    return time.time()


# ============================================================
# TRANSPORT
# ============================================================


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


def _send(
    method: str,
    path: str,
    *,
    body: Any = None,
    token: Optional[str] = None,
    timeout: int = REQUEST_TIMEOUT_SECONDS,
) -> dict:
    """
    One HTTP round trip. Returns the decoded JSON envelope.

    Raises:
    - BigShipAuthError on 401
    - BigShipRateLimited on 429
    - BigShipError on any other transport / decoding failure
    """
    url = urljoin(_base_url(), path)

    data = None
    if body is not None:
        data = json.dumps(body, ensure_ascii=False).encode("utf-8")

    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"

    req = Request(url, data=data, headers=headers, method=method)

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
            message = str(parsed.get("message") or "")
        message = message or _safe_preview(raw) or str(e.reason)

        if e.code == 401:
            raise BigShipAuthError(f"BigShip HTTPError: 401 {message}", status_code=401) from e
        if e.code == 429:
            logger.warning("BigShip rate limit exceeded", extra={"path": path, "status_code": 429})
            raise BigShipRateLimited(
                "BigShip rate limit exceeded. Please wait before making more requests.",
                status_code=429,
            ) from e

        logger.warning("BigShip request failed", extra={"path": path, "status_code": e.code})
        raise BigShipError(f"BigShip HTTPError: {e.code} {message}", status_code=e.code) from e
    except URLError as e:
        logger.error("BigShip unreachable", extra={"path": path})
        raise BigShipError(f"BigShip URLError: {e.reason}") from e

    parsed = _parse_json(raw)
    if not isinstance(parsed, dict):
        raise BigShipError(f"BigShip returned non-JSON: {_safe_preview(raw)}")

    return parsed


# ============================================================
# TOKEN
# ============================================================


def clear_token() -> None:
    cache.delete(TOKEN_CACHE_KEY)


def _cached_token() -> Optional[str]:
    entry = cache.get(TOKEN_CACHE_KEY)
    if not isinstance(entry, dict):
        return None

    token = entry.get("token")
    expires_at = float(entry.get("expires_at") or 0)
    if not token or _now() + TOKEN_REFRESH_MARGIN_SECONDS >= expires_at:
        return None

    return token


def login() -> str:
    """Always fetches a fresh token and caches it for 12 hours."""
    envelope = _send("POST", "api/login/user", body=_credentials())

    data = envelope.get("data") or {}
    token = data.get("token") if isinstance(data, dict) else None
    if not envelope.get("success") or not token:
        raise BigShipError(f"Failed to get token: {envelope.get('message') or 'no token returned'}")

    cache.set(
        TOKEN_CACHE_KEY,
        {"token": token, "expires_at": _now() + TOKEN_TTL_SECONDS},
        timeout=TOKEN_TTL_SECONDS,
    )
    logger.info("BigShip token refreshed")
    return token


def get_token() -> str:
    return _cached_token() or login()


def _request(method: str, path: str, *, params: Optional[dict] = None, body: Any = None) -> dict:
    if params:
        query = urlencode({k: v for k, v in params.items() if v is not None})
        path = f"{path}?{query}"

    try:
        return _send(method, path, body=body, token=get_token())
    except BigShipAuthError:
        logger.info("BigShip token rejected; retrying once", extra={"path": path})
        clear_token()
        return _send(method, path, body=body, token=login())


def _unwrap(envelope: dict, *, default=None):
    if not envelope.get("success"):
        raise BigShipError(
            envelope.get("message") or "BigShip request was not successful",
            status_code=envelope.get("responseCode"),
        )
    data = envelope.get("data")
    return default if data is None else data


def parse_system_order_id(text: str) -> Optional[int]:
    """'Order Created Successfully, Order ID: 12345' -> 12345"""
    match = SYSTEM_ORDER_ID_RE.search(text or "")
    return int(match.group(1)) if match else None


# ============================================================
# ACCOUNT
# ============================================================


def get_payment_categories(shipment_category: str) -> list:
    envelope = _request("GET", "api/payment/category", params={"shipment_category": shipment_category})
    return _unwrap(envelope, default=[])


def get_courier_list(shipment_category: str) -> list:
    envelope = _request("GET", "api/courier/get/all", params={"shipment_category": shipment_category})
    return _unwrap(envelope, default=[])


def get_wallet_balance() -> str:
    envelope = _request("GET", "api/Wallet/balance/get")
    return str(_unwrap(envelope, default="0"))


# ============================================================
# WAREHOUSES
# ============================================================


def add_warehouse(warehouse: dict) -> dict:
    envelope = _request("POST", "api/warehouse/add", body=warehouse)
    return _unwrap(envelope, default={})


def get_warehouse_list(page_index: int = 1, page_size: int = 10) -> dict:
    envelope = _request(
        "GET",
        "api/warehouse/get/list",
        params={"page_index": page_index, "page_size": page_size},
    )
    return _unwrap(envelope, default={"result_count": 0, "result_data": []})


# ============================================================
# ORDERS
# ============================================================


def add_single_order(order: dict) -> str:
    envelope = _request("POST", "api/order/add/single", body=order)
    return str(_unwrap(envelope, default=""))


def manifest_single_order(system_order_id: int, courier_id: Optional[int] = None) -> None:
    body = {"system_order_id": int(system_order_id)}
    if courier_id:
        body["courier_id"] = int(courier_id)
    _unwrap(_request("POST", "api/order/manifest/single", body=body))


def add_heavy_order(order: dict) -> str:
    envelope = _request("POST", "api/order/add/heavy", body=order)
    return str(_unwrap(envelope, default=""))


def manifest_heavy_order(system_order_id: int, courier_id: int, risk_type: Optional[str] = None) -> None:
    body = {"system_order_id": int(system_order_id), "courier_id": int(courier_id)}
    if risk_type:
        body["risk_type"] = risk_type
    _unwrap(_request("POST", "api/order/manifest/heavy", body=body))


def get_shipping_rates(shipment_category: str, system_order_id: int, risk_type: Optional[str] = None) -> list:
    params = {"shipment_category": shipment_category, "system_order_id": int(system_order_id)}
    if shipment_category == SHIPMENT_B2B and risk_type:
        params["risk_type"] = risk_type

    envelope = _request("GET", "api/order/shipping/rates", params=params)
    return _unwrap(envelope, default=[])


def calculate_rates(rate_request: dict) -> list:
    payload = dict(rate_request)
    payload["box_details"] = ensure_product_details(payload.get("box_details") or [])

    envelope = _request("POST", "api/calculator", body=payload)
    return _unwrap(envelope, default=[])


def get_shipment_data(shipment_data_id: int, system_order_id: int):
    if shipment_data_id not in SHIPMENT_DATA_TYPES:
        raise ValueError("shipment_data_id must be 1 (AWB), 2 (label) or 3 (manifest)")

    envelope = _request(
        "POST",
        "api/shipment/data",
        params={"shipment_data_id": shipment_data_id, "system_order_id": int(system_order_id)},
    )
    return _unwrap(envelope)


def cancel_awbs(awbs: list) -> list:
    envelope = _request("PUT", "api/order/cancel", body=[str(a) for a in awbs])
    return _unwrap(envelope, default=[])


def get_tracking(tracking_type: str, tracking_id: str) -> dict:
    if tracking_type not in TRACKING_TYPES:
        raise ValueError("tracking_type must be 'lrn' or 'awb'")

    envelope = _request(
        "GET",
        "api/tracking",
        params={"tracking_type": tracking_type, "tracking_id": tracking_id},
    )

    # Tracking answers success=false with responseCode 200 for in-flight shipments.
    if not envelope.get("success") and envelope.get("responseCode") != 200:
        raise BigShipError(envelope.get("message") or "Tracking lookup failed")

    return envelope.get("data") or {}
