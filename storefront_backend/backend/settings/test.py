# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS

- in-memory SQLite
- fast password hashing
- throttles effectively disabled (shared LocMem cache across test cases)
- dummy gateway credentials (HTTP is always mocked in tests)
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import PAYMENTS, REST_FRAMEWORK, SHIPPING

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {
    scope: "10000/min" for scope in REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"]
}

PAYMENTS["RAZORPAY"] = {
    "KEY_ID": "rzp_test_key",
    "KEY_SECRET": "rzp_test_secret",
    "WEBHOOK_SECRET": "rzp_webhook_secret",
}

SHIPPING["BIGSHIP"] = {
    "BASE_URL": "https://api.bigship.in/",
    "USERNAME": "seller@example.com",
    "PASSWORD": "bigship-pass",
    "ACCESS_KEY": "bigship-access-key",
}
SHIPPING["PICKUP_PINCODE"] = "110001"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {"null": {"class": "logging.NullHandler"}},
    "root": {"handlers": ["null"], "level": "WARNING"},
}
