# users/services/profile_service.py

"""
USER PROFILE LOOKUPS

Public profile shape (what chat, bids and reviews render):

    {"id", "name", "email", "avatar", "type"}

Caching:
- Only hits are cached (unknown ids are looked up again next time).
- Keys carry a generation number so "clear all" is one cache write.
"""

from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

CACHE_PREFIX = "users:profile"
GENERATION_KEY = f"{CACHE_PREFIX}:generation"


def _cache_key(user_id) -> str:
    generation = cache.get(GENERATION_KEY, 0)
    return f"{CACHE_PREFIX}:{generation}:{user_id}"


def profile_from_user(user) -> dict:
    return {
        "id": str(user.id),
        "name": user.public_name,
        "email": user.email,
        "avatar": user.avatar_url or "",
        "type": user.role,
    }


def get_user_profile(user_id) -> Optional[dict]:
    if not user_id:
        return None

    User = get_user_model()
    try:
        user = User.objects.filter(id=user_id).first()
    except (ValueError, ValidationError):
        # Malformed id: same outcome as an unknown user.
        return None

    if user is None:
        return None

    return profile_from_user(user)


def get_user_profile_cached(user_id) -> Optional[dict]:
    key = _cache_key(user_id)

    profile = cache.get(key)
    if profile is not None:
        return profile

    profile = get_user_profile(user_id)
    if profile is not None:
        cache.set(key, profile, timeout=settings.USER_PROFILE_CACHE_SECONDS)

    return profile


def clear_user_profile_cache(user_id=None) -> None:
    if user_id:
        cache.delete(_cache_key(user_id))
        return

    try:
        cache.incr(GENERATION_KEY)
    except ValueError:
        cache.set(GENERATION_KEY, 1, timeout=None)

    logger.info("User profile cache cleared")


def get_other_participant(participants, current_user_id=None):
    """
    The participant that is not ``current_user_id``.

    Falls back to the first participant when the current user is unknown
    or is the only entry; ``None`` for an empty list.
    """
    if not participants:
        return None

    if not current_user_id:
        return participants[0]

    current = str(current_user_id)
    for participant in participants:
        if str(participant.get("id")) != current:
            return participant

    return participants[0]
