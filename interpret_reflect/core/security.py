"""
User-id pseudonymisation.

Scoring tables (capacity snapshots, outcomes) never store the raw user id,
only sha256(user_id + USER_HASH_SALT) as lowercase hex.
"""
from __future__ import annotations

import hashlib
from typing import Optional

from interpret_reflect.core.config import settings


def hash_user_id(user_id: str, salt: Optional[str] = None) -> str:
    salt = settings.USER_HASH_SALT if salt is None else salt
    return hashlib.sha256(f"{user_id}{salt}".encode("utf-8")).hexdigest()
