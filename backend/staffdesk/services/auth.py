"""
Password hashing and signed session tokens.

Token format: "<user_id>.<exp>.<signature>" where signature is an HMAC-SHA256
over "<user_id>.<exp>" keyed by AUTH_SECRET.
"""

import hashlib
import hmac
import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from staffdesk import config

logger = logging.getLogger(__name__)

PBKDF2_ROUNDS = 100_000


def hash_password(password: str) -> str:
    salt = secrets.token_hex(16)
    h = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), PBKDF2_ROUNDS)
    return f"{salt}${h.hex()}"


def verify_password(password: str, stored: str) -> bool:
    if not stored or "$" not in stored:
        return False
    salt, h = stored.split("$", 1)
    expected = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), PBKDF2_ROUNDS)
    return hmac.compare_digest(expected.hex(), h)


def _sign(payload: str) -> str:
    return hmac.new(config.AUTH_SECRET.encode(), payload.encode(), "sha256").hexdigest()[:32]


def create_access_token(user_id: uuid.UUID, expires_delta: Optional[timedelta] = None) -> str:
    expires_delta = expires_delta or timedelta(hours=config.TOKEN_EXPIRY_HOURS)
    exp = int((datetime.now(timezone.utc) + expires_delta).timestamp())
    payload = f"{user_id}.{exp}"
    return f"{payload}.{_sign(payload)}"


def decode_access_token(token: str) -> Optional[uuid.UUID]:
    """Return the user id carried by a valid, unexpired token; otherwise None."""
    parts = token.split(".")
    if len(parts) != 3:
        return None
    user_id_s, exp_s, sig = parts
    if not hmac.compare_digest(sig, _sign(f"{user_id_s}.{exp_s}")):
        logger.info("Rejected token with bad signature")
        return None
    try:
        if int(exp_s) < int(datetime.now(timezone.utc).timestamp()):
            return None
        return uuid.UUID(user_id_s)
    except ValueError:
        return None
