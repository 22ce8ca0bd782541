# games/battle/auth.py
import logging
from typing import Any, Dict, Iterable, Mapping, Optional

import jwt

from .engine.models import Identity
from .errors import AuthError

logger = logging.getLogger(__name__)

USER_ID_CLAIMS = ("id", "_id", "sub", "userId")
USERNAME_CLAIMS = ("username", "name", "email")
DEFAULT_USERNAME = "Player"


def bearer_token(auth: Any, headers: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Pull the credential from the Socket.IO auth payload, else from an Authorization header."""
    if isinstance(auth, dict):
        token = auth.get("token")
        if isinstance(token, str) and token:
            return token[7:] if token.lower().startswith("bearer ") else token
    header = (headers or {}).get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return None


def normalize_identity(claims: Dict[str, Any], fallback_id: str) -> Identity:
    user_id = next((claims[k] for k in USER_ID_CLAIMS if claims.get(k)), fallback_id)
    username = next((claims[k] for k in USERNAME_CLAIMS if claims.get(k)), DEFAULT_USERNAME)
    return Identity(user_id=str(user_id), username=str(username))


def authenticate(
    token: Optional[str],
    secret: Optional[str],
    algorithms: Iterable[str],
    fallback_id: str,
) -> Identity:
    if not token or not secret:
        raise AuthError()
    try:
        claims = jwt.decode(token, secret, algorithms=list(algorithms))
    except jwt.InvalidTokenError as exc:
        logger.warning("Rejected bearer token: %s", exc.__class__.__name__)
        raise AuthError() from exc
    return normalize_identity(claims, fallback_id)
