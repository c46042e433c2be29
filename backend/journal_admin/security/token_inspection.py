import uuid
from typing import Any, Dict

import jwt

from ..config import settings


class InvalidTokenError(Exception):
    """Raised when a token cannot be parsed or is malformed."""


class ExpiredTokenError(Exception):
    """Raised when a token has expired."""


def _parse_token_payload(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except jwt.ExpiredSignatureError as exc:
        raise ExpiredTokenError from exc
    except jwt.InvalidTokenError as exc:
        raise InvalidTokenError from exc


def validate_access_token(token: str) -> Dict[str, Any]:
    payload = _parse_token_payload(token)

    subject = payload.get("sub")
    if not isinstance(subject, str):
        raise InvalidTokenError()

    return payload


def actor_id_from_token(token: str) -> uuid.UUID:
    """Actor id carried in the token's ``sub`` claim.

    Raises:
        ExpiredTokenError: If the token has expired
        InvalidTokenError: If the token is malformed or ``sub`` is not a UUID
    """
    payload = validate_access_token(token)
    try:
        return uuid.UUID(payload["sub"])
    except ValueError:
        raise InvalidTokenError() from None
