# tenantboard/domains/auth/dependencies.py
import logging
from typing import Optional

import jwt
from fastapi import Header
from pydantic import ValidationError

from tenantboard.core.settings import settings
from tenantboard.shared.permissions.principal import Identity

from .types import JwtPayload

logger = logging.getLogger(__name__)


def decode_access_token(token: str) -> Optional[JwtPayload]:
    """
    Verifies a JWT access token signed with JWT_SECRET.

    Returns None when the token cannot be verified or no secret is configured.
    """
    if not settings.JWT_SECRET:
        logger.error("JWT_SECRET is not configured; rejecting token")
        return None
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_aud": False},
        )
    except jwt.PyJWTError as e:
        logger.info(f"Rejected access token: {e}")
        return None

    try:
        return JwtPayload(**dict(payload))
    except ValidationError as e:
        logger.info(
            f"Rejected access token with malformed claims: {e.error_count()} error(s)"
        )
        return None


def get_identity(authorization: str = Header(None)) -> Optional[Identity]:
    """
    Extracts the caller's identity from the Authorization header.

    Returns None for a missing, malformed or invalid token, or one without
    both a subject and an organization claim.
    """
    if not authorization or not authorization.startswith("Bearer "):
        return None

    token = authorization.split(" ", 1)[1].strip()
    payload = decode_access_token(token)
    if payload is None:
        return None

    user_id = payload.sub
    organization_id = payload.claim(settings.JWT_ORG_CLAIM)
    if not user_id or not organization_id:
        return None

    return Identity(organization_id=organization_id, user_id=user_id)
