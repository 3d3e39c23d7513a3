import jwt
from datetime import datetime, timedelta, timezone
from typing import Optional

from config import Settings


def create_access_token(user_id: str, email: str, settings: Settings) -> str:
    """
    Issue a signed session token

    Args:
        user_id: ID of the authenticated user, stored as the subject
        email: User email, carried alongside the subject
        settings: Application settings holding the secret and lifetime

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "iat": now,
        "exp": now + timedelta(days=settings.token_expire_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_jwt(token: str, settings: Settings) -> Optional[dict]:
    """
    Verify JWT token and return payload

    Signature and expiry are both checked by PyJWT.

    Args:
        token: JWT token string
        settings: Application settings holding the secret

    Returns:
        Decoded payload if valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.InvalidTokenError:
        return None

    return payload

