from fastapi import Request

from errors import AuthError
from utils.jwt import verify_jwt


async def verify_jwt_middleware(request: Request):
    """
    Middleware to verify JWT token in Authorization header

    Accepts "Bearer <token>" or the bare token.

    Args:
        request: FastAPI request object

    Raises:
        AuthError: If token is missing, invalid, or expired
    """
    auth_header = request.headers.get("Authorization")

    if not auth_header:
        raise AuthError("Access denied")

    token = auth_header.strip()
    if token[:7].lower() == "bearer ":
        token = token[7:].strip()

    payload = verify_jwt(token, request.app.state.settings)

    if not payload:
        raise AuthError("Invalid or expired token")

    # Attach user info to request state
    request.state.user_id = payload.get("sub")
    request.state.user_email = payload.get("email")


def current_user_id(request: Request) -> str:
    """User ID attached by verify_jwt_middleware"""
    return request.state.user_id
