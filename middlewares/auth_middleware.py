from typing import Any, Dict, Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt
from config.settings import settings
from services.resource.errors import UnauthorizedError

# auto_error=False so a missing header becomes our own UNAUTHORIZED envelope
security = HTTPBearer(auto_error=False)


def decode_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid token")


def auth_middleware(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Dict[str, Any]:
    """
    Verify the bearer token and return the caller as a plain dict.
    Token issuance lives outside this service; only verification happens here.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Authentication required")

    decoded = decode_token(credentials.credentials)
    user_id = decoded.get("id") or decoded.get("sub")
    if not user_id:
        # token was structurally OK but payload missing
        raise UnauthorizedError("Invalid token payload")

    return {
        "id": user_id,
        "name": decoded.get("name"),
        "roles": list(decoded.get("roles") or []),
    }
