from typing import Any, Dict, List
from fastapi import Depends
from middlewares.auth_middleware import auth_middleware
from services.resource.errors import ForbiddenError


def role_middleware(required_roles: List[str] = None):
    # avoid mutable default args
    required_roles = list(required_roles or [])

    def dependency(user: Dict[str, Any] = Depends(auth_middleware)):
        # auth_middleware already raised for bad tokens, so user is guaranteed
        user_roles = user.get("roles", [])
        if required_roles and not any(r in user_roles for r in required_roles):
            raise ForbiddenError(
                "Forbidden: requires one of roles " + ", ".join(required_roles),
                details={"required_roles": required_roles},
            )
        return user

    return dependency
