from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from expense_tracker.core.models import User
from expense_tracker.database import find_user_by_id
from expense_tracker.errors import Unauthorized
from expense_tracker.tokens import verify_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class AuthContext:
    """The authenticated caller of one request."""

    user: User
    token: str

    @property
    def user_id(self) -> int:
        return self.user.id


def get_config(request: Request) -> Dict[str, object]:
    return request.app.state.config


def require_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    config: Dict[str, object] = Depends(get_config),
) -> AuthContext:
    if credentials is None:
        raise Unauthorized("Not authorized, no token provided")

    try:
        user_id = verify_token(credentials.credentials, config["jwt_secret"])
    except Unauthorized as exc:
        logger.info("Token verification failed: %s", exc.message)
        raise

    user = find_user_by_id(config["db_path"], user_id)
    if user is None:
        raise Unauthorized("Not authorized, user not found")
    return AuthContext(user=user, token=credentials.credentials)
