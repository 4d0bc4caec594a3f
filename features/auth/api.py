import logging
from typing import Any, Optional

from django.http import HttpRequest
from ninja.security import HttpBearer
from ninja_jwt.authentication import JWTAuth
from ninja_jwt.exceptions import AuthenticationFailed, InvalidToken, TokenError

logger = logging.getLogger(__name__)


class AuthBearer(HttpBearer):
    """Bearer auth for every EZPMS router; sets ``request.user`` on success."""

    def authenticate(self, request: HttpRequest, token: str) -> Optional[Any]:
        auth = JWTAuth()
        try:
            validated_token = auth.get_validated_token(token)
            user = auth.get_user(validated_token)
        except (InvalidToken, TokenError, AuthenticationFailed) as exc:
            logger.debug("Rejected bearer token: %s", exc)
            return None

        if user is None or not user.is_active:
            return None
        request.user = user
        return user
