"""
Auth dependencies.
Owns: Shared-secret bearer check in front of the message endpoint.
"""

import hmac
import logging
from typing import Annotated, Awaitable, Callable

from fastapi import Header

from genie_http_api.errors import InvalidCredentialException

logger = logging.getLogger(__name__)


def verify_bearer(authorization: str | None, access_token: str) -> bool:
    if not authorization:
        return False
    expected = f"Bearer {access_token}"
    return hmac.compare_digest(authorization.encode(), expected.encode())


def require_access_token(access_token: str) -> Callable[..., Awaitable[bool]]:
    """
    Build the auth dependency for a configured secret.

    Requests pass only with ``Authorization: Bearer <access_token>``.
    """

    async def verify_access_token(
        authorization: Annotated[str | None, Header()] = None,
    ) -> bool:
        if not verify_bearer(authorization, access_token):
            logger.warning(
                "Request with missing or invalid access token",
                extra={"error_code": InvalidCredentialException.error_code},
            )
            raise InvalidCredentialException()
        return True

    return verify_access_token
