"""
Authorization utilities for request identity.

Tokens are verified upstream by the API Gateway authorizer (federated
identity or phone OTP); handlers only read the resulting principal.
"""
from typing import Any, Dict, Optional

from aws_lambda_powertools import Logger

logger = Logger()

CLAIM_KEYS = ("user_id", "sub", "uid")


class AuthorizationError(Exception):
    """Raised when the request carries no authenticated user."""
    pass


def _first_claim(source: Optional[Dict[str, Any]]) -> Optional[str]:
    if not isinstance(source, dict):
        return None
    for key in CLAIM_KEYS:
        if source.get(key):
            return str(source[key])
    return None


def get_user_id(event: Dict[str, Any]) -> str:
    """
    Extract the authenticated user ID from an API Gateway proxy event.

    Looks at Lambda authorizer context, JWT authorizer claims (HTTP APIs)
    and Cognito claims (REST APIs), in that order.

    Raises:
        AuthorizationError: If no principal is present
    """
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}

    user_id = (
        _first_claim(authorizer)
        or _first_claim((authorizer.get("jwt") or {}).get("claims"))
        or _first_claim(authorizer.get("claims"))
        or authorizer.get("principalId")
    )

    if not user_id:
        logger.warning("Request without authenticated user", extra={
            "authorizer_keys": list(authorizer.keys())
        })
        raise AuthorizationError("Could not determine user ID")

    return str(user_id)
