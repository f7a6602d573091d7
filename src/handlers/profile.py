"""
Lambda handler for the user profile.
"""
from typing import Dict

from aws_lambda_powertools import Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from src.models.requests import ProfileRequest
from src.utils.clients import get_repository
from src.utils.logging import logger
from src.utils.middleware import require_auth
from src.utils.responses import error, http_method, parse_body, success

tracer = Tracer()


@logger.inject_lambda_context
@tracer.capture_lambda_handler
@require_auth
def handler(event: Dict, context: LambdaContext, user_id: str) -> Dict:
    """
    Read or upsert the caller's profile.

    GET returns the stored profile (null when none exists) with a
    hasProfile flag. POST validates and stores the profile, answering 201
    on first creation and 200 on replacement.
    """
    repository = get_repository()
    method = http_method(event)

    if method == "GET":
        profile = repository.get_profile(user_id)
        return success({"profile": profile, "hasProfile": profile is not None})

    if method in ("POST", "PUT"):
        profile = ProfileRequest(**parse_body(event)).to_profile()
        created = repository.save_profile(user_id, profile)
        logger.info("Profile upserted", extra={"profile_created": created})
        return success(
            profile,
            message="Profile created successfully" if created else "Profile updated successfully",
            status_code=201 if created else 200
        )

    return error(405, f"Method {method} not allowed")


@logger.inject_lambda_context
@tracer.capture_lambda_handler
@require_auth
def last_period_handler(event: Dict, context: LambdaContext, user_id: str) -> Dict:
    """Return the profile's last period date, or 404 when none is recorded."""
    profile = get_repository().get_profile(user_id)
    if profile is None or profile.last_period_date is None:
        return error(404, "No last period date found")
    return success({"lastPeriodDate": profile.last_period_date})
