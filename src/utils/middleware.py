"""
Middleware functions for request processing.
"""
from functools import wraps
from typing import Any, Callable, Dict

from pydantic import ValidationError

from src.services.exceptions import (
    CycleNotFoundError,
    DuplicateCycleError,
    InsufficientHistoryError,
    InvalidEnumValueError,
    InvalidRangeError,
    InvalidTimezoneError,
    ObservationNotFoundError,
)
from src.utils.auth import AuthorizationError, get_user_id
from src.utils.logging import logger
from src.utils.responses import error


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for item in exc.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        message = item.get("msg", "Invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return ", ".join(parts)


def require_auth(f: Callable) -> Callable:
    """
    Decorator that resolves the authenticated user and handles errors.

    The wrapped handler is called as f(event, context, user_id). Domain and
    validation errors become 4xx responses; anything else is logged and
    returned as a 500.

    Args:
        f: Handler function to wrap

    Returns:
        Wrapped handler function
    """
    @wraps(f)
    def wrapped(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
        try:
            user_id = get_user_id(event)
            logger.append_keys(user_id=user_id)
            return f(event, context, user_id)

        except AuthorizationError as e:
            return error(401, str(e))
        except ValidationError as e:
            logger.info("Request validation failed", extra={"errors": _validation_message(e)})
            return error(400, _validation_message(e))
        except InsufficientHistoryError:
            return error(400, "Not enough cycle data for prediction")
        except (InvalidRangeError, InvalidEnumValueError, InvalidTimezoneError) as e:
            return error(400, str(e))
        except (CycleNotFoundError, ObservationNotFoundError) as e:
            return error(404, str(e))
        except DuplicateCycleError as e:
            return error(409, str(e))
        except ValueError as e:
            # Malformed JSON bodies and query strings
            return error(400, str(e))
        except Exception as e:
            logger.exception("Unhandled error processing request", extra={
                "error": str(e),
                "error_type": e.__class__.__name__
            })
            return error(500, "Internal server error")
        finally:
            logger.remove_keys(["user_id"])

    return wrapped
