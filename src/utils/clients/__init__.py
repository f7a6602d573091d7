"""
Centralized client initialization module.

This module provides the lazy-loaded repository and request-level settings
shared by the handlers.
"""
import os
from src.utils.dynamo import get_dynamo
from src.utils.storage import UserDataRepository

DEFAULT_TIMEZONE = "UTC"

# Initialize shared clients (lazy loading)
_repository = None

def get_repository() -> UserDataRepository:
    """Get or create the user data repository."""
    global _repository
    if _repository is None:
        _repository = UserDataRepository(get_dynamo())
    return _repository

def get_default_timezone() -> str:
    """Timezone used when a request does not name one."""
    return os.environ.get("DEFAULT_TIMEZONE", DEFAULT_TIMEZONE)
