"""
Pydantic models for request and response validation.
"""

from .requests import *
from .responses import *

__all__ = [
    # Request models
    "AccessRequest",
    "AccessDecisionQuery",
    "DenyQuery",
    "NotificationMessage",
    # Response models
    "MessageResponse",
    "FieldError",
    "ValidationErrorResponse",
    "CollaboratorResult",
    "HttpError",
    "NoResponse",
    "RequestSetupError",
    "ProviderFailure",
]
