"""
Input validation for access requests and decision links.

Validators never raise for malformed input: they return either the parsed
record or the list of field errors. The FastAPI dependencies at the bottom
of the module turn a non-empty error list into an ``InputValidationException``.
"""

import html
import json
import re
from collections.abc import Callable, Mapping
from typing import Any

from fastapi import Request
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from .models.requests import AccessDecisionQuery, AccessRequest, DenyQuery
from .models.responses import FieldError
from .utils.exceptions import InputValidationException

USERNAME_PATTERN = re.compile(r"[A-Za-z0-9]+")
REPO_NAME_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
MIN_REASON_LENGTH = 5

INVALID_USERNAME = "Invalid GitHub username"
INVALID_REPO_NAME = "Invalid repository name"
REASON_TOO_SHORT = f"Reason must be at least {MIN_REASON_LENGTH} characters long"
NAME_REQUIRED = "Name is required"

Rule = Callable[[str], bool]


def is_valid_username(value: str) -> bool:
    return USERNAME_PATTERN.fullmatch(value) is not None


def is_valid_repo_name(value: str) -> bool:
    return REPO_NAME_PATTERN.fullmatch(value) is not None


def is_valid_reason(value: str) -> bool:
    return len(value) >= MIN_REASON_LENGTH


def is_valid_requester_name(value: str) -> bool:
    return bool(value.strip())


ACCESS_REQUEST_RULES: tuple[tuple[str, Rule, str], ...] = (
    ("githubUsername", is_valid_username, INVALID_USERNAME),
    ("reason", is_valid_reason, REASON_TOO_SHORT),
    ("requesterName", is_valid_requester_name, NAME_REQUIRED),
    ("repoName", is_valid_repo_name, INVALID_REPO_NAME),
)

GRANT_QUERY_RULES: tuple[tuple[str, Rule, str], ...] = (
    ("repo", is_valid_repo_name, INVALID_REPO_NAME),
    ("username", is_valid_username, INVALID_USERNAME),
)

DENY_QUERY_RULES: tuple[tuple[str, Rule, str], ...] = (("username", is_valid_username, INVALID_USERNAME),)


def check_fields(raw: Mapping[str, Any], rules: tuple[tuple[str, Rule, str], ...]) -> list[FieldError]:
    """
    Apply field rules to raw input.

    Args:
        raw: Body fields or query parameters
        rules: (field, predicate, message) triples, in reporting order

    Returns:
        One error per failing field; empty when everything passes.
    """
    errors = []
    for field, rule, message in rules:
        value = raw.get(field)
        if not isinstance(value, str) or not rule(value):
            errors.append(FieldError(field=field, message=message))
    return errors


def validate_access_request(raw: Mapping[str, Any]) -> AccessRequest | list[FieldError]:
    """Validate the fields of a submitted access request."""
    errors = check_fields(raw, ACCESS_REQUEST_RULES)
    if errors:
        return errors
    return AccessRequest.model_validate({field: raw[field] for field, _, _ in ACCESS_REQUEST_RULES})


def validate_grant_query(raw: Mapping[str, Any]) -> AccessDecisionQuery | list[FieldError]:
    """Validate accept-link query parameters."""
    errors = check_fields(raw, GRANT_QUERY_RULES)
    if errors:
        return errors
    return AccessDecisionQuery(repo=raw["repo"], username=raw["username"])


def validate_deny_query(raw: Mapping[str, Any]) -> DenyQuery | list[FieldError]:
    """Validate deny-link query parameters."""
    errors = check_fields(raw, DENY_QUERY_RULES)
    if errors:
        return errors
    return DenyQuery(username=raw["username"])


def sanitize_text(value: str) -> str:
    """Escape free text before it is embedded in HTML."""
    return html.escape(value, quote=True)


async def read_body_fields(request: Request) -> Mapping[str, Any]:
    """Read a JSON or form-encoded body into a mapping."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    raw_body = await request.body()
    if not raw_body.strip():
        return {}
    try:
        payload = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Malformed request body", error=str(e))
        raise StarletteHTTPException(status_code=400, detail="Malformed request body.") from e
    return payload if isinstance(payload, dict) else {}


def _unwrap(result):
    if isinstance(result, list):
        raise InputValidationException(result)
    return result


async def access_request_body(request: Request) -> AccessRequest:
    """Dependency: validated access request from the request body."""
    return _unwrap(validate_access_request(await read_body_fields(request)))


async def grant_query_params(request: Request) -> AccessDecisionQuery:
    """Dependency: validated accept-link query parameters."""
    return _unwrap(validate_grant_query(request.query_params))


async def deny_query_params(request: Request) -> DenyQuery:
    """Dependency: validated deny-link query parameters."""
    return _unwrap(validate_deny_query(request.query_params))
