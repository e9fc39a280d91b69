"""
Response models for the Repo Access Relay.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Plain message body."""

    message: str = Field(..., description="Human readable message")


class FieldError(BaseModel):
    """A single field-level validation failure."""

    field: str = Field(..., description="Name of the offending field")
    message: str = Field(..., description="What is wrong with it")


class ValidationErrorResponse(BaseModel):
    """Body returned when input validation fails."""

    errors: list[FieldError] = Field(default_factory=list, description="Field-level errors")


class CollaboratorResult(BaseModel):
    """Outcome of a successful add-collaborator call."""

    owner: str = Field(..., description="Repository owner")
    repo: str = Field(..., description="Repository name")
    username: str = Field(..., description="GitHub username")
    status_code: int = Field(..., description="HTTP status returned by the provider")
    invited: bool = Field(..., description="Whether a new invitation was created")


# Provider failures
class HttpError(BaseModel):
    """The provider answered with a non-2xx status."""

    kind: Literal["http_error"] = "http_error"
    status: int = Field(..., description="HTTP status code")
    body: Any = Field(None, description="Response body, parsed as JSON when possible")


class NoResponse(BaseModel):
    """The request was sent but no response arrived."""

    kind: Literal["no_response"] = "no_response"
    message: str = Field(..., description="Transport error description")


class RequestSetupError(BaseModel):
    """The request could not be built or sent at all."""

    kind: Literal["request_setup"] = "request_setup"
    message: str = Field(..., description="Setup error description")


ProviderFailure = Annotated[Union[HttpError, NoResponse, RequestSetupError], Field(discriminator="kind")]
