"""
Request models for the Repo Access Relay.
"""

from pydantic import BaseModel, ConfigDict, Field


class AccessRequest(BaseModel):
    """Request for collaborator access to a repository."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    github_username: str = Field(..., alias="githubUsername", description="GitHub username requesting access")
    reason: str = Field(..., description="Why access is needed")
    requester_name: str = Field(..., alias="requesterName", description="Name of the person requesting access")
    repo_name: str = Field(..., alias="repoName", description="Repository to grant access to")


class AccessDecisionQuery(BaseModel):
    """Query parameters of an accept link."""

    model_config = ConfigDict(frozen=True)

    repo: str = Field(..., description="Repository to add the collaborator to")
    username: str = Field(..., description="GitHub username to add")


class DenyQuery(BaseModel):
    """Query parameters of a deny link."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(..., description="GitHub username whose request is denied")


class NotificationMessage(BaseModel):
    """Message handed to a notifier."""

    model_config = ConfigDict(frozen=True)

    sender: str = Field(..., description="From address")
    recipient: str = Field(..., description="To address")
    subject: str = Field(..., description="Subject line")
    html_body: str = Field(..., description="HTML body")
