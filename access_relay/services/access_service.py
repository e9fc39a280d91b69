"""
Access service for handling collaborator access requests.
"""

from loguru import logger

from ..config import Settings
from ..models.requests import AccessDecisionQuery, AccessRequest, DenyQuery, NotificationMessage
from ..models.responses import CollaboratorResult
from ..validation import sanitize_text
from .access_provider import AccessProvider
from .notifier import Notifier


class AccessService:
    """Service for handling access requests and their accept/deny decisions."""

    def __init__(self, settings: Settings, notifier: Notifier, access_provider: AccessProvider):
        """Initialize the access service."""
        self.settings = settings
        self.notifier = notifier
        self.access_provider = access_provider

    async def submit_request(self, request: AccessRequest) -> NotificationMessage:
        """
        Notify the repository owner about an access request.

        Exactly one message is sent to the configured recipient. Notifier
        failures propagate as NotifierException.

        Args:
            request: Validated access request

        Returns:
            The message that was sent.
        """
        message = NotificationMessage(
            sender=self.settings.email_user,
            recipient=self.settings.to_email,
            subject=f"Access Request for Repository: {request.repo_name}",
            html_body=self._create_access_request_email_body(request),
        )

        await self.notifier.send(message)

        logger.info(
            "Access request submitted",
            github_username=request.github_username,
            repo_name=request.repo_name,
        )
        return message

    async def grant_access(self, query: AccessDecisionQuery) -> CollaboratorResult:
        """Add the user as a collaborator on the configured owner's repository."""
        result = await self.access_provider.add_collaborator(self.settings.owner, query.repo, query.username)
        logger.success(
            "Collaborator added",
            owner=result.owner,
            repo=result.repo,
            username=result.username,
            invited=result.invited,
        )
        return result

    async def deny_access(self, query: DenyQuery) -> str:
        """Deny a request; nobody else is told."""
        logger.info("Access request denied", username=query.username)
        return f"Request from {query.username} has been denied."

    def accept_link(self, request: AccessRequest) -> str:
        return (
            f"{self.settings.backend_url.rstrip('/')}/accept-request"
            f"?repo={request.repo_name}&username={request.github_username}"
        )

    def deny_link(self, request: AccessRequest) -> str:
        return f"{self.settings.backend_url.rstrip('/')}/deny-request?username={request.github_username}"

    def _create_access_request_email_body(self, request: AccessRequest) -> str:
        """
        Create the email body for an access request.

        Link parameters are inserted as-is; they are already restricted to
        safe characters by validation. Free text is escaped.

        Args:
            request: Access request parameters

        Returns:
            HTML email body
        """
        body = f"""
<div style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; border: 1px solid #ddd; border-radius: 8px; padding: 20px;">
  <h2 style="text-align: center; color: #007BFF;">New Private Repository Access Request</h2>
  <p>You have a new request for access to the repository: <strong style="color: #007BFF;">{request.repo_name}</strong>.</p>
  <hr style="border: none; border-top: 1px solid #ddd; margin: 20px 0;">
  <p><strong>Name of Requester:</strong> {sanitize_text(request.requester_name)}</p>
  <p><strong>GitHub Username:</strong> {request.github_username}</p>
  <p><strong>Reason for Access:</strong><br>{sanitize_text(request.reason)}</p>
  <div style="text-align: center; margin-top: 30px;">
    <a href="{self.accept_link(request)}"
       style="display: inline-block; background-color: #28a745; color: #fff; text-decoration: none; padding: 10px 20px; border-radius: 5px; margin: 5px; width: 150px; text-align: center;">
      Accept Request
    </a>
    <a href="{self.deny_link(request)}"
       style="display: inline-block; background-color: #dc3545; color: #fff; text-decoration: none; padding: 10px 20px; border-radius: 5px; margin: 5px; width: 150px; text-align: center;">
      Deny Request
    </a>
  </div>
  <hr style="border: none; border-top: 1px solid #ddd; margin: 20px 0;">
  <p style="font-size: 0.9em; color: #666; text-align: center;">This email was generated automatically. If you have any questions, please contact the administrator.</p>
</div>
"""  # noqa: E501
        return body
