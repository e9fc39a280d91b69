"""
Access request endpoints.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger

from ..models.requests import AccessDecisionQuery, AccessRequest, DenyQuery
from ..models.responses import HttpError, MessageResponse, NoResponse, RequestSetupError, ValidationErrorResponse
from ..services.access_service import AccessService
from ..utils.exceptions import NotifierException, ProviderException
from ..validation import access_request_body, deny_query_params, grant_query_params

router = APIRouter()

VALIDATION_RESPONSES = {400: {"model": ValidationErrorResponse, "description": "Invalid input"}}


def get_access_service(request: Request) -> AccessService:
    """Get the access service built at startup."""
    return request.app.state.access_service


@router.post(
    "/submit-request",
    response_model=MessageResponse,
    operation_id="submit_access_request",
    responses={**VALIDATION_RESPONSES, 500: {"model": MessageResponse, "description": "Notification failed"}},
)
async def submit_request(
    access_request: AccessRequest = Depends(access_request_body),
    access_service: AccessService = Depends(get_access_service),
):
    """
    Submit a repository access request.

    Emails the configured recipient a summary of the request with accept
    and deny links.
    """
    if not (
        access_request.github_username
        and access_request.reason
        and access_request.repo_name
        and access_request.requester_name
    ):
        return JSONResponse(status_code=400, content={"message": "Missing required fields."})

    try:
        await access_service.submit_request(access_request)
    except NotifierException as e:
        logger.opt(exception=e).error(
            "Failed to send access request email",
            github_username=access_request.github_username,
            repo_name=access_request.repo_name,
        )
        return JSONResponse(status_code=500, content={"message": "Error sending email."})

    return MessageResponse(message="Request submitted successfully!")


@router.get(
    "/accept-request",
    response_class=PlainTextResponse,
    operation_id="accept_access_request",
    responses={**VALIDATION_RESPONSES, 502: {"model": MessageResponse, "description": "Provider call failed"}},
)
async def accept_request(
    query: AccessDecisionQuery = Depends(grant_query_params),
    access_service: AccessService = Depends(get_access_service),
):
    """Add the requesting user as a collaborator on the repository."""
    if not query.repo or not query.username:
        return PlainTextResponse("Missing repository name or username.", status_code=400)

    try:
        await access_service.grant_access(query)
    except ProviderException as e:
        status_code = 502
        match e.failure:
            case HttpError(status=status, body=body):
                logger.error("Response error", status=status, repo=query.repo, username=query.username)
                logger.error("Error data: {}", body)
            case NoResponse(message=message):
                logger.error("No response received", error=message, repo=query.repo, username=query.username)
            case RequestSetupError(message=message):
                logger.error("Error setting up the request", error=message, repo=query.repo)
                status_code = 500
        return JSONResponse(status_code=status_code, content={"message": "Error adding collaborator."})

    return PlainTextResponse(f"Successfully added {query.username} to {query.repo}.")


@router.get(
    "/deny-request",
    response_class=PlainTextResponse,
    operation_id="deny_access_request",
    responses=VALIDATION_RESPONSES,
)
async def deny_request(
    query: DenyQuery = Depends(deny_query_params),
    access_service: AccessService = Depends(get_access_service),
):
    """Deny an access request."""
    if not query.username:
        return PlainTextResponse("Missing username.", status_code=400)

    return PlainTextResponse(await access_service.deny_access(query))
