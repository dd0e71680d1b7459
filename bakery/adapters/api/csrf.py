from fastapi import APIRouter, Request
from pydantic import BaseModel, ConfigDict, Field

from bakery.core.dependencies.client import get_csrf_session_key
from bakery.infrastructure.dependency_injection.auth_dependencies import Trackers

router = APIRouter()


class CSRFTokenResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    csrf_token: str = Field(..., alias="csrfToken")


@router.get("", response_model=CSRFTokenResponse, summary="Issue a CSRF token")
async def issue_csrf_token(request: Request, trackers: Trackers) -> CSRFTokenResponse:
    """Issue a token bound to the caller's address and user agent.

    Send it back in the ``X-CSRF-Token`` header on every state-changing
    request. A new token replaces the previous one for the same client.
    """
    token = trackers.csrf_tokens.generate_token(get_csrf_session_key(request))
    return CSRFTokenResponse(csrf_token=token)
