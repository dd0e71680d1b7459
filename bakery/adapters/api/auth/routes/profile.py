from typing import Annotated

from fastapi import APIRouter, Depends

from bakery.adapters.api.auth.schemas import ProfileResponse, UserOut
from bakery.core.dependencies.auth import get_current_user
from bakery.domain.entities.user import User

router = APIRouter()


@router.get("", response_model=ProfileResponse, summary="Current user's profile")
async def get_profile(current_user: Annotated[User, Depends(get_current_user)]) -> ProfileResponse:
    return ProfileResponse(user=UserOut.from_entity(current_user))
