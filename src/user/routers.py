from typing import Annotated

from fastapi import APIRouter, Depends

from src.user.auth.dependencies import get_current_user
from src.user.auth.routers import router as auth_router
from src.user.models import User
from src.user.schemas import UserProfileViewModel

router = APIRouter()
router.include_router(auth_router, prefix="/auth")

CurrentUser = Annotated[User, Depends(get_current_user)]


@router.get("/me", response_model=UserProfileViewModel)
async def read_current_user(current_user: CurrentUser) -> UserProfileViewModel:
    """Profile of the caller, authenticated by bearer token or `X-API-Key`."""
    return UserProfileViewModel.model_validate(current_user)
