from typing import Annotated

from fastapi import APIRouter, Depends, Response

from src.core.schemas import TokenModel
from src.user.auth.schemas import CreateUserModel, LoginUserModel, TokenRequestModel
from src.user.auth.usecases.login import LoginUserUseCase, get_login_user_use_case
from src.user.auth.usecases.logout import LogoutUseCase, get_logout_use_case
from src.user.auth.usecases.refresh import (
    RefreshTokensUseCase,
    get_refresh_tokens_use_case,
)
from src.user.auth.usecases.register import RegisterUseCase, get_register_use_case
from src.user.schemas import RegisteredUserViewModel

router = APIRouter()


@router.post(
    "/register",
    status_code=201,
    response_model=RegisteredUserViewModel,
)
async def signup_user(
    user_form_data: CreateUserModel,
    use_case: Annotated[RegisterUseCase, Depends(get_register_use_case)],
) -> RegisteredUserViewModel:
    """
    Create a new user account. The response carries the user's API key.
    """
    return await use_case.execute(data=user_form_data)


@router.post("/login", response_model=TokenModel)
async def login_user(
    login_form_data: LoginUserModel,
    use_case: Annotated[LoginUserUseCase, Depends(get_login_user_use_case)],
) -> TokenModel:
    """
    Authenticate user and return tokens.
    """
    return await use_case.execute(data=login_form_data)


@router.post("/refresh", response_model=TokenModel)
async def refresh_tokens(
    data: TokenRequestModel,
    use_case: Annotated[RefreshTokensUseCase, Depends(get_refresh_tokens_use_case)],
) -> TokenModel:
    """
    Rotate a whitelisted refresh token into a new token pair.
    """
    return await use_case.execute(data=data)


@router.post("/logout", status_code=204, response_class=Response)
async def logout_user(
    data: TokenRequestModel,
    use_case: Annotated[LogoutUseCase, Depends(get_logout_use_case)],
) -> Response:
    """
    Remove a refresh token from the whitelist.
    """
    await use_case.execute(data=data)
    return Response(status_code=204)
