"""
Authentication Routes

    - POST /auth/register: Create a diner or merchant account
    - POST /auth/login: Exchange email/password for a bearer token
"""

from fastapi import APIRouter, Depends

from foodorder.api.dependencies import get_account_service
from foodorder.schemas import (
    ErrorResponse,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserResponse,
)
from foodorder.services.accounts import AccountService


router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=201,
    responses={409: {"model": ErrorResponse}},
    summary="Register Account",
)
async def register(
    request: RegisterRequest,
    accounts: AccountService = Depends(get_account_service),
) -> RegisterResponse:
    user = await accounts.register(request.email, request.password, request.user_type)
    return RegisterResponse(
        message="User registered successfully",
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Login",
)
async def login(
    request: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
) -> TokenResponse:
    token = await accounts.login(request.email, request.password)
    return TokenResponse(token=token)
