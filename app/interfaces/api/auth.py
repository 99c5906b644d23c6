"""Auth API routes: register, login."""

from typing import Optional

from fastapi import APIRouter, Depends

from app.application.services.auth_service import authenticate_user, generate_token, register_user
from app.application.validation import validate_login_data, validate_user_registration, validated_body
from app.core import responses
from app.core.constants import ErrorMessages, Role, SuccessMessages
from app.core.exceptions import ForbiddenException
from app.core.rate_limit import auth_limiter
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserRead, UserSummary
from app.interfaces.api.deps import CurrentUser, get_optional_user
from app.interfaces.deps import get_user_repository

router = APIRouter(prefix="/api/auth", tags=["Auth"], dependencies=[Depends(auth_limiter)])


@router.post("/register", status_code=201)
def register(
    caller: Optional[CurrentUser] = Depends(get_optional_user),
    body: dict = Depends(validated_body(validate_user_registration)),
    repo: UserRepository = Depends(get_user_repository),
):
    request = RegisterRequest.model_validate(body)
    if request.user_type == Role.ADMIN and not (caller and caller.is_admin):
        raise ForbiddenException(ErrorMessages.ONLY_ADMIN_CREATES_ADMIN)

    user = register_user(
        repo,
        username=request.username,
        email=request.email,
        password=request.password,
        user_type=request.user_type,
    )
    return responses.created(SuccessMessages.REGISTER_SUCCESS, UserSummary.model_validate(user))


@router.post("/login")
def login(
    body: dict = Depends(validated_body(validate_login_data)),
    repo: UserRepository = Depends(get_user_repository),
):
    request = LoginRequest.model_validate(body)
    user = authenticate_user(repo, request.email, request.password)
    token = TokenResponse(token=generate_token(user), user=UserRead.model_validate(user))
    return responses.success(SuccessMessages.LOGIN_SUCCESS, token)
