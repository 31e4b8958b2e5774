"""FastAPI endpoints for registration, login and the caller's own account."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from medistock.api.dependencies import require
from medistock.api.schemas import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    ProfileUpdateRequest,
    RegisterRequest,
)
from medistock.identity.credentials import change_password
from medistock.identity.policy import Action, Caller
from medistock.identity.profile import UpdateProfile, load_user
from medistock.identity.registration import authenticate, register
from medistock.identity.tokens import issue_token
from medistock.identity.user import User
from medistock.identity.views import user_view

auth_router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(user) -> AuthResponse:
    return AuthResponse(
        token=issue_token(user.id, user.role),
        user={
            "id": str(user.id),
            "username": user.username,
            "email": user.email,
            "role": user.role,
        },
    )


@auth_router.post("/register", status_code=201, response_model=AuthResponse)
async def register_user(body: RegisterRequest) -> AuthResponse:
    user_id = register(username=body.username, email=body.email, password=body.password)
    user = current_domain.repository_for(User).get(user_id)
    return _auth_response(user)


@auth_router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest) -> AuthResponse:
    user = authenticate(body.email, body.password)
    return _auth_response(user)


@auth_router.get("/user")
async def get_me(caller: Caller = Depends(require(Action.PROFILE_MANAGE))) -> dict:
    return user_view(load_user(current_domain.repository_for(User), caller.user_id))


@auth_router.put("/profile")
async def update_profile(
    body: ProfileUpdateRequest,
    caller: Caller = Depends(require(Action.PROFILE_MANAGE)),
) -> dict:
    changes = body.model_dump(exclude_unset=True)
    current_domain.process(
        UpdateProfile(user_id=caller.user_id, changes=changes),
        asynchronous=False,
    )
    return user_view(load_user(current_domain.repository_for(User), caller.user_id))


@auth_router.put("/change-password", response_model=MessageResponse)
async def update_password(
    body: ChangePasswordRequest,
    caller: Caller = Depends(require(Action.PROFILE_MANAGE)),
) -> MessageResponse:
    change_password(caller.user_id, body.current_password, body.new_password)
    return MessageResponse(msg="Password updated successfully")
