"""FastAPI endpoints for admin account management."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from medistock.api.dependencies import require
from medistock.api.schemas import MessageResponse, ResetPasswordRequest, UserUpdateRequest
from medistock.identity.administration import DeleteUser, UpdateUser
from medistock.identity.credentials import reset_password
from medistock.identity.policy import Action, Caller
from medistock.identity.profile import load_user
from medistock.identity.user import User
from medistock.identity.views import user_view

user_router = APIRouter(prefix="/api/users", tags=["users"])


@user_router.get("")
async def list_users(caller: Caller = Depends(require(Action.USER_MANAGE))) -> list[dict]:
    return [user_view(user) for user in current_domain.repository_for(User).newest_first()]


@user_router.get("/{user_id}")
async def get_user(user_id: str, caller: Caller = Depends(require(Action.USER_MANAGE))) -> dict:
    return user_view(load_user(current_domain.repository_for(User), user_id))


@user_router.put("/{user_id}")
async def update_user(
    user_id: str,
    body: UserUpdateRequest,
    caller: Caller = Depends(require(Action.USER_MANAGE)),
) -> dict:
    changes = body.model_dump(exclude_unset=True)
    current_domain.process(UpdateUser(user_id=user_id, changes=changes), asynchronous=False)
    return user_view(load_user(current_domain.repository_for(User), user_id))


@user_router.put("/{user_id}/reset-password", response_model=MessageResponse)
async def reset_user_password(
    user_id: str,
    body: ResetPasswordRequest,
    caller: Caller = Depends(require(Action.USER_MANAGE)),
) -> MessageResponse:
    reset_password(user_id, body.new_password)
    return MessageResponse(msg="Password reset successfully")


@user_router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    caller: Caller = Depends(require(Action.USER_MANAGE)),
) -> MessageResponse:
    current_domain.process(DeleteUser(user_id=user_id, requested_by=caller.user_id), asynchronous=False)
    return MessageResponse(msg="User removed")
