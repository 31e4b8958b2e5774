"""Self-service profile updates."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Dict, Identifier
from protean.utils.globals import current_domain

from medistock.domain import medistock
from medistock.identity.user import User

logger = structlog.get_logger(__name__)

PROFILE_FIELDS = ("username", "phone_number", "avatar", "address")


def load_user(repo, user_id) -> User:
    user = repo.get_or_none(user_id)
    if user is None:
        raise ObjectNotFoundError("User not found")
    return user


def ensure_username_free(repo, username, user_id) -> None:
    if username and repo.username_taken(username, exclude_id=user_id):
        raise ValidationError({"username": ["Username already taken"]})


@medistock.command(part_of="User")
class UpdateProfile:
    user_id = Identifier(required=True)
    # Keys present are applied; address carries only the parts to change
    changes = Dict()


@medistock.command_handler(part_of=User)
class ProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = load_user(repo, command.user_id)

        changes = {
            key: value
            for key, value in (command.changes or {}).items()
            if key in PROFILE_FIELDS
        }
        if "username" in changes:
            ensure_username_free(repo, changes["username"], user.id)

        user.update_profile(**changes)
        repo.add(user)

        logger.info("user.profile_updated", user_id=str(user.id), fields=sorted(changes))
        return str(user.id)
