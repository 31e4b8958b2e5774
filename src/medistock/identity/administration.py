"""Admin account management: edit any account, assign roles, delete accounts."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Dict, Identifier
from protean.utils.globals import current_domain

from medistock.domain import medistock
from medistock.identity.profile import ensure_username_free, load_user
from medistock.identity.user import User

logger = structlog.get_logger(__name__)

ADMIN_FIELDS = ("username", "email", "role", "phone_number", "address")


@medistock.command(part_of="User")
class UpdateUser:
    user_id = Identifier(required=True)
    changes = Dict()


@medistock.command(part_of="User")
class DeleteUser:
    user_id = Identifier(required=True)
    requested_by = Identifier(required=True)


@medistock.command_handler(part_of=User)
class UserAdministrationHandler:
    @handle(UpdateUser)
    def update_user(self, command):
        repo = current_domain.repository_for(User)
        user = load_user(repo, command.user_id)

        changes = {
            key: value
            for key, value in (command.changes or {}).items()
            if key in ADMIN_FIELDS
        }

        if "email" in changes:
            if changes["email"] and repo.email_taken(changes["email"], exclude_id=user.id):
                raise ValidationError({"email": ["Email already in use"]})
            user.change_email(changes.pop("email"))
        if "username" in changes:
            ensure_username_free(repo, changes["username"], user.id)
        if "role" in changes:
            user.assign_role(changes.pop("role"))

        user.update_profile(**changes)
        repo.add(user)

        logger.info("user.updated", user_id=str(user.id), role=user.role)
        return str(user.id)

    @handle(DeleteUser)
    def delete_user(self, command):
        if str(command.user_id) == str(command.requested_by):
            raise ValidationError({"user": ["Cannot delete your own account"]})

        repo = current_domain.repository_for(User)
        user = load_user(repo, command.user_id)
        repo._dao.delete(user)

        logger.info("user.deleted", user_id=str(command.user_id))
