"""Password changes: by the account owner with proof, or reset by an admin without."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from medistock.domain import medistock
from medistock.identity.passwords import hash_password, verify_password
from medistock.identity.profile import load_user
from medistock.identity.user import User

logger = structlog.get_logger(__name__)


@medistock.command(part_of="User")
class SetPassword:
    user_id = Identifier(required=True)
    password_hash = String(required=True, max_length=255)


@medistock.command_handler(part_of=User)
class CredentialsHandler:
    @handle(SetPassword)
    def set_password(self, command):
        repo = current_domain.repository_for(User)
        user = load_user(repo, command.user_id)
        user.set_password_hash(command.password_hash)
        repo.add(user)

        logger.info("user.password_set", user_id=str(user.id))


def change_password(user_id, current_password, new_password) -> None:
    """Replace the caller's password after checking the current one."""
    if not current_password or not new_password:
        raise ValidationError({"password": ["Please provide current and new password"]})

    user = load_user(current_domain.repository_for(User), user_id)
    if not verify_password(current_password, user.password_hash):
        raise ValidationError({"currentPassword": ["Current password is incorrect"]})

    current_domain.process(
        SetPassword(user_id=user_id, password_hash=hash_password(new_password, "newPassword")),
        asynchronous=False,
    )


def reset_password(user_id, new_password) -> None:
    """Set a new password for any account. No proof of the old one is needed."""
    if not new_password:
        raise ValidationError({"newPassword": ["Please provide new password"]})

    load_user(current_domain.repository_for(User), user_id)
    current_domain.process(
        SetPassword(user_id=user_id, password_hash=hash_password(new_password, "newPassword")),
        asynchronous=False,
    )
