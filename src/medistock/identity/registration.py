"""Account registration and credential checks."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from medistock.domain import medistock
from medistock.identity.passwords import hash_password, verify_password
from medistock.identity.user import User, normalise_email

logger = structlog.get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


@medistock.command(part_of="User")
class RegisterUser:
    """Create a self-service account. New accounts always get the ``user`` role.

    Commands are stored, so only the password hash travels in one.
    """

    username: String(required=True, max_length=50)
    email: String(required=True, max_length=254)
    password_hash: String(required=True, max_length=255)


@medistock.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email: str) -> User | None:
        matches = self.query.filter(email=normalise_email(email)).all().items
        return matches[0] if matches else None

    def find_by_username(self, username: str) -> User | None:
        matches = self.query.filter(username=username.strip()).all().items
        return matches[0] if matches else None

    def email_taken(self, email: str, exclude_id=None) -> bool:
        user = self.find_by_email(email)
        return user is not None and str(user.id) != str(exclude_id)

    def username_taken(self, username: str, exclude_id=None) -> bool:
        user = self.find_by_username(username)
        return user is not None and str(user.id) != str(exclude_id)

    def newest_first(self) -> list[User]:
        return self.query.order_by("-created_at").all().items


@medistock.command_handler(part_of=User)
class RegistrationHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)

        if repo.email_taken(command.email):
            raise ValidationError({"email": ["User already exists"]})
        if repo.username_taken(command.username):
            raise ValidationError({"username": ["Username already taken"]})

        user = User.register(
            username=command.username,
            email=command.email,
            password_hash=command.password_hash,
        )
        repo.add(user)

        logger.info("user.registered", user_id=str(user.id))
        return str(user.id)


def authenticate(email: str | None, password: str | None) -> User:
    """The user owning these credentials.

    Unknown emails and wrong passwords fail with the same message.
    """
    user = None
    if email:
        user = current_domain.repository_for(User).find_by_email(email)

    if user is None or not verify_password(password, user.password_hash):
        logger.info("user.login_failed")
        raise ValidationError({"credentials": [INVALID_CREDENTIALS]})

    logger.info("user.logged_in", user_id=str(user.id))
    return user


def register(username: str, email: str, password: str) -> str:
    """Hash the password and register the account; returns the new user's id."""
    return current_domain.process(
        RegisterUser(
            username=username,
            email=email,
            password_hash=hash_password(password),
        ),
        asynchronous=False,
    )
