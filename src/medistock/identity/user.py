"""User aggregate: an account with credentials, a role and an optional profile."""

from datetime import datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String, ValueObject

from medistock.domain import medistock
from medistock.identity.address import Address

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


class Role(Enum):
    """Enumeration of account roles."""

    USER = "user"
    ADMIN = "admin"


def normalise_email(email: str | None) -> str | None:
    return email.strip().lower() if email else email


@medistock.aggregate(limit=-1)
class User:
    """A registered account. Exactly one role per account.

    The password hash never leaves the aggregate; views are built from the
    other fields only.
    """

    username: String(required=True, max_length=50, unique=True)
    email: String(required=True, max_length=254, unique=True)
    password_hash: String(required=True, max_length=255)
    role: String(choices=Role, default=Role.USER.value)
    phone_number: String(max_length=30)
    avatar: String(max_length=500)
    address: ValueObject(Address)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def email_must_look_like_an_address(self):
        email = self.email or ""
        local_part, _, domain_part = email.partition("@")
        if not local_part or not domain_part or " " in email or "@" in domain_part:
            raise ValidationError({"email": ["Please provide a valid email address"]})

    @classmethod
    def register(cls, username, email, password_hash):
        now = datetime.now()
        return cls(
            username=username.strip() if username else username,
            email=normalise_email(email),
            password_hash=password_hash,
            role=Role.USER.value,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @property
    def has_complete_address(self) -> bool:
        return self.address is not None and self.address.is_complete

    def update_profile(
        self,
        username=_UNSET,
        phone_number=_UNSET,
        avatar=_UNSET,
        address=_UNSET,
    ):
        """Apply the supplied profile fields.

        ``address`` is a mapping of address parts; only the parts it carries
        change and the others are kept.
        """
        if username is not _UNSET:
            self.username = username.strip() if username else username
        if phone_number is not _UNSET:
            self.phone_number = phone_number
        if avatar is not _UNSET:
            self.avatar = avatar
        if address is not _UNSET and address is not None:
            current = self.address or Address()
            self.address = current.merged(address)

        self.updated_at = datetime.now()

    def change_email(self, email):
        self.email = normalise_email(email)
        self.updated_at = datetime.now()

    def assign_role(self, role):
        if role not in {r.value for r in Role}:
            raise ValidationError({"role": ["Role must be either 'user' or 'admin'"]})
        self.role = role
        self.updated_at = datetime.now()

    def set_password_hash(self, password_hash):
        self.password_hash = password_hash
        self.updated_at = datetime.now()
