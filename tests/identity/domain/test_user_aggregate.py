"""Tests for the User aggregate."""

import pytest
from medistock.identity.address import Address
from medistock.identity.user import Role, User
from protean.exceptions import ValidationError


def _register(**overrides):
    values = {"username": "nurse.joy", "email": "joy@example.com", "password_hash": "hashed"}
    values.update(overrides)
    return User.register(**values)


class TestRegistration:
    def test_new_accounts_are_users(self):
        user = _register()
        assert user.role == Role.USER.value
        assert user.is_admin is False

    def test_email_is_normalised(self):
        assert _register(email="  Joy@Example.COM ").email == "joy@example.com"

    def test_username_is_trimmed(self):
        assert _register(username=" nurse.joy ").username == "nurse.joy"

    def test_no_address_by_default(self):
        user = _register()
        assert user.has_complete_address is False

    @pytest.mark.parametrize("email", ["joy", "joy@", "@example.com", "joy @example.com", "a@b@c"])
    def test_malformed_email_rejected(self, email):
        with pytest.raises(ValidationError) as exc:
            _register(email=email)
        assert "email" in exc.value.messages

    def test_username_required(self):
        with pytest.raises(ValidationError):
            _register(username="")


class TestProfile:
    def test_update_phone_and_avatar(self):
        user = _register()
        user.update_profile(phone_number="+1-555-0100", avatar="https://cdn.example.com/joy.png")

        assert user.phone_number == "+1-555-0100"
        assert user.avatar == "https://cdn.example.com/joy.png"

    def test_address_parts_merge(self):
        user = _register()
        user.update_profile(address={"street": "12 Harbour Rd", "city": "Springfield"})
        user.update_profile(address={"zip_code": "49007"})

        assert user.address.street == "12 Harbour Rd"
        assert user.address.city == "Springfield"
        assert user.address.zip_code == "49007"

    def test_unknown_address_parts_ignored(self):
        user = _register()
        user.update_profile(address={"street": "1 Main St", "planet": "Mars"})
        assert user.address.street == "1 Main St"

    def test_complete_address_needs_street_and_city(self):
        user = _register()
        user.update_profile(address={"street": "12 Harbour Rd"})
        assert user.has_complete_address is False

        user.update_profile(address={"city": "Springfield"})
        assert user.has_complete_address is True

    def test_unsupplied_fields_untouched(self):
        user = _register()
        user.update_profile(phone_number="+1-555-0100")
        user.update_profile(avatar="a.png")
        assert user.phone_number == "+1-555-0100"


class TestAddress:
    def test_blank_street_is_incomplete(self):
        assert Address(street="   ", city="Springfield").is_complete is False

    def test_merged_returns_new_address(self):
        original = Address(street="1 Main St", city="Springfield")
        moved = original.merged({"city": "Shelbyville"})

        assert moved.city == "Shelbyville"
        assert moved.street == "1 Main St"
        assert original.city == "Springfield"


class TestRoles:
    def test_assign_admin(self):
        user = _register()
        user.assign_role("admin")
        assert user.is_admin is True

    def test_unknown_role_rejected(self):
        user = _register()
        with pytest.raises(ValidationError) as exc:
            user.assign_role("superuser")
        assert exc.value.messages == {"role": ["Role must be either 'user' or 'admin'"]}
        assert user.role == "user"


class TestEmailChange:
    def test_change_email_normalises(self):
        user = _register()
        user.change_email("New@Example.com")
        assert user.email == "new@example.com"

    def test_change_to_malformed_email_rejected(self):
        user = _register()
        with pytest.raises(ValidationError):
            user.change_email("not-an-email")
