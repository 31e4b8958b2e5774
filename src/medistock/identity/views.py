"""JSON views of accounts. The password hash is never part of a view."""

from medistock.identity.address import ADDRESS_FIELDS

_WIRE_NAMES = {"zip_code": "zipCode"}


def address_view(address) -> dict | None:
    if address is None:
        return None
    return {_WIRE_NAMES.get(name, name): getattr(address, name) for name in ADDRESS_FIELDS}


def user_view(user) -> dict:
    user_id = str(user.id)
    return {
        "_id": user_id,
        "id": user_id,
        "username": user.username,
        "email": user.email,
        "role": user.role,
        "phoneNumber": user.phone_number,
        "avatar": user.avatar,
        "address": address_view(user.address),
        "createdAt": user.created_at.isoformat() if user.created_at else None,
        "updatedAt": user.updated_at.isoformat() if user.updated_at else None,
    }


def user_summary(user) -> dict:
    """The contact fields an order shows for its customer."""
    user_id = str(user.id)
    return {
        "_id": user_id,
        "id": user_id,
        "username": user.username,
        "email": user.email,
        "phoneNumber": user.phone_number,
        "address": address_view(user.address),
    }
