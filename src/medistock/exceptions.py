"""Application exceptions that have no Protean counterpart.

Protean's own exceptions cover validation (400), missing objects (404) and
version conflicts. These add the authentication and authorization outcomes and
the checkout signal that tells the client to complete the profile first.
"""

from protean.exceptions import ValidationError


class NotAuthenticatedError(Exception):
    """No valid credentials accompanied the request."""


class NotAuthorizedError(Exception):
    """The caller is authenticated but may not perform the action."""


class AddressRequiredError(ValidationError):
    """Checkout attempted by a user without a street and city on file."""

    message = "Please complete your address before placing an order"

    def __init__(self) -> None:
        super().__init__({"address": [self.message]})
