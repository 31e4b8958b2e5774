"""Postal address value object, shared by user profiles and order snapshots."""

from protean.fields import String

from medistock.domain import medistock

ADDRESS_FIELDS = ("street", "city", "state", "zip_code", "country")


@medistock.value_object
class Address:
    """A postal address where every part is optional.

    Checkout needs at least a street and a city, see ``is_complete``.
    """

    street: String(max_length=255)
    city: String(max_length=100)
    state: String(max_length=100)
    zip_code: String(max_length=20)
    country: String(max_length=100)

    @property
    def is_complete(self) -> bool:
        return bool((self.street or "").strip() and (self.city or "").strip())

    def merged(self, changes: dict) -> "Address":
        """A new address with the supplied parts replaced and the rest kept."""
        return self.replace(**{k: v for k, v in changes.items() if k in ADDRESS_FIELDS})
