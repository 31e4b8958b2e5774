"""Product aggregate: a stocked medical item kept on a labelled rack."""

from datetime import datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Date, DateTime, Float, Integer, String, Text

from medistock.domain import medistock

DEFAULT_RACK = medistock.DEFAULT_RACK
LOW_STOCK_THRESHOLD = medistock.LOW_STOCK_THRESHOLD

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()

_UPDATABLE = ("name", "description", "category", "price", "stock", "manufacturer", "rack_no", "expiry_date")


class StockStatus(Enum):
    """Stock-status buckets used to filter and label the catalogue."""

    IN_STOCK = "in-stock"
    LOW_STOCK = "low-stock"
    OUT_OF_STOCK = "out-of-stock"

    @classmethod
    def for_quantity(cls, stock: int) -> "StockStatus":
        if stock <= 0:
            return cls.OUT_OF_STOCK
        if stock <= LOW_STOCK_THRESHOLD:
            return cls.LOW_STOCK
        return cls.IN_STOCK


@medistock.aggregate(limit=-1)
class Product:
    """A catalogue item with a price, an on-hand quantity and a rack location.

    Stock is only ever moved through ``reserve_stock`` and ``restore_stock`` so
    that the quantity can never be observed below zero.
    """

    name: String(required=True, max_length=255)
    description: Text(required=True)
    category: String(required=True, max_length=100)
    price: Float(required=True, min_value=0.0)
    stock: Integer(default=0, min_value=0)
    manufacturer: String(required=True, max_length=255)
    rack_no: String(required=True, max_length=50, default=DEFAULT_RACK)
    expiry_date: Date()
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    @invariant.post
    def price_cannot_be_negative(self):
        if self.price is not None and self.price < 0:
            raise ValidationError({"price": ["Price cannot be negative"]})

    @classmethod
    def add(
        cls,
        name,
        description,
        category,
        price,
        manufacturer,
        stock=None,
        rack_no=None,
        expiry_date=None,
    ):
        now = datetime.now()
        return cls(
            name=name,
            description=description,
            category=category,
            price=price,
            stock=stock if stock is not None else 0,
            manufacturer=manufacturer,
            rack_no=rack_no.strip() if rack_no and rack_no.strip() else DEFAULT_RACK,
            expiry_date=expiry_date,
            created_at=now,
            updated_at=now,
        )

    @property
    def stock_status(self) -> StockStatus:
        return StockStatus.for_quantity(self.stock or 0)

    def update_details(
        self,
        name=_UNSET,
        description=_UNSET,
        category=_UNSET,
        price=_UNSET,
        stock=_UNSET,
        manufacturer=_UNSET,
        rack_no=_UNSET,
        expiry_date=_UNSET,
    ):
        """Apply only the supplied fields. ``0`` and ``None`` are real values here."""
        supplied = {
            "name": name,
            "description": description,
            "category": category,
            "price": price,
            "stock": stock,
            "manufacturer": manufacturer,
            "rack_no": rack_no,
            "expiry_date": expiry_date,
        }
        for field_name in _UPDATABLE:
            value = supplied[field_name]
            if value is not _UNSET:
                setattr(self, field_name, value)

        self.updated_at = datetime.now()

    def reserve_stock(self, quantity: int) -> None:
        """Take ``quantity`` units out of stock, refusing if fewer are on hand."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if self.stock < quantity:
            raise ValidationError({"stock": [f"Insufficient stock for {self.name}"]})

        self.stock -= quantity
        self.updated_at = datetime.now()

    def restore_stock(self, quantity: int) -> None:
        """Put ``quantity`` units back, reversing an earlier reservation."""
        self.stock += quantity
        self.updated_at = datetime.now()
