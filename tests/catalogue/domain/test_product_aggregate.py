"""Tests for the Product aggregate."""

from datetime import date

import pytest
from medistock.catalogue.product import Product, StockStatus
from protean.exceptions import ValidationError


def _make_product(**overrides):
    defaults = {
        "name": "Amoxicillin 250mg",
        "description": "Antibiotic capsules",
        "category": "Antibiotics",
        "price": 6.75,
        "manufacturer": "Sun Pharma",
    }
    defaults.update(overrides)
    return Product.add(**defaults)


class TestProductDefaults:
    def test_rack_defaults_to_a1(self):
        assert _make_product().rack_no == "A1"

    def test_blank_rack_defaults_to_a1(self):
        assert _make_product(rack_no="   ").rack_no == "A1"

    def test_rack_is_trimmed(self):
        assert _make_product(rack_no=" B2 ").rack_no == "B2"

    def test_stock_defaults_to_zero(self):
        assert _make_product().stock == 0

    def test_timestamps_are_set(self):
        product = _make_product()
        assert product.created_at is not None
        assert product.updated_at == product.created_at

    @pytest.mark.parametrize("field", ["name", "description", "category", "manufacturer"])
    def test_required_text_fields(self, field):
        with pytest.raises(ValidationError) as exc:
            _make_product(**{field: ""})
        assert field in exc.value.messages


class TestProductInvariants:
    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(stock=-1)

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(price=-0.01)

    def test_zero_price_allowed(self):
        assert _make_product(price=0.0).price == 0.0


class TestStockStatus:
    @pytest.mark.parametrize(
        "stock, expected",
        [
            (11, StockStatus.IN_STOCK),
            (10, StockStatus.LOW_STOCK),
            (5, StockStatus.LOW_STOCK),
            (1, StockStatus.LOW_STOCK),
            (0, StockStatus.OUT_OF_STOCK),
        ],
    )
    def test_buckets(self, stock, expected):
        assert _make_product(stock=stock).stock_status is expected


class TestUpdateDetails:
    def test_only_supplied_fields_change(self):
        product = _make_product(stock=20, rack_no="C3")
        product.update_details(name="Amoxicillin 500mg")

        assert product.name == "Amoxicillin 500mg"
        assert product.stock == 20
        assert product.rack_no == "C3"

    def test_zero_stock_is_applied(self):
        product = _make_product(stock=20)
        product.update_details(stock=0)
        assert product.stock == 0

    def test_zero_price_is_applied(self):
        product = _make_product()
        product.update_details(price=0)
        assert product.price == 0

    def test_none_clears_expiry(self):
        product = _make_product(expiry_date=date(2027, 1, 31))
        product.update_details(expiry_date=None)
        assert product.expiry_date is None

    def test_blank_required_field_rejected(self):
        product = _make_product()
        with pytest.raises(ValidationError):
            product.update_details(name="")

    def test_refreshes_updated_at(self):
        product = _make_product()
        before = product.updated_at
        product.update_details(category="Antibiotics")
        assert product.updated_at >= before


class TestStockMovements:
    def test_reserve_decrements(self):
        product = _make_product(stock=5)
        product.reserve_stock(3)
        assert product.stock == 2

    def test_reserve_all_remaining(self):
        product = _make_product(stock=5)
        product.reserve_stock(5)
        assert product.stock == 0

    def test_reserve_more_than_on_hand_refused(self):
        product = _make_product(stock=2)
        with pytest.raises(ValidationError) as exc:
            product.reserve_stock(3)

        assert exc.value.messages == {"stock": ["Insufficient stock for Amoxicillin 250mg"]}
        assert product.stock == 2

    def test_reserve_zero_refused(self):
        product = _make_product(stock=2)
        with pytest.raises(ValidationError):
            product.reserve_stock(0)

    def test_restore_increments(self):
        product = _make_product(stock=2)
        product.restore_stock(4)
        assert product.stock == 6
