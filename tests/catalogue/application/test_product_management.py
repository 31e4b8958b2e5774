"""Application tests for adding, updating and removing products."""

from datetime import date

import pytest
from medistock.catalogue.management import AddProduct, RemoveProduct, UpdateProduct
from medistock.catalogue.product import Product
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _add_product(**overrides):
    values = {
        "name": "Cetirizine 10mg",
        "description": "Antihistamine tablets",
        "category": "Allergy",
        "price": 4.0,
        "stock": 30,
        "manufacturer": "Dr. Reddy's",
    }
    values.update(overrides)
    return current_domain.process(AddProduct(**values), asynchronous=False)


class TestAddProduct:
    def test_add_persists_product(self):
        product_id = _add_product(rack_no="E5", expiry_date=date(2027, 5, 1))

        product = current_domain.repository_for(Product).get(product_id)
        assert product.name == "Cetirizine 10mg"
        assert product.stock == 30
        assert product.rack_no == "E5"
        assert product.expiry_date == date(2027, 5, 1)

    def test_add_without_rack_uses_default(self):
        product_id = _add_product()
        assert current_domain.repository_for(Product).get(product_id).rack_no == "A1"

    def test_add_without_stock_starts_empty(self):
        product_id = _add_product(stock=None)
        assert current_domain.repository_for(Product).get(product_id).stock == 0

    def test_add_rejects_negative_price(self):
        with pytest.raises(ValidationError):
            _add_product(price=-5.0)

    def test_add_rejects_missing_name(self):
        with pytest.raises(ValidationError):
            current_domain.process(
                AddProduct(description="x", category="y", price=1.0, manufacturer="z"),
                asynchronous=False,
            )


class TestUpdateProduct:
    def test_partial_update(self, make_product):
        product = make_product(stock=12, rack_no="B1")

        current_domain.process(
            UpdateProduct(product_id=product.id, changes={"price": 3.1}),
            asynchronous=False,
        )

        refreshed = current_domain.repository_for(Product).get(product.id)
        assert refreshed.price == 3.1
        assert refreshed.stock == 12
        assert refreshed.rack_no == "B1"

    def test_stock_can_be_set_to_zero(self, make_product):
        product = make_product(stock=12)

        current_domain.process(
            UpdateProduct(product_id=product.id, changes={"stock": 0}),
            asynchronous=False,
        )

        assert current_domain.repository_for(Product).get(product.id).stock == 0

    def test_negative_stock_rejected(self, make_product):
        product = make_product(stock=12)

        with pytest.raises(ValidationError):
            current_domain.process(
                UpdateProduct(product_id=product.id, changes={"stock": -1}),
                asynchronous=False,
            )
        assert current_domain.repository_for(Product).get(product.id).stock == 12

    def test_unknown_product(self):
        with pytest.raises(ObjectNotFoundError, match="Product not found"):
            current_domain.process(
                UpdateProduct(product_id="missing-product", changes={"price": 1.0}),
                asynchronous=False,
            )


class TestRemoveProduct:
    def test_remove_deletes_product(self, make_product):
        product = make_product()

        current_domain.process(RemoveProduct(product_id=product.id), asynchronous=False)

        assert current_domain.repository_for(Product).get_or_none(product.id) is None

    def test_remove_unknown_product(self):
        with pytest.raises(ObjectNotFoundError, match="Product not found"):
            current_domain.process(RemoveProduct(product_id="missing-product"), asynchronous=False)
