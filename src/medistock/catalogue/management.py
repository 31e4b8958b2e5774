"""Catalogue maintenance: add, update and remove products."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Date, Dict, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from medistock.catalogue.product import Product
from medistock.domain import medistock

logger = structlog.get_logger(__name__)


@medistock.command(part_of="Product")
class AddProduct:
    name = String(required=True, max_length=255)
    description = Text(required=True)
    category = String(required=True, max_length=100)
    price = Float(required=True, min_value=0.0)
    stock = Integer(min_value=0)
    manufacturer = String(required=True, max_length=255)
    rack_no = String(max_length=50)
    expiry_date = Date()


@medistock.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    # Only the keys present are applied; a present key with a 0 or null value is a real change
    changes = Dict()


@medistock.command(part_of="Product")
class RemoveProduct:
    product_id = Identifier(required=True)


def _load(repo, product_id):
    product = repo.get_or_none(product_id)
    if product is None:
        raise ObjectNotFoundError("Product not found")
    return product


@medistock.command_handler(part_of=Product)
class ProductManagementHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.add(
            name=command.name,
            description=command.description,
            category=command.category,
            price=command.price,
            manufacturer=command.manufacturer,
            stock=command.stock,
            rack_no=command.rack_no,
            expiry_date=command.expiry_date,
        )
        current_domain.repository_for(Product).add(product)

        logger.info("product.added", product_id=str(product.id), rack_no=product.rack_no)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = _load(repo, command.product_id)

        changes = command.changes or {}
        product.update_details(**changes)
        repo.add(product)

        logger.info("product.updated", product_id=str(product.id), fields=sorted(changes))
        return str(product.id)

    @handle(RemoveProduct)
    def remove_product(self, command):
        repo = current_domain.repository_for(Product)
        product = _load(repo, command.product_id)
        repo._dao.delete(product)

        logger.info("product.removed", product_id=str(command.product_id))
