"""JSON views of products, keyed the way API clients expect them."""


def _iso(value):
    return value.isoformat() if value is not None else None


def product_view(product) -> dict:
    product_id = str(product.id)
    return {
        "_id": product_id,
        "id": product_id,
        "name": product.name,
        "description": product.description,
        "category": product.category,
        "price": product.price,
        "stock": product.stock,
        "stockStatus": product.stock_status.value,
        "manufacturer": product.manufacturer,
        "rackNo": product.rack_no,
        "expiryDate": _iso(product.expiry_date),
        "createdAt": _iso(product.created_at),
        "updatedAt": _iso(product.updated_at),
    }


def product_summary(product) -> dict:
    """The fields an order line shows for its product."""
    product_id = str(product.id)
    return {
        "_id": product_id,
        "id": product_id,
        "name": product.name,
        "category": product.category,
        "manufacturer": product.manufacturer,
        "rackNo": product.rack_no,
        "price": product.price,
    }
