"""Catalogue queries: filtered and sorted product listings, distinct categories and racks."""

from protean.utils.query import Q

from medistock.catalogue.product import LOW_STOCK_THRESHOLD, Product, StockStatus
from medistock.domain import medistock

# Filter value meaning "do not filter on this field"
ALL = "all"

# Accepted sort keys, in both wire (camelCase) and attribute spelling
_SORT_FIELDS = {
    "name": "name",
    "price": "price",
    "stock": "stock",
    "category": "category",
    "manufacturer": "manufacturer",
    "rackNo": "rack_no",
    "rack_no": "rack_no",
    "expiryDate": "expiry_date",
    "expiry_date": "expiry_date",
    "createdAt": "created_at",
    "created_at": "created_at",
    "updatedAt": "updated_at",
    "updated_at": "updated_at",
}


def _is_set(value) -> bool:
    return value is not None and value != "" and value != ALL


def _stock_criteria(stock_status: str) -> Q | None:
    try:
        bucket = StockStatus(stock_status)
    except ValueError:
        return None

    if bucket is StockStatus.IN_STOCK:
        return Q(stock__gt=LOW_STOCK_THRESHOLD)
    if bucket is StockStatus.LOW_STOCK:
        return Q(stock__gte=1) & Q(stock__lte=LOW_STOCK_THRESHOLD)
    return Q(stock__lte=0)


def sort_expression(sort_by: str | None, sort_order: str | None) -> str:
    """Translate a wire sort key and direction into a query ordering.

    Unknown keys sort by creation time; the direction defaults to descending.
    """
    field_name = _SORT_FIELDS.get(sort_by or "", "created_at")
    ascending = (sort_order or "desc").lower() == "asc"
    return field_name if ascending else f"-{field_name}"


@medistock.repository(part_of=Product)
class ProductRepository:
    def search(
        self,
        search: str | None = None,
        category: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        stock_status: str | None = None,
        rack_no: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> list:
        """Products matching every supplied filter, in the requested order.

        ``search`` is a case-insensitive substring match over name,
        description, manufacturer and rack. A category or rack of ``"all"``
        disables that filter.
        """
        query = self.query

        if search and search.strip():
            term = search.strip()
            query = query.filter(
                Q(name__icontains=term)
                | Q(description__icontains=term)
                | Q(manufacturer__icontains=term)
                | Q(rack_no__icontains=term)
            )
        if _is_set(category):
            query = query.filter(category=category)
        if _is_set(rack_no):
            query = query.filter(rack_no=rack_no)
        if min_price is not None:
            query = query.filter(price__gte=min_price)
        if max_price is not None:
            query = query.filter(price__lte=max_price)
        if _is_set(stock_status):
            bucket = _stock_criteria(stock_status)
            if bucket is not None:
                query = query.filter(bucket)

        return query.order_by(sort_expression(sort_by, sort_order)).all().items

    def categories(self) -> list[str]:
        return sorted({product.category for product in self.query.all().items})

    def racks(self) -> list[str]:
        return sorted(
            {product.rack_no for product in self.query.all().items if product.rack_no}
        )
