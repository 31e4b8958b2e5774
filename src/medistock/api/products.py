"""FastAPI endpoints for the product catalogue."""

import os
import shutil
import tempfile

import structlog
from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import Response
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from medistock.api.dependencies import require
from medistock.api.schemas import CreateProductRequest, MessageResponse, UpdateProductRequest
from medistock.catalogue.bulk_import import TEMPLATE_FILENAME, csv_template, import_products
from medistock.catalogue.management import AddProduct, RemoveProduct, UpdateProduct
from medistock.catalogue.product import Product
from medistock.catalogue.views import product_view
from medistock.identity.policy import Action, Caller

logger = structlog.get_logger(__name__)

product_router = APIRouter(prefix="/api/products", tags=["products"])

_CSV_CONTENT_TYPES = {"text/csv", "application/csv", "application/vnd.ms-excel", "text/plain"}


def _load_product(product_id: str) -> Product:
    product = current_domain.repository_for(Product).get_or_none(product_id)
    if product is None:
        raise ObjectNotFoundError("Product not found")
    return product


@product_router.get("")
async def list_products(
    search: str | None = None,
    category: str | None = None,
    min_price: float | None = Query(None, alias="minPrice"),
    max_price: float | None = Query(None, alias="maxPrice"),
    stock_status: str | None = Query(None, alias="stockStatus"),
    rack_no: str | None = Query(None, alias="rackNo"),
    sort_by: str | None = Query(None, alias="sortBy"),
    sort_order: str | None = Query(None, alias="sortOrder"),
) -> list[dict]:
    products = current_domain.repository_for(Product).search(
        search=search,
        category=category,
        min_price=min_price,
        max_price=max_price,
        stock_status=stock_status,
        rack_no=rack_no,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return [product_view(product) for product in products]


@product_router.get("/categories")
async def list_categories() -> list[str]:
    return current_domain.repository_for(Product).categories()


@product_router.get("/racks")
async def list_racks() -> list[str]:
    return current_domain.repository_for(Product).racks()


@product_router.get("/template")
async def download_template(caller: Caller = Depends(require(Action.CATALOGUE_MANAGE))) -> Response:
    return Response(
        content=csv_template(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{TEMPLATE_FILENAME}"'},
    )


@product_router.post("/bulk-upload")
async def bulk_upload(
    file: UploadFile = File(...),
    caller: Caller = Depends(require(Action.CATALOGUE_MANAGE)),
) -> dict:
    filename = file.filename or ""
    content_type = (file.content_type or "").split(";")[0].strip().lower()
    if not filename.lower().endswith(".csv") and content_type not in _CSV_CONTENT_TYPES:
        raise ValidationError({"file": ["Please upload a CSV file"]})

    handle, path = tempfile.mkstemp(prefix="medistock-import-", suffix=".csv")
    try:
        with os.fdopen(handle, "wb") as target:
            shutil.copyfileobj(file.file, target)

        logger.info("bulk_import.started", filename=filename)
        report = import_products(path)
    finally:
        os.remove(path)

    return report.as_response()


@product_router.get("/{product_id}")
async def get_product(product_id: str) -> dict:
    return product_view(_load_product(product_id))


@product_router.post("", status_code=201)
async def create_product(
    body: CreateProductRequest,
    caller: Caller = Depends(require(Action.CATALOGUE_MANAGE)),
) -> dict:
    command = AddProduct(
        name=body.name,
        description=body.description,
        category=body.category,
        price=body.price,
        stock=body.stock,
        manufacturer=body.manufacturer,
        rack_no=body.rack_no,
        expiry_date=body.expiry_date,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return product_view(_load_product(product_id))


@product_router.put("/{product_id}")
async def update_product(
    product_id: str,
    body: UpdateProductRequest,
    caller: Caller = Depends(require(Action.CATALOGUE_MANAGE)),
) -> dict:
    changes = body.model_dump(mode="json", exclude_unset=True)
    current_domain.process(UpdateProduct(product_id=product_id, changes=changes), asynchronous=False)
    return product_view(_load_product(product_id))


@product_router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: str,
    caller: Caller = Depends(require(Action.CATALOGUE_MANAGE)),
) -> MessageResponse:
    current_domain.process(RemoveProduct(product_id=product_id), asynchronous=False)
    return MessageResponse(msg="Product removed")
