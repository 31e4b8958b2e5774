"""CSV bulk import of products, and the downloadable template that describes the format.

Rows are validated first and every valid row is then inserted through its own
``AddProduct`` command, so one bad row never blocks the rest of the file.
"""

import csv
import io
from dataclasses import dataclass, field
from datetime import date

import structlog
from protean.exceptions import ProteanException, ValidationError
from protean.utils.globals import current_domain

from medistock.catalogue.management import AddProduct
from medistock.domain import medistock

logger = structlog.get_logger(__name__)

TEMPLATE_FILENAME = "product_template.csv"
TEMPLATE_HEADER = (
    "name",
    "description",
    "category",
    "price",
    "stock",
    "manufacturer",
    "rack",
    "expiry",
)
TEMPLATE_ROWS = (
    (
        "Paracetamol 500mg",
        "Pain reliever and fever reducer, strip of 10 tablets",
        "Analgesics",
        "2.50",
        "120",
        "Cipla",
        "A1",
        "2026-12-31",
    ),
    (
        "Amoxicillin 250mg",
        "Broad-spectrum antibiotic capsules, pack of 15",
        "Antibiotics",
        "6.75",
        "45",
        "Sun Pharma",
        "B2",
        "2026-06-30",
    ),
    (
        "Digital Thermometer",
        "Fast-read digital thermometer with fever alarm",
        "Medical Devices",
        "12.00",
        "8",
        "Omron",
        "C3",
        "",
    ),
)

REQUIRED_COLUMNS = ("name", "description", "category", "price", "manufacturer")


class RowError(ValueError):
    """A single CSV row that cannot become a product."""


@dataclass
class ImportReport:
    total_rows: int = 0
    inserted: int = 0
    errors: list[dict] = field(default_factory=list)

    def record_error(self, row: int, data: dict, error: str) -> None:
        self.errors.append({"row": row, "data": data, "error": error})

    def as_response(self) -> dict:
        preview = medistock.IMPORT_ERROR_PREVIEW
        return {
            "msg": f"Bulk upload completed: {self.inserted} products inserted",
            "inserted": self.inserted,
            "totalRows": self.total_rows,
            "errors": len(self.errors),
            "errorDetails": self.errors[:preview],
        }


def csv_template() -> str:
    """The header row plus three example products, as CSV text."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(TEMPLATE_HEADER)
    writer.writerows(TEMPLATE_ROWS)
    return buffer.getvalue()


def _normalise_header(name: str | None) -> str:
    return (name or "").strip().lower()


def _text(raw: dict, key: str) -> str:
    return (raw.get(key) or "").strip()


def parse_row(raw: dict) -> dict:
    """Turn one CSV row into ``AddProduct`` keyword arguments.

    Raises ``RowError`` naming the first problem found.
    """
    missing = [column for column in REQUIRED_COLUMNS if not _text(raw, column)]
    if missing:
        raise RowError(f"Missing required fields: {', '.join(missing)}")

    try:
        price = float(_text(raw, "price"))
    except ValueError:
        raise RowError(f"Invalid price '{_text(raw, 'price')}'") from None
    if price < 0:
        raise RowError("Price cannot be negative")

    stock_text = _text(raw, "stock")
    try:
        stock = int(stock_text) if stock_text else 0
    except ValueError:
        raise RowError(f"Invalid stock '{stock_text}'") from None
    if stock < 0:
        raise RowError("Stock cannot be negative")

    expiry_text = _text(raw, "expiry")
    expiry_date = None
    if expiry_text:
        try:
            expiry_date = date.fromisoformat(expiry_text)
        except ValueError:
            raise RowError(
                f"Invalid expiry date '{expiry_text}', expected YYYY-MM-DD"
            ) from None

    return {
        "name": _text(raw, "name"),
        "description": _text(raw, "description"),
        "category": _text(raw, "category"),
        "price": price,
        "stock": stock,
        "manufacturer": _text(raw, "manufacturer"),
        "rack_no": _text(raw, "rack") or medistock.DEFAULT_RACK,
        "expiry_date": expiry_date,
    }


def read_rows(path: str) -> list[dict]:
    """Rows of the CSV file at ``path`` keyed by normalised header name."""
    try:
        with open(path, newline="", encoding="utf-8-sig") as handle:
            reader = csv.reader(handle)
            header = next(reader, None)
            if not header or not any(_normalise_header(name) for name in header):
                raise ValidationError({"file": ["CSV file has no header row"]})

            columns = [_normalise_header(name) for name in header]
            absent = [column for column in REQUIRED_COLUMNS if column not in columns]
            if absent:
                raise ValidationError(
                    {"file": [f"CSV header is missing columns: {', '.join(absent)}"]}
                )

            rows = []
            for values in reader:
                if not any(value.strip() for value in values):
                    continue
                rows.append(dict(zip(columns, values)))
            return rows
    except (UnicodeDecodeError, csv.Error) as exc:
        raise ValidationError({"file": [f"Could not read CSV file: {exc}"]}) from exc


def import_products(path: str) -> ImportReport:
    """Validate every row of the file, then insert the valid ones one by one."""
    rows = read_rows(path)
    report = ImportReport(total_rows=len(rows))

    valid = []
    # Row 1 is the header
    for row_number, raw in enumerate(rows, start=2):
        try:
            valid.append((row_number, raw, parse_row(raw)))
        except RowError as exc:
            report.record_error(row_number, raw, str(exc))

    for row_number, raw, fields in valid:
        try:
            current_domain.process(AddProduct(**fields), asynchronous=False)
        except ValidationError as exc:
            report.record_error(row_number, raw, str(exc.messages))
        except ProteanException as exc:
            logger.warning("bulk_import.row_failed", row=row_number, error=str(exc))
            report.record_error(row_number, raw, str(exc))
        else:
            report.inserted += 1

    logger.info(
        "bulk_import.finished",
        total_rows=report.total_rows,
        inserted=report.inserted,
        errors=len(report.errors),
    )
    return report
