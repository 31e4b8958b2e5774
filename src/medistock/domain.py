"""MediStock domain composition root.

A single Protean domain holds the catalogue, identity and ordering packages so
that checkout can change Products and create an Order in one Unit of Work.
Configuration comes from ``domain.toml`` next to this file, overlaid by the
section named in ``PROTEAN_ENV``.
"""

from protean.domain import Domain

from medistock.utils.logging import configure_logging, get_logger

configure_logging(log_dir="logs", log_file_prefix="medistock")

logger = get_logger(__name__)

medistock = Domain(name="medistock")
