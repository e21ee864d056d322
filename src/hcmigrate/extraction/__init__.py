"""Article field extraction."""

from .extractor import extract_from_markup, extract_record, parse_markup
from .models import NO_BODY, NO_BREADCRUMB, NO_HEADING, ExtractionRecord

__all__ = [
    "ExtractionRecord",
    "NO_BODY",
    "NO_BREADCRUMB",
    "NO_HEADING",
    "extract_from_markup",
    "extract_record",
    "parse_markup",
]
