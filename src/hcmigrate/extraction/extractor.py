"""Turn one article file into an :class:`ExtractionRecord`."""

from __future__ import annotations

import logging
from pathlib import Path

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from hcmigrate.errors import DocumentParseError
from hcmigrate.extraction.models import NO_BODY, NO_BREADCRUMB, NO_HEADING, ExtractionRecord
from hcmigrate.extraction.query import (
    find_all_by_class_substring,
    find_by_class_substring,
    find_by_tag,
    first_nth_child,
    inner_html,
)
from hcmigrate.files.encoding import detect_encoding, has_unicode_bom

logger = logging.getLogger(__name__)

BREADCRUMB_CLASS = "breadcrumbs"
BODY_CLASS = "article-body"
CATEGORY_POSITION = 2
_SNIFF_BYTES = 4096


def parse_markup(markup: str, path: Path | None = None) -> BeautifulSoup:
    """Parse *markup* leniently; raise when nothing usable comes out."""

    source = path or Path("<memory>")
    try:
        soup = BeautifulSoup(markup, "lxml")
    except ParserRejectedMarkup as exc:
        raise DocumentParseError(source, f"Parser rejected markup: {exc}") from exc

    if soup.find(True) is None:
        raise DocumentParseError(source, "No markup elements found")
    return soup


def extract_from_soup(doc_id: str, soup: BeautifulSoup) -> ExtractionRecord:
    record = ExtractionRecord(id=doc_id)

    heading = find_by_tag(soup, "h1")
    if heading is not None:
        record.title = heading.get_text()
    else:
        logger.info("%s: %s", doc_id, NO_HEADING)

    category = first_nth_child(find_all_by_class_substring(soup, BREADCRUMB_CLASS), "li", CATEGORY_POSITION)
    if category is not None:
        record.category = category.get_text()
    else:
        logger.info("%s: %s", doc_id, NO_BREADCRUMB)

    body = find_by_class_substring(soup, BODY_CLASS)
    if body is not None:
        record.body_html = inner_html(body)
    else:
        logger.info("%s: %s", doc_id, NO_BODY)

    return record


def extract_from_markup(doc_id: str, markup: str, *, path: Path | None = None) -> ExtractionRecord:
    """Extract title, category and body from an in-memory document."""

    return extract_from_soup(doc_id, parse_markup(markup, path))


def extract_record(path: Path) -> ExtractionRecord:
    """Read and extract one article; the record id is the filename stem.

    Raises :class:`DocumentParseError` when the file cannot be read, is
    empty, looks binary, or yields no elements at all.
    """

    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise DocumentParseError(path, f"Failed to read document: {exc}") from exc

    if not raw.strip():
        raise DocumentParseError(path, "Document is empty")
    if not has_unicode_bom(raw) and b"\x00" in raw[:_SNIFF_BYTES]:
        raise DocumentParseError(path, "Document looks binary")

    try:
        markup = raw.decode(detect_encoding(raw))
    except (ValueError, LookupError) as exc:
        raise DocumentParseError(path, f"Could not decode document: {exc}") from exc

    return extract_from_markup(path.stem, markup, path=path)
