"""Record shape produced for every exported article."""

from __future__ import annotations

from dataclasses import dataclass

NO_HEADING = "no heading found"
NO_BREADCRUMB = "no breadcrumb found"
NO_BODY = "no body found"


@dataclass(slots=True)
class ExtractionRecord:
    """Fields pulled out of one document, in CSV column order."""

    id: str
    title: str = NO_HEADING
    category: str = NO_BREADCRUMB
    body_html: str = NO_BODY

    def as_row(self) -> list[str]:
        return [self.id, self.title, self.category, self.body_html]
