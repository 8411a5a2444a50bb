"""Base types and interfaces for PDF text extractors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Protocol

from pypdf import PdfReader

PLAIN_TEXT = "plain/text"
HTML_TEXT = "text/html"


@dataclass(frozen=True)
class Region:
    """Named rectangular extraction area.

    Coordinates are PDF user-space units measured from the top-left corner
    of the page's media box, with y growing downwards.

    Attributes:
        name: Region name, written to the ``pdf.region`` attribute.
        x: Left edge.
        y: Top edge.
        width: Width of the area (>= 0).
        height: Height of the area (>= 0).
    """

    name: str
    x: float
    y: float
    width: float
    height: float

    def contains(self, x: float, y: float) -> bool:
        """Return True if the point lies inside the area."""
        return (
            self.x <= x <= self.x + self.width
            and self.y <= y <= self.y + self.height
        )


@dataclass(frozen=True)
class PageRange:
    """Inclusive, 1-based page interval.

    The range is empty when ``end_page < start_page``.
    """

    start_page: int
    end_page: int

    @property
    def is_empty(self) -> bool:
        return self.end_page < self.start_page

    def __len__(self) -> int:
        return max(0, self.end_page - self.start_page + 1)

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start_page, self.end_page + 1))


@dataclass(frozen=True)
class ExtractedText:
    """One unit of extracted output."""

    text: str
    mime_type: str = PLAIN_TEXT
    region: Optional[str] = None


class DocumentTextExtractor(Protocol):
    """Protocol for whole-range extractors.

    Instances hold per-invocation state and must not be shared.
    """

    mime_type: str

    def get_text(self, reader: PdfReader, page_range: PageRange) -> str:
        """Extract the text of every page in ``page_range`` as one string."""
        ...


class RegionTextExtractor(Protocol):
    """Protocol for region-aware extractors."""

    regions: List[Region]

    def add_region(self, region: Region) -> None:
        """Register an area to read on every extracted page."""
        ...

    def extract_regions(self, reader: PdfReader, page_number: int) -> None:
        """Run one extraction pass over a 1-based page."""
        ...

    def get_text_for_region(self, name: str) -> str:
        """Return the text of ``name`` from the last extraction pass."""
        ...


def validate_page_range(reader: PdfReader, page_range: PageRange) -> None:
    """Reject ranges that do not address existing pages.

    Raises:
        ValueError: If the range is empty or outside the document.
    """
    total_pages = len(reader.pages)
    if page_range.start_page < 1 or page_range.is_empty:
        raise ValueError(
            f"Invalid page range {page_range.start_page}-{page_range.end_page} "
            f"for document with {total_pages} pages"
        )
    if page_range.end_page > total_pages:
        raise ValueError(
            f"End page {page_range.end_page} exceeds page count {total_pages}"
        )
