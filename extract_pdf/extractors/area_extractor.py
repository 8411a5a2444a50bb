"""Region-aware text extractor built on pypdf's text visitor."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from pypdf import PageObject, PdfReader

from .base import Region

logger = logging.getLogger(__name__)

# Fragments whose baselines differ by less than this share a line.
LINE_TOLERANCE = 1.0


@dataclass(frozen=True)
class TextFragment:
    """Text drawn at one position, in top-left page coordinates."""

    x: float
    y: float
    text: str


def _origin(cm: Sequence[float], tm: Sequence[float]) -> Tuple[float, float]:
    # Translation part of tm x cm: where the text matrix places its origin.
    x = tm[4] * cm[0] + tm[5] * cm[2] + cm[4]
    y = tm[4] * cm[1] + tm[5] * cm[3] + cm[5]
    return float(x), float(y)


def collect_fragments(page: PageObject) -> List[TextFragment]:
    """Return the positioned text fragments of a page in content order."""
    box = page.mediabox
    left, top = float(box.left), float(box.top)
    fragments: List[TextFragment] = []

    def visitor(text: Any, cm: Any, tm: Any, font_dict: Any, font_size: Any) -> None:
        text = (text or "").strip("\n")
        if not text.strip():
            return
        x, y = _origin(cm, tm)
        fragments.append(TextFragment(x=x - left, y=top - y, text=text))

    page.extract_text(visitor_text=visitor)
    return fragments


class AreaTextExtractor:
    """Extract text per named region, one page at a time.

    Call :meth:`extract_regions` once for a page, then read each region with
    :meth:`get_text_for_region`.
    """

    def __init__(self, line_separator: str = "\n") -> None:
        self.line_separator = line_separator
        self.regions: List[Region] = []
        self._region_text: Dict[str, str] = {}

    def add_region(self, region: Region) -> None:
        self.regions.append(region)

    def extract_regions(self, reader: PdfReader, page_number: int) -> None:
        page = reader.pages[page_number - 1]
        fragments = collect_fragments(page)
        self._region_text = {
            region.name: self._join_lines(
                [f for f in fragments if region.contains(f.x, f.y)]
            )
            for region in self.regions
        }
        logger.debug(
            "Page %s: %s fragments across %s regions",
            page_number,
            len(fragments),
            len(self.regions),
        )

    def get_text_for_region(self, name: str) -> str:
        return self._region_text.get(name, "")

    def _join_lines(self, fragments: List[TextFragment]) -> str:
        lines: List[str] = []
        current: List[str] = []
        last_y = None
        for fragment in fragments:
            if last_y is not None and abs(fragment.y - last_y) > LINE_TOLERANCE:
                lines.append("".join(current))
                current = []
            current.append(fragment.text)
            last_y = fragment.y
        if current:
            lines.append("".join(current))
        return "".join(line.rstrip() + self.line_separator for line in lines)
