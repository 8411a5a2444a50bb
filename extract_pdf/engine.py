"""Extraction engine: runs one operation over a decoded document."""

from __future__ import annotations

import logging
from typing import List, Sequence

from pypdf import PdfReader

from .exceptions import ExtractionError, ExtractPDFError
from .extractors import (
    PLAIN_TEXT,
    AreaTextExtractor,
    ExtractedText,
    Operation,
    PageRange,
    Region,
)

logger = logging.getLogger(__name__)


def extract(
    reader: PdfReader,
    operation: Operation,
    page_range: PageRange,
    regions: Sequence[Region] = (),
) -> List[ExtractedText]:
    """Extract text from ``reader`` with a fresh extractor for ``operation``.

    Region extraction yields one result per page and region, ordered by page
    and then by region declaration. The other operations yield exactly one
    result for the whole range.

    Raises:
        ExtractionError: If the underlying extraction fails, including when
            a whole-range operation is given an empty or out-of-bounds range.
    """
    extractor = operation.create_extractor()
    try:
        if isinstance(extractor, AreaTextExtractor):
            return _extract_regions(extractor, reader, page_range, regions)
        text = extractor.get_text(reader, page_range)
        return [ExtractedText(text=text, mime_type=extractor.mime_type)]
    except ExtractPDFError:
        raise
    except Exception as e:
        raise ExtractionError(
            f"{operation.value} extraction failed for pages "
            f"{page_range.start_page}-{page_range.end_page}: {e}"
        ) from e


def _extract_regions(
    extractor: AreaTextExtractor,
    reader: PdfReader,
    page_range: PageRange,
    regions: Sequence[Region],
) -> List[ExtractedText]:
    for region in regions:
        extractor.add_region(region)

    results: List[ExtractedText] = []
    for page_number in page_range:
        extractor.extract_regions(reader, page_number)
        for region in extractor.regions:
            results.append(
                ExtractedText(
                    text=extractor.get_text_for_region(region.name),
                    mime_type=PLAIN_TEXT,
                    region=region.name,
                )
            )
    if page_range.is_empty:
        logger.debug(
            "Empty page range %s-%s, no regions extracted",
            page_range.start_page,
            page_range.end_page,
        )
    return results
