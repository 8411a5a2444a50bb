"""Full-document plain text extractor."""

from __future__ import annotations

import logging
from typing import List

from pypdf import PdfReader

from .base import PLAIN_TEXT, PageRange, validate_page_range

logger = logging.getLogger(__name__)


class PlainTextExtractor:
    """Extract the text of a page range as a single string.

    Every non-empty page contributes its lines followed by a line separator,
    in page order.
    """

    mime_type = PLAIN_TEXT

    def __init__(self, line_separator: str = "\n") -> None:
        self.line_separator = line_separator

    def get_page_texts(self, reader: PdfReader, page_range: PageRange) -> List[str]:
        """Return the raw text of every page in the range."""
        validate_page_range(reader, page_range)
        texts: List[str] = []
        for page_number in page_range:
            text = reader.pages[page_number - 1].extract_text() or ""
            logger.debug("Extracted page %s: %s characters", page_number, len(text))
            texts.append(text)
        return texts

    def get_text(self, reader: PdfReader, page_range: PageRange) -> str:
        chunks: List[str] = []
        for text in self.get_page_texts(reader, page_range):
            text = text.rstrip("\n")
            if not text:
                continue
            chunks.append(text.replace("\n", self.line_separator) + self.line_separator)
        return "".join(chunks)
