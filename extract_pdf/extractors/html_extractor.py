"""HTML rendering text extractor."""

from __future__ import annotations

import html
import logging
import re
from typing import List

from pypdf import PdfReader

from .base import HTML_TEXT, PageRange
from .text_extractor import PlainTextExtractor

logger = logging.getLogger(__name__)

PAGE_DIV = '<div style="page-break-before:always; page-break-after:always">'


class HTMLTextExtractor(PlainTextExtractor):
    """Render the text of a page range as a simple HTML document.

    Each page becomes a ``div`` with page-break styling, blank-line separated
    blocks become paragraphs and line breaks inside a block become ``<br/>``.
    """

    mime_type = HTML_TEXT

    def _title(self, reader: PdfReader) -> str:
        metadata = reader.metadata
        if metadata is None or not metadata.title:
            return ""
        return str(metadata.title)

    def _render_page(self, text: str) -> str:
        paragraphs: List[str] = []
        for block in re.split(r"\n\s*\n+", text.strip("\n")):
            lines = [html.escape(line.rstrip()) for line in block.split("\n")]
            if any(lines):
                paragraphs.append("<p>" + "<br/>".join(lines) + "</p>")
        return PAGE_DIV + "".join(paragraphs) + "</div>"

    def get_text(self, reader: PdfReader, page_range: PageRange) -> str:
        pages = [self._render_page(t) for t in self.get_page_texts(reader, page_range)]
        parts = [
            "<!DOCTYPE html>",
            "<html>",
            "<head>",
            f"<title>{html.escape(self._title(reader))}</title>",
            '<meta http-equiv="Content-Type" content="text/html; charset=UTF-8">',
            "</head>",
            "<body>",
            *pages,
            "</body>",
            "</html>",
        ]
        logger.debug("Rendered %s pages as HTML", len(pages))
        return self.line_separator.join(parts) + self.line_separator
