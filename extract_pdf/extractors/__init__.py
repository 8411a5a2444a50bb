"""Extractor interfaces and implementations for the supported operations."""

from .area_extractor import AreaTextExtractor
from .base import (
    HTML_TEXT,
    PLAIN_TEXT,
    DocumentTextExtractor,
    ExtractedText,
    PageRange,
    Region,
    RegionTextExtractor,
)
from .html_extractor import HTMLTextExtractor
from .strategies import Operation
from .text_extractor import PlainTextExtractor

__all__ = [
    "AreaTextExtractor",
    "DocumentTextExtractor",
    "ExtractedText",
    "HTML_TEXT",
    "HTMLTextExtractor",
    "Operation",
    "PLAIN_TEXT",
    "PageRange",
    "PlainTextExtractor",
    "Region",
    "RegionTextExtractor",
]
