"""PDF text extraction stage for flow-based pipelines."""

__version__ = "0.1.0"

from .config import StageConfig
from .exceptions import (
    ConfigurationError,
    DecodeError,
    ExtractionError,
    ExtractPDFError,
    InvalidInputError,
)
from .extractors import ExtractedText, Operation, PageRange, Region
from .processor import ExtractPDFProcessor
from .session import FlowFile, MemorySession, Relationship

__all__ = [
    "__version__",
    "ConfigurationError",
    "DecodeError",
    "ExtractedText",
    "ExtractionError",
    "ExtractPDFError",
    "ExtractPDFProcessor",
    "FlowFile",
    "InvalidInputError",
    "MemorySession",
    "Operation",
    "PageRange",
    "Region",
    "Relationship",
    "StageConfig",
]
