"""Utility functions for the PDF extraction stage."""

import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

_EXTENSIONS = {"plain/text": ".txt", "text/html": ".html"}


def setup_logging(verbose: bool = False) -> None:
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format=("%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
    )


def sanitize_filename(name: str) -> str:
    """Make a region name safe to use as part of a file name."""
    cleaned = re.sub(r"[^A-Za-z0-9._-]+", "_", name).strip("._")
    return cleaned or "region"


def output_filename(index: int, mime_type: Optional[str], region: Optional[str]) -> str:
    """Build the file name for the ``index``-th (1-based) output record."""
    extension = _EXTENSIONS.get(mime_type or "", ".bin")
    if region is not None:
        return f"output_{index:03d}_{sanitize_filename(region)}{extension}"
    return f"output_{index:03d}{extension}"
