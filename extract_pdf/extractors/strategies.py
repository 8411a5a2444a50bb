"""Extraction operations and the factory for their extractors."""

from __future__ import annotations

from enum import Enum
from typing import Union

from ..exceptions import ConfigurationError
from .area_extractor import AreaTextExtractor
from .html_extractor import HTMLTextExtractor
from .text_extractor import PlainTextExtractor

Extractor = Union[PlainTextExtractor, AreaTextExtractor, HTMLTextExtractor]


class Operation(str, Enum):
    """Named extraction strategies, valued by their property name."""

    TEXT_STRIPPER = "TextStripper"
    TEXT_STRIPPER_BY_AREA = "TextStripperByArea"
    TEXT_TO_HTML = "Text2HTML"

    @classmethod
    def from_name(cls, name: str) -> "Operation":
        """Resolve a property value or its short alias.

        Raises:
            ConfigurationError: If the name is not a known operation.
        """
        key = (name or "").strip()
        for op in cls:
            if key == op.value:
                return op
        alias = _ALIASES.get(key.lower())
        if alias is None:
            allowed = ", ".join(op.value for op in cls)
            raise ConfigurationError(
                f"Unknown operation '{name}'. Allowed values: {allowed}"
            )
        return alias

    def create_extractor(self) -> Extractor:
        """Return a fresh extractor instance for this operation."""
        return _EXTRACTORS[self]()


_ALIASES = {
    "plaintext": Operation.TEXT_STRIPPER,
    "regiontext": Operation.TEXT_STRIPPER_BY_AREA,
    "htmltext": Operation.TEXT_TO_HTML,
}

_EXTRACTORS = {
    Operation.TEXT_STRIPPER: PlainTextExtractor,
    Operation.TEXT_STRIPPER_BY_AREA: AreaTextExtractor,
    Operation.TEXT_TO_HTML: HTMLTextExtractor,
}
