"""Configuration module for the PDF extraction stage."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .exceptions import ConfigurationError
from .extractors import Operation, Region

PROPERTY_OPERATION = "Operation"
PROPERTY_START_PAGE = "Start Page"
PROPERTY_END_PAGE = "End Page subtractor"

FIXED_PROPERTIES = (PROPERTY_OPERATION, PROPERTY_START_PAGE, PROPERTY_END_PAGE)

ENV_OPERATION = "EXTRACT_PDF_OPERATION"
ENV_START_PAGE = "EXTRACT_PDF_START_PAGE"
ENV_END_PAGE = "EXTRACT_PDF_END_PAGE_SUBTRACTOR"


@dataclass(frozen=True)
class PropertyDescriptor:
    """Declaration of one supported processor property."""

    name: str
    description: str
    default: str
    allowable_values: Tuple[str, ...] = ()


SUPPORTED_PROPERTIES: Tuple[PropertyDescriptor, ...] = (
    PropertyDescriptor(
        name=PROPERTY_OPERATION,
        description="Operation for text extraction",
        default=Operation.TEXT_TO_HTML.value,
        allowable_values=tuple(op.value for op in Operation),
    ),
    PropertyDescriptor(
        name=PROPERTY_START_PAGE,
        description="Page where to start text extraction",
        default="1",
    ),
    PropertyDescriptor(
        name=PROPERTY_END_PAGE,
        description=(
            "Value subtracted from the page count to determine the last page"
        ),
        default="0",
    ),
)


def parse_region(name: str, value: str) -> Region:
    """Parse an ``x,y,width,height`` region declaration.

    Raises:
        ConfigurationError: If the value is not four floats or the size is
            negative.
    """
    parts = (value or "").split(",")
    if len(parts) != 4:
        raise ConfigurationError(
            f"Property format for {name} is invalid: x,y,width,height expected, "
            f"got '{value}'"
        )
    try:
        x, y, width, height = (float(p.strip()) for p in parts)
    except ValueError as e:
        raise ConfigurationError(
            f"Property {name} contains a non-numeric coordinate: '{value}'"
        ) from e
    if width < 0 or height < 0:
        raise ConfigurationError(
            f"Property {name} must have a non-negative width and height"
        )
    return Region(name=name, x=x, y=y, width=width, height=height)


def _parse_int(name: str, value: Any, minimum: int) -> int:
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be an integer, got '{value}'") from e
    if number < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {number}")
    return number


@dataclass(frozen=True)
class StageConfig:
    """Resolved configuration for one invocation of the processor."""

    operation: Operation = Operation.TEXT_TO_HTML
    start_page: int = 1
    end_page_subtractor: int = 0
    regions: List[Region] = field(default_factory=list)

    @classmethod
    def from_properties(cls, properties: Mapping[str, str]) -> "StageConfig":
        """Build a config from processor properties.

        Every key that is not one of the fixed properties declares a region;
        regions are only parsed for the TextStripperByArea operation.
        Missing fixed properties fall back to their defaults.

        Raises:
            ConfigurationError: If any property is invalid.
        """
        defaults = {p.name: p.default for p in SUPPORTED_PROPERTIES}
        operation = Operation.from_name(
            properties.get(PROPERTY_OPERATION, defaults[PROPERTY_OPERATION])
        )
        start_page = _parse_int(
            PROPERTY_START_PAGE,
            properties.get(PROPERTY_START_PAGE, defaults[PROPERTY_START_PAGE]),
            minimum=1,
        )
        end_page_subtractor = _parse_int(
            PROPERTY_END_PAGE,
            properties.get(PROPERTY_END_PAGE, defaults[PROPERTY_END_PAGE]),
            minimum=0,
        )
        regions: List[Region] = []
        if operation is Operation.TEXT_STRIPPER_BY_AREA:
            regions = [
                parse_region(name, value)
                for name, value in properties.items()
                if name not in FIXED_PROPERTIES
            ]
        return cls(
            operation=operation,
            start_page=start_page,
            end_page_subtractor=end_page_subtractor,
            regions=regions,
        )

    @staticmethod
    def env_defaults(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Return fixed property values set through environment variables."""
        environ = os.environ if environ is None else environ
        mapping = {
            ENV_OPERATION: PROPERTY_OPERATION,
            ENV_START_PAGE: PROPERTY_START_PAGE,
            ENV_END_PAGE: PROPERTY_END_PAGE,
        }
        return {
            prop: environ[var].strip()
            for var, prop in mapping.items()
            if environ.get(var, "").strip()
        }

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "operation": self.operation.value,
            "start_page": self.start_page,
            "end_page_subtractor": self.end_page_subtractor,
            "regions": {
                r.name: [r.x, r.y, r.width, r.height] for r in self.regions
            },
        }
