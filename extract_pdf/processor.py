"""PDF extraction processor.

Reads one record per trigger, extracts its text with the configured
operation and emits derived records. Output is all-or-nothing: if anything
fails, every record created during the trigger is discarded and the
original record is routed to the failure relationship.
"""

import io
import logging
from typing import Dict, List, Mapping, Optional

from pypdf import PasswordType, PdfReader

from .config import SUPPORTED_PROPERTIES, PropertyDescriptor, StageConfig
from .engine import extract
from .exceptions import (
    ConfigurationError,
    DecodeError,
    InvalidInputError,
)
from .extractors import ExtractedText
from .pages import resolve_page_range
from .session import FAILURE, SUCCESS, FlowFile, ProcessSession, Relationship

logger = logging.getLogger(__name__)

MIME_TYPE_ATTRIBUTE = "mime.type"
REGION_ATTRIBUTE = "pdf.region"
PDF_MIME_TYPE = "application/pdf"


class ExtractPDFProcessor:
    """Extract PDF text from incoming records."""

    def __init__(self, properties: Optional[Mapping[str, str]] = None):
        """Initialize the processor.

        Args:
            properties: Fixed and dynamic (region) property values. Values are
                resolved on every trigger, so invalid values surface as
                failures of the records they are applied to.
        """
        self.properties: Dict[str, str] = dict(properties or {})

    @property
    def supported_properties(self) -> List[PropertyDescriptor]:
        return list(SUPPORTED_PROPERTIES)

    @property
    def relationships(self) -> List[Relationship]:
        return [SUCCESS, FAILURE]

    def set_property(self, name: str, value: str) -> None:
        self.properties[name] = value

    def validate(self) -> List[str]:
        """Return configuration problems without processing any record."""
        try:
            StageConfig.from_properties(self.properties)
        except ConfigurationError as e:
            return [str(e)]
        return []

    def on_trigger(self, session: ProcessSession) -> None:
        """Process a single record from ``session`` and commit the outcome."""
        flowfile = session.get()
        if flowfile is None:
            return
        try:
            results = self._process(session, flowfile)
            for extracted in results:
                self._generate_flowfile(session, flowfile, extracted)
            session.remove(flowfile)
            logger.info(
                "Extracted %s records from FlowFile %s", len(results), flowfile.id
            )
        except Exception as e:
            session.rollback_created()
            session.transfer(flowfile, FAILURE)
            logger.error(
                "Failed to extract FlowFile %s: %s", flowfile.id, e, exc_info=True
            )
        session.commit()

    def _process(self, session: ProcessSession, flowfile: FlowFile) -> List[ExtractedText]:
        mime_type = flowfile.get_attribute(MIME_TYPE_ATTRIBUTE)
        if mime_type != PDF_MIME_TYPE:
            raise InvalidInputError(
                f"Mime type is not set to {PDF_MIME_TYPE}: {mime_type!r}"
            )

        # Unknown operations and malformed regions fail before decoding.
        config = StageConfig.from_properties(self.properties)

        with io.BytesIO(session.read(flowfile)) as stream:
            with self._decode(stream) as reader:
                page_range = resolve_page_range(
                    config.start_page, config.end_page_subtractor, len(reader.pages)
                )
                logger.debug(
                    "Running %s over pages %s-%s",
                    config.operation.value,
                    page_range.start_page,
                    page_range.end_page,
                )
                return extract(reader, config.operation, page_range, config.regions)

    def _decode(self, stream: io.BytesIO) -> PdfReader:
        reader = None
        try:
            reader = PdfReader(stream)
            if reader.is_encrypted and reader.decrypt("") == PasswordType.NOT_DECRYPTED:
                raise DecodeError("PDF is encrypted and cannot be opened without a password")
            # Touch the page tree so structural damage surfaces here.
            len(reader.pages)
        except Exception as e:
            if reader is not None:
                reader.close()
            if isinstance(e, DecodeError):
                raise
            raise DecodeError(f"Failed to decode PDF: {e}") from e
        return reader

    def _generate_flowfile(
        self, session: ProcessSession, parent: FlowFile, extracted: ExtractedText
    ) -> None:
        out = session.create(parent)
        out = session.put_attribute(out, MIME_TYPE_ATTRIBUTE, extracted.mime_type)
        if extracted.region is not None:
            out = session.put_attribute(out, REGION_ATTRIBUTE, extracted.region)
        out = session.write(out, extracted.text.encode("utf-8"))
        session.transfer(out, SUCCESS)
