"""Shared fixtures: small text PDFs written as raw PDF bytes."""

from typing import Dict, List, Mapping, Optional

import pytest

from extract_pdf.processor import ExtractPDFProcessor
from extract_pdf.session import MemorySession

ROWS = ["Row 1", "Row 2", "Row 3", "Row 4"]


def _content_stream(lines: List[str]) -> bytes:
    # Start at the top-left corner, one 12pt line per row.
    ops = ["BT", "/F1 12 Tf", "12 TL", "0 792 Td"]
    for line in lines:
        escaped = line.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        ops.append("T*")
        ops.append(f"({escaped}) Tj")
    ops.append("ET")
    return "\n".join(ops).encode("latin-1")


def make_pdf(pages: List[List[str]], title: Optional[str] = None) -> bytes:
    """Build a PDF with one Times-Roman text line per entry on each page."""
    bodies: Dict[int, bytes] = {
        1: b"<< /Type /Catalog /Pages 2 0 R >>",
        3: b"<< /Type /Font /Subtype /Type1 /BaseFont /Times-Roman >>",
    }
    page_numbers = []
    next_number = 4
    for lines in pages:
        content = _content_stream(lines)
        content_number, page_number = next_number, next_number + 1
        next_number += 2
        bodies[content_number] = (
            b"<< /Length %d >>\nstream\n" % len(content) + content + b"\nendstream"
        )
        bodies[page_number] = (
            "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            "/Resources << /Font << /F1 3 0 R >> >> "
            f"/Contents {content_number} 0 R >>"
        ).encode("latin-1")
        page_numbers.append(page_number)
    kids = " ".join(f"{n} 0 R" for n in page_numbers)
    bodies[2] = f"<< /Type /Pages /Kids [{kids}] /Count {len(page_numbers)} >>".encode(
        "latin-1"
    )

    info = ""
    if title is not None:
        bodies[next_number] = f"<< /Title ({title}) >>".encode("latin-1")
        info = f" /Info {next_number} 0 R"

    out = bytearray(b"%PDF-1.4\n")
    offsets = {}
    for number in sorted(bodies):
        offsets[number] = len(out)
        out += b"%d 0 obj\n" % number + bodies[number] + b"\nendobj\n"
    xref = len(out)
    size = max(bodies) + 1
    out += b"xref\n0 %d\n0000000000 65535 f \n" % size
    for number in range(1, size):
        out += b"%010d 00000 n \n" % offsets[number]
    out += (
        f"trailer\n<< /Size {size} /Root 1 0 R{info} >>\nstartxref\n{xref}\n%%EOF\n"
    ).encode("latin-1")
    return bytes(out)


@pytest.fixture(scope="session")
def two_page_pdf() -> bytes:
    """Two identical pages with four rows each."""
    return make_pdf([ROWS, ROWS])


@pytest.fixture(scope="session")
def distinct_pages_pdf() -> bytes:
    """Two pages with different content and a title."""
    return make_pdf(
        [["Alpha one", "Alpha two"], ["Beta one", "Beta two"]], title="Sample"
    )


def run_processor(
    content: bytes,
    properties: Mapping[str, str],
    attributes: Optional[Mapping[str, str]] = None,
) -> MemorySession:
    """Run the processor once over a single record and return the session."""
    if attributes is None:
        attributes = {"mime.type": "application/pdf"}
    session = MemorySession()
    session.enqueue(content, attributes)
    ExtractPDFProcessor(properties).on_trigger(session)
    return session


@pytest.fixture()
def run():
    return run_processor


@pytest.fixture()
def pdf_factory():
    return make_pdf
