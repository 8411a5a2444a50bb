"""Tests for the extraction processor."""

import io
import logging

import pytest
from pypdf import PdfReader, PdfWriter

from extract_pdf.exceptions import (
    ConfigurationError,
    DecodeError,
    ExtractionError,
    InvalidInputError,
)
from extract_pdf.processor import ExtractPDFProcessor
from extract_pdf.session import MemorySession

PDF = {"mime.type": "application/pdf"}


def properties(operation, start="1", end="0", **regions):
    props = {"Operation": operation, "Start Page": start, "End Page subtractor": end}
    props.update(regions)
    return props


def error_records(caplog):
    return [
        r for r in caplog.records
        if r.levelno == logging.ERROR and r.name == "extract_pdf.processor"
    ]


def assert_failed(session, original, caplog, error_type):
    assert session.transferred["success"] == []
    assert session.transferred["failure"] == [original]
    [record] = error_records(caplog)
    assert isinstance(record.exc_info[1], error_type)


def test_relationships_and_properties():
    processor = ExtractPDFProcessor()
    assert [r.name for r in processor.relationships] == ["success", "failure"]
    assert [p.name for p in processor.supported_properties] == [
        "Operation",
        "Start Page",
        "End Page subtractor",
    ]


def test_validate_reports_problems():
    processor = ExtractPDFProcessor(properties("TextStripperByArea", TEST_AREA="0,0,200"))
    [problem] = processor.validate()
    assert "TEST_AREA" in problem
    processor.set_property("TEST_AREA", "0,0,200,20")
    assert processor.validate() == []


def test_no_input_is_a_noop():
    session = MemorySession()
    ExtractPDFProcessor().on_trigger(session)
    assert session.transferred == {"success": [], "failure": []}


@pytest.mark.parametrize("operation", ["TextStripper", "Text2HTML"])
def test_region_properties_ignored_outside_area_operation(run, two_page_pdf, operation):
    session = run(two_page_pdf, properties(operation, TEST_AREA="0,0,200"))

    assert session.transferred["failure"] == []
    [out] = session.transferred["success"]
    assert "pdf.region" not in out.attributes
    assert "Row 1" in out.content.decode("utf-8")


def test_validate_ignores_regions_outside_area_operation():
    processor = ExtractPDFProcessor(properties("TextStripper", TEST_AREA="0,0,200"))
    assert processor.validate() == []


def test_plain_text_extraction_first_page_only(run, two_page_pdf):
    session = run(two_page_pdf, properties("TextStripper", end="1"))

    assert session.transferred["failure"] == []
    [out] = session.transferred["success"]
    assert dict(out.attributes) == {"mime.type": "plain/text"}
    lines = [line.strip() for line in out.content.decode("utf-8").splitlines()]
    assert lines == ["Row 1", "Row 2", "Row 3", "Row 4"]


def test_plain_text_concatenates_pages_in_order(run, distinct_pages_pdf):
    session = run(distinct_pages_pdf, properties("TextStripper"))
    [out] = session.transferred["success"]
    text = out.content.decode("utf-8")
    assert text.index("Alpha one") < text.index("Alpha two") < text.index("Beta one")


def test_html_extraction(run, two_page_pdf):
    session = run(two_page_pdf, properties("Text2HTML", end="1"))

    assert session.transferred["failure"] == []
    [out] = session.transferred["success"]
    assert out.get_attribute("mime.type") == "text/html"
    html = out.content.decode("utf-8")
    assert "<html>" in html
    assert html.count("page-break-before:always") == 1
    assert "Row 1" in html


def test_default_operation_is_html(run, two_page_pdf):
    session = run(two_page_pdf, {})
    [out] = session.transferred["success"]
    assert out.get_attribute("mime.type") == "text/html"


def test_region_extraction(run, two_page_pdf):
    session = run(
        two_page_pdf, properties("TextStripperByArea", TEST_AREA="0,0,200,20")
    )

    assert session.transferred["failure"] == []
    outputs = session.transferred["success"]
    assert len(outputs) == 2
    for out in outputs:
        assert dict(out.attributes) == {
            "mime.type": "plain/text",
            "pdf.region": "TEST_AREA",
        }
        assert out.content.decode("utf-8").strip() == "Row 1"


def test_region_extraction_pages_times_regions(run, two_page_pdf):
    session = run(
        two_page_pdf,
        properties("TextStripperByArea", B="0,20,200,10", A="0,0,200,20"),
    )
    outputs = session.transferred["success"]
    assert [o.get_attribute("pdf.region") for o in outputs] == ["B", "A", "B", "A"]
    assert [o.content.decode().strip() for o in outputs] == [
        "Row 2",
        "Row 1",
        "Row 2",
        "Row 1",
    ]


def test_outputs_are_linked_to_input(run, two_page_pdf):
    session = MemorySession()
    original = session.enqueue(two_page_pdf, {**PDF, "filename": "doc.pdf"})
    ExtractPDFProcessor(properties("TextStripper")).on_trigger(session)

    [out] = session.transferred["success"]
    assert out.parent_id == original.id
    assert "filename" not in out.attributes
    assert session.removed == [original]


def test_subtractor_equal_to_page_count_region_yields_nothing(run, two_page_pdf, caplog):
    session = run(
        two_page_pdf,
        properties("TextStripperByArea", end="2", TEST_AREA="0,0,200,20"),
    )
    assert session.transferred == {"success": [], "failure": []}
    assert error_records(caplog) == []


@pytest.mark.parametrize("operation", ["TextStripper", "Text2HTML"])
def test_subtractor_equal_to_page_count_fails_whole_range(
    two_page_pdf, caplog, operation
):
    session = MemorySession()
    original = session.enqueue(two_page_pdf, PDF)
    ExtractPDFProcessor(properties(operation, end="2")).on_trigger(session)
    assert_failed(session, original, caplog, ExtractionError)


def test_start_after_end_fails_whole_range(two_page_pdf, caplog):
    session = MemorySession()
    original = session.enqueue(two_page_pdf, PDF)
    ExtractPDFProcessor(properties("TextStripper", start="3")).on_trigger(session)
    assert_failed(session, original, caplog, ExtractionError)


def test_wrong_mime_type(two_page_pdf, caplog):
    session = MemorySession()
    original = session.enqueue(two_page_pdf, {"mime.type": "application/json"})
    ExtractPDFProcessor(properties("TextStripper")).on_trigger(session)

    assert_failed(session, original, caplog, InvalidInputError)
    [failed] = session.transferred["failure"]
    assert failed.content == two_page_pdf
    assert dict(failed.attributes) == {"mime.type": "application/json"}


def test_missing_mime_type(caplog, two_page_pdf):
    session = MemorySession()
    original = session.enqueue(two_page_pdf, {})
    ExtractPDFProcessor().on_trigger(session)
    assert_failed(session, original, caplog, InvalidInputError)


def test_undecodable_content(caplog):
    session = MemorySession()
    original = session.enqueue(b"definitely not a pdf", PDF)
    ExtractPDFProcessor(properties("TextStripper")).on_trigger(session)
    assert_failed(session, original, caplog, DecodeError)


@pytest.fixture()
def encrypted_pdf(two_page_pdf):
    writer = PdfWriter(clone_from=io.BytesIO(two_page_pdf))
    writer.encrypt("secret")
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


def test_encrypted_pdf_without_empty_password(encrypted_pdf, caplog):
    session = MemorySession()
    original = session.enqueue(encrypted_pdf, PDF)
    ExtractPDFProcessor(properties("TextStripper")).on_trigger(session)

    assert_failed(session, original, caplog, DecodeError)
    [record] = error_records(caplog)
    assert "encrypted" in str(record.exc_info[1])


def test_encrypted_pdf_reader_is_closed(monkeypatch, encrypted_pdf, caplog):
    closed = []
    close = PdfReader.close

    def recording_close(self):
        closed.append(self)
        close(self)

    monkeypatch.setattr(PdfReader, "close", recording_close)
    session = MemorySession()
    original = session.enqueue(encrypted_pdf, PDF)
    ExtractPDFProcessor(properties("TextStripper")).on_trigger(session)

    assert_failed(session, original, caplog, DecodeError)
    assert len(closed) == 1


def test_malformed_region(two_page_pdf, caplog):
    session = MemorySession()
    original = session.enqueue(two_page_pdf, PDF)
    ExtractPDFProcessor(
        properties("TextStripperByArea", TEST_AREA="0,0,200")
    ).on_trigger(session)
    assert_failed(session, original, caplog, ConfigurationError)


def test_unknown_operation_fails_before_decoding(monkeypatch, caplog):
    import extract_pdf.processor as processor_module

    def no_decode(*_a, **_k):
        raise AssertionError("decoder must not run")

    monkeypatch.setattr(processor_module, "PdfReader", no_decode)
    session = MemorySession()
    original = session.enqueue(b"%PDF-1.4", PDF)
    ExtractPDFProcessor(properties("OCR")).on_trigger(session)
    assert_failed(session, original, caplog, ConfigurationError)


def test_failure_during_emission_discards_partial_outputs(
    monkeypatch, two_page_pdf, caplog
):
    written = []
    original_write = MemorySession.write

    def flaky_write(self, flowfile, content):
        if written:
            raise IOError("disk full")
        written.append(content)
        return original_write(self, flowfile, content)

    monkeypatch.setattr(MemorySession, "write", flaky_write)
    session = MemorySession()
    original = session.enqueue(two_page_pdf, PDF)
    ExtractPDFProcessor(
        properties("TextStripperByArea", TEST_AREA="0,0,200,20")
    ).on_trigger(session)

    assert len(written) == 1
    assert_failed(session, original, caplog, IOError)


def test_identical_runs_produce_identical_outputs(run, two_page_pdf):
    props = properties("TextStripperByArea", A="0,0,200,20", B="0,20,200,30")
    first = run(two_page_pdf, props).transferred["success"]
    second = run(two_page_pdf, props).transferred["success"]
    assert [(o.content, dict(o.attributes)) for o in first] == [
        (o.content, dict(o.attributes)) for o in second
    ]
