import io

import pytest
from pypdf import PdfWriter

from app.utils.parsers import ResumeParser

parser = ResumeParser()


def test_plain_text_resume():
    assert parser.parse(b"Asha Rao\nPython, FastAPI", "text/plain") == "Asha Rao\nPython, FastAPI"


def test_markdown_falls_back_to_cp1252():
    text = parser.parse("# Résumé".encode("cp1252"), "text/markdown")

    assert text == "# Résumé"


def test_pdf_without_text_layer_yields_empty_text():
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)

    assert parser.parse(buffer.getvalue(), "application/pdf") == ""


def test_corrupt_pdf_is_rejected():
    with pytest.raises(ValueError, match="Failed to parse PDF"):
        parser.parse(b"not a pdf", "application/pdf")


def test_unsupported_type():
    assert not ResumeParser.is_supported("application/msword")
    with pytest.raises(ValueError, match="Unsupported file type"):
        parser.parse(b"data", "application/msword")


def test_size_limit():
    with pytest.raises(ValueError, match="5 MB"):
        parser.parse(b"x" * (ResumeParser.MAX_SIZE_BYTES + 1), "text/plain")


def test_normalize_collapses_blank_runs_and_caps_length():
    assert ResumeParser.normalize("Skills   \n\n\n\nPython\n") == "Skills\n\nPython"
    assert len(ResumeParser.normalize("x" * 30000)) == ResumeParser.MAX_TEXT_CHARS
