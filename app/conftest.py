"""
Pytest configuration for the footprint calculator test suite.

Registers the 'ocr' marker used to tag tests that drive a real Tesseract
binary. Those tests are skipped automatically when ``tesseract`` is not on
PATH (or TESSERACT_CMD does not point at one).

Run everything that can run here:
    pytest

Run OCR tests only:
    pytest -m ocr
"""
import os
import shutil

import pymupdf
import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "ocr: test needs a Tesseract binary"
    )


def _tesseract_available() -> bool:
    cmd = os.environ.get("TESSERACT_CMD")
    if cmd:
        return os.path.exists(cmd)
    return shutil.which("tesseract") is not None


def pytest_collection_modifyitems(config, items):
    """Auto-skip OCR tests when no Tesseract binary is installed."""
    if _tesseract_available():
        return

    skip_ocr = pytest.mark.skip(reason="tesseract binary not found")
    for item in items:
        if "ocr" in item.keywords:
            item.add_marker(skip_ocr)


@pytest.fixture
def make_pdf_bill(tmp_path):
    """Factory writing a one-page PDF with the given lines of text."""
    def _make(lines, name="bill.pdf", fontsize=11):
        path = tmp_path / name
        doc = pymupdf.open()
        page = doc.new_page()
        y = 72
        for line in lines:
            page.insert_text((72, y), line, fontsize=fontsize)
            y += fontsize * 2
        doc.save(str(path))
        doc.close()
        return path
    return _make
