"""
Bill Text Extractor
====================

Reads the monthly electricity usage (kWh) off an uploaded utility bill.

  Step 1: Text extraction
            .pdf             -> PyMuPDF text layer, span by span
            .jpg/.jpeg/.png  -> Tesseract OCR (English) over the whole image
  Step 2: Ordered regex cascade over the lower-cased text
  Step 3: Relaxed fallback scan for a number next to a power unit

Extraction is best effort: reader failures become a failed ExtractionResult
and the caller falls back to manually entered usage. Only an unsupported
file extension is raised, since that is a caller-side validation gap.
"""
from __future__ import annotations

import asyncio
import logging
import math
import os
import re
from dataclasses import dataclass

import pandas as pd
import pymupdf

from carbon_models import ExtractionResult
from common.formatters import parse_leading_float

log = logging.getLogger(__name__)


PDF_EXTENSIONS = (".pdf",)
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png")
SUPPORTED_EXTENSIONS = PDF_EXTENSIONS + IMAGE_EXTENSIONS


class UnsupportedFormatError(ValueError):
    """Raised for a file extension the extractor cannot read."""


# ---------------------------------------------------------------------------
# Step 1: Text extraction
# ---------------------------------------------------------------------------

def extract_text_from_pdf(file_path: str) -> str:
    """Concatenate every text span of every page, each followed by a space.

    Raises:
        RuntimeError: If PyMuPDF cannot open the document.
    """
    try:
        doc = pymupdf.open(file_path)
    except Exception as e:
        raise RuntimeError(f"Cannot open PDF file '{file_path}': {e}") from e

    try:
        parts: list[str] = []
        for page in doc:
            for block in page.get_text("dict")["blocks"]:
                for line in block.get("lines", []):
                    for span in line.get("spans", []):
                        parts.append(span["text"] + " ")
        return "".join(parts)
    finally:
        doc.close()


def get_ocr_dataframe(file_path: str) -> tuple[pd.DataFrame, float]:
    """Run Tesseract over an image and return word rows plus mean confidence.

    DataFrame columns follow ``pytesseract.image_to_data``: text, left, top,
    width, height, conf, block_num, par_num, line_num, word_num.
    """
    import pytesseract
    from PIL import Image

    tesseract_cmd = os.environ.get("TESSERACT_CMD")
    if tesseract_cmd:
        pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    with Image.open(file_path) as img:
        df = pytesseract.image_to_data(
            img, lang="eng", output_type=pytesseract.Output.DATAFRAME,
        )

    # conf == -1 marks layout rows that carry no word
    df = df[df["conf"] != -1].copy()
    df["text"] = df["text"].astype(str).str.strip()
    df = df[df["text"].str.len() > 0].copy()
    df = df.reset_index(drop=True)

    avg_conf = float(df["conf"].mean()) if len(df) > 0 else 0.0
    return df, avg_conf


def get_ocr_text(ocr_df: pd.DataFrame) -> str:
    """Reassemble OCR words into lines in reading order."""
    if ocr_df.empty:
        return ""

    lines = []
    for _, group in ocr_df.groupby(["block_num", "par_num", "line_num"], sort=True):
        words = group.sort_values("left")["text"].tolist()
        lines.append(" ".join(words))

    return "\n".join(lines)


def extract_text_from_image(file_path: str) -> str:
    """OCR an image bill into plain text."""
    ocr_df, avg_conf = get_ocr_dataframe(file_path)
    log.debug(
        "OCR read %d words from %s (mean confidence %.1f)",
        len(ocr_df), os.path.basename(file_path), avg_conf,
    )
    return get_ocr_text(ocr_df)


# ---------------------------------------------------------------------------
# Step 2 / 3: Usage parsing
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UsagePattern:
    """A kWh pattern and the capture group holding the number."""
    name: str
    regex: str
    group: int


# Most specific first. The index decides confidence: 1 - index / len.
USAGE_PATTERNS: tuple[UsagePattern, ...] = (
    # "total kWh: 123", "total kwh used: 123", "total kwh is 123"
    UsagePattern("total_kwh", r"total\s+kwh\s*(used|consumed|:)?\s*(:|is)?\s*([\d,\.]+)", 3),
    # "electricity usage: 123 kWh"
    UsagePattern("electricity_usage", r"electricity\s+usage\s*:?\s*([\d,\.]+)\s*kwh", 1),
    # "123 kWh"
    UsagePattern("number_kwh", r"([\d,\.]+)\s*kwh", 1),
    # "energy used: 123"
    UsagePattern("energy_used", r"energy\s+used\s*:?\s*([\d,\.]+)", 1),
    # "current reading: 123"
    UsagePattern("current_reading", r"current\s+reading\s*:?\s*([\d,\.]+)", 1),
)

# Any number beside a power unit, scanned on the original-case text.
FALLBACK_PATTERN = r"([\d,\.]+)\s*(kw|kwh|kilowatt|units)"
FALLBACK_CONFIDENCE = 0.3

# A match above this confidence ends the cascade.
EARLY_STOP_CONFIDENCE = 0.7


def _parse_number(token: str) -> float | None:
    value = parse_leading_float(token.replace(",", ""))
    if value is None or not math.isfinite(value):
        return None
    return value


def parse_utility_bill(text: str) -> ExtractionResult:
    """Recover the electricity usage figure from bill text.

    Patterns run in order over the lower-cased text. A match above 0.7
    confidence stops the scan; a weaker match is kept but a later pattern
    that also matches replaces it. With no pattern match, one relaxed scan
    looks for any number beside kw/kwh/kilowatt/units at confidence 0.3.

    Returns:
        ExtractionResult; ``success`` is False with no error when nothing
        matched.
    """
    lower_text = text.lower()
    electricity: float | None = None
    confidence = 0.0
    matched_pattern: str | None = None

    for index, pattern in enumerate(USAGE_PATTERNS):
        m = re.search(pattern.regex, lower_text, re.IGNORECASE)
        if not m or not m.group(pattern.group):
            continue
        value = _parse_number(m.group(pattern.group))
        if value is None:
            continue

        electricity = value
        confidence = 1 - (index / len(USAGE_PATTERNS))
        matched_pattern = pattern.name
        if confidence > EARLY_STOP_CONFIDENCE:
            break

    if electricity is None:
        m = re.search(FALLBACK_PATTERN, text, re.IGNORECASE)
        if m and m.group(1):
            value = _parse_number(m.group(1))
            if value is not None:
                electricity = value
                confidence = FALLBACK_CONFIDENCE
                matched_pattern = "fallback_unit"

    if electricity is None:
        log.debug("No electricity usage pattern matched in %d chars", len(text))
        return ExtractionResult(success=False, electricity=None, confidence=0.0)

    log.debug(
        "Matched %s: %s kWh (confidence %.2f)", matched_pattern, electricity, confidence,
    )
    return ExtractionResult(success=True, electricity=electricity, confidence=confidence)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def _read_text(file_path: str) -> str:
    ext = os.path.splitext(file_path)[1].lower()
    if ext in PDF_EXTENSIONS:
        return extract_text_from_pdf(file_path)
    return extract_text_from_image(file_path)


def check_supported(file_path: str) -> None:
    """Raise UnsupportedFormatError unless the extension can be read."""
    ext = os.path.splitext(file_path)[1].lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError(
            f"Unsupported file format '{ext or file_path}'. "
            f"Supported: {', '.join(SUPPORTED_EXTENSIONS)}"
        )


def extract_bill_data(file_path: str | os.PathLike) -> ExtractionResult:
    """Extract the electricity usage from a saved bill upload.

    Args:
        file_path: Path to a .pdf, .jpg, .jpeg or .png file.

    Returns:
        ExtractionResult. Reader failures are returned with ``error`` set.

    Raises:
        UnsupportedFormatError: If the extension is not supported.
    """
    file_path = os.fspath(file_path)
    check_supported(file_path)

    try:
        text = _read_text(file_path)
    except Exception as e:
        log.warning("Error extracting data from bill %s: %s", file_path, e, exc_info=True)
        return ExtractionResult(success=False, electricity=None, confidence=0.0, error=str(e))

    return parse_utility_bill(text)


async def extract_bill_data_async(file_path: str | os.PathLike) -> ExtractionResult:
    """Run extract_bill_data in a worker thread.

    Cancelling the awaiting task abandons the result; the reader thread
    finishes on its own.
    """
    return await asyncio.to_thread(extract_bill_data, file_path)
