"""
Fixtures compartides: textos OCR de mostra i motor OCR fals
"""
import pytest
from typing import Optional
from docverify.config import Settings
from docverify.models.ocr_result import ExtractionResult, WordLayout
from docverify.services.ocr_adapter import OCRAdapter, OCRError


AADHAAR_TEXT = (
    "Government of India\n"
    "Unique Identification Authority of India\n"
    "Aadhaar\n"
    "Arnav Mehta\n"
    "Date of Birth: 01/01/1995\n"
    "Male\n"
    "1234 5678 9012\n"
)

PAN_TEXT = (
    "INCOME TAX DEPARTMENT\n"
    "Permanent Account Number\n"
    "ABCDE1234F\n"
)

DL_TEXT = (
    "Driving License\n"
    "Transport Department\n"
    "DL No: MH14 20110012345\n"
    "Name: Rahul Sharma\n"
)


class FakeOCRAdapter(OCRAdapter):
    """Motor OCR en memòria: retorna un text fix o llança l'error indicat."""

    def __init__(
        self,
        text: str = "",
        confidence: float = 0.9,
        name: str = "fake",
        layout: Optional[WordLayout] = None,
        error: Optional[Exception] = None,
        available: bool = True,
    ):
        self.text = text
        self.confidence = confidence
        self.name = name
        self.layout = layout
        self.error = error
        self.available = available
        self.calls = 0
        self.opened = False

    def open(self) -> None:
        self.opened = True

    def close(self) -> None:
        self.opened = False

    def is_available(self) -> bool:
        return self.available

    def extract_text(self, image_path: str) -> ExtractionResult:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return ExtractionResult(text=self.text, confidence=self.confidence, engine=self.name)

    def extract_words(self, image_path: str, engine: Optional[str] = None) -> Optional[WordLayout]:
        return self.layout


@pytest.fixture
def aadhaar_text():
    return AADHAAR_TEXT


@pytest.fixture
def pan_text():
    return PAN_TEXT


@pytest.fixture
def dl_text():
    return DL_TEXT


@pytest.fixture
def make_adapter():
    return FakeOCRAdapter


@pytest.fixture
def ocr_error():
    return OCRError


@pytest.fixture
def config():
    return Settings(ocr_engine="tesseract", word_layout_enabled=True, pass_threshold_percentage=60)
