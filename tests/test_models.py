"""
Tests dels models, contracte v1
"""
import pytest
from datetime import datetime
from pydantic import ValidationError
from docverify.models.ocr_result import ExtractionResult, WordBox
from docverify.models.verification import (
    DocumentType, ClassificationResult, VerificationReport, NameMatchResult,
)


class TestExtractionResult:
    def test_confidence_out_of_range(self):
        with pytest.raises(ValidationError):
            ExtractionResult(text="x", confidence=1.5)

    def test_frozen(self):
        result = ExtractionResult(text="x", confidence=0.5)
        with pytest.raises(ValidationError):
            result.text = "y"


class TestWordBox:
    def test_geometry(self):
        word = WordBox(text="Arnav", bbox=(100, 100, 200, 130), confidence=0.9)
        assert word.center_y == 115
        assert word.height == 30


class TestDocumentType:
    def test_values(self):
        assert DocumentType.DRIVING_LICENSE.value == "DRIVING_LICENSE"
        assert DocumentType("PAN") is DocumentType.PAN


class TestClassificationResult:
    def test_confidence_bounds(self):
        with pytest.raises(ValidationError):
            ClassificationResult(type=DocumentType.PAN, confidence=1.3)


class TestVerificationReport:
    def test_defaults(self):
        report = VerificationReport(is_valid=False, message="x", role="tenant")
        assert report.document_type == DocumentType.UNKNOWN
        assert report.parameters == []
        assert report.recommendations is None
        assert datetime.fromisoformat(report.timestamp).tzinfo is not None

    def test_invalid_failure_reason(self):
        with pytest.raises(ValidationError):
            VerificationReport(is_valid=False, message="x", role="tenant", failure_reason="whatever")

    def test_serialization(self):
        report = VerificationReport(
            is_valid=True,
            message="ok",
            role="owner",
            document_type=DocumentType.PAN,
            name_match=NameMatchResult(match=True, similarity=0.95, strategy="ocr_correction"),
        )
        data = report.model_dump(mode="json")
        assert data["document_type"] == "PAN"
        assert data["name_match"]["strategy"] == "ocr_correction"
