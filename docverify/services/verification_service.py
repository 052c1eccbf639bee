"""
Servei de verificació de documents d'identitat

Pipeline (Python pur excepte el motor OCR):
  OCR → classificació → política de rol → número + nom + comparació
      → verificació per patrons → puntuació de 5 paràmetres → VerificationReport

Cap error intern surt com a excepció: sempre es retorna un VerificationReport.
"""
import logging
import time
from typing import Optional
from docverify.config import settings
from docverify.models.ocr_result import ExtractionResult, WordLayout
from docverify.models.verification import (
    DocumentType, VerificationReport, CandidateName, NameMatchResult,
)
from docverify.matching.fuzzy import compare_names
from docverify.parsers.document_parser import document_parser
from docverify.parsers.name_extractor import name_extractor
from docverify.parsers.parameter_scorer import ScoringContext, score
from docverify.parsers.role_policy import check_role, resolve_role
from docverify.services.ocr_adapter import OCRAdapter, OCRError
from docverify.utils.redact import redact_report_info

log = logging.getLogger("docverify.verify")

TEXT_PREVIEW_CHARS = 200

UNRECOGNIZED_MESSAGE = (
    "Document type not recognized. Please upload a valid ID document "
    "(PAN, Aadhaar, Passport, or Driving License)."
)
UNRECOGNIZED_SUGGESTIONS = [
    "Ensure the document is clearly visible",
    "Check if the document is one of the supported types",
    "Try uploading a higher quality image",
]


class DocumentVerificationService:

    def __init__(self, adapter: OCRAdapter, config=settings):
        self.adapter = adapter
        self.config = config

    # ------------------------------------------------------------------
    # Entrada amb imatge
    # ------------------------------------------------------------------

    def verify_document(
        self,
        image_path: str,
        role: str,
        declared_name: Optional[str] = None,
        declared_document_number: Optional[str] = None,
    ) -> VerificationReport:
        t0 = time.monotonic()
        try:
            extraction = self.adapter.extract_text(image_path)
        except OCRError as e:
            log.warning("verify_ocr_failed", extra={"engine": self.adapter.name, "error": str(e)})
            return VerificationReport(
                is_valid=False,
                failure_reason="ocr_failed",
                message=UNRECOGNIZED_MESSAGE,
                role=resolve_role(role),
                recommendations=list(UNRECOGNIZED_SUGGESTIONS),
                ocr_engine=self.adapter.name,
            )
        ocr_ms = round((time.monotonic() - t0) * 1000)

        layout: Optional[WordLayout] = None
        if self.config.word_layout_enabled:
            # Posicions de la mateixa crida; només es demanen a part si el motor no en dona
            layout = extraction.layout
            if layout is None:
                try:
                    layout = self.adapter.extract_words(image_path, engine=extraction.engine)
                except OCRError as e:
                    log.warning("verify_word_layout_failed", extra={"engine": self.adapter.name, "error": str(e)})

        log.info("verify_ocr_done", extra={
            "engine": extraction.engine,
            "confidence": extraction.confidence,
            "durada_ms": ocr_ms,
            "has_layout": layout is not None,
        })
        return self.verify_extraction(extraction, role, declared_name, declared_document_number, layout)

    # ------------------------------------------------------------------
    # Nucli pur
    # ------------------------------------------------------------------

    def _extract_name(
        self, text: str, declared_name: Optional[str], layout: Optional[WordLayout]
    ) -> Optional[CandidateName]:
        candidate = None
        if layout is not None:
            candidate = name_extractor.extract_from_layout(
                layout,
                declared_name,
                top_region_ratio=self.config.name_top_region_ratio,
                confidence_floor=self.config.name_word_confidence_floor,
            )
        return candidate or name_extractor.extract(text, declared_name)

    def verify_extraction(
        self,
        extraction: ExtractionResult,
        role: str,
        declared_name: Optional[str] = None,
        declared_document_number: Optional[str] = None,
        layout: Optional[WordLayout] = None,
    ) -> VerificationReport:
        text = extraction.text or ""
        role_key = resolve_role(role)
        common = {
            "role": role_key,
            "ocr_engine": extraction.engine,
            "ocr_confidence": extraction.confidence,
            "extracted_text_preview": text[:TEXT_PREVIEW_CHARS],
        }

        # 1. Tipus de document
        classification = document_parser.classify(text)
        if classification.type == DocumentType.UNKNOWN:
            log.info("verify_unrecognized", extra={"score": classification.confidence})
            return VerificationReport(
                is_valid=False,
                failure_reason="unrecognized_document",
                message=UNRECOGNIZED_MESSAGE,
                recommendations=list(UNRECOGNIZED_SUGGESTIONS),
                **common,
            )
        doc_type = classification.type

        # 2. Política de rol (abans de la resta: falla ràpid)
        decision = check_role(doc_type, role_key)
        if not decision.allowed:
            log.info("verify_role_rejected", extra={"doc_type": doc_type.value, "role": role_key})
            return VerificationReport(
                is_valid=False,
                failure_reason="role_not_allowed",
                message=decision.message,
                document_type=doc_type,
                **common,
            )

        # 3. Camps
        number = document_parser.extract_document_number(text, doc_type)
        candidate = self._extract_name(text, declared_name, layout)
        name_match: Optional[NameMatchResult] = None
        if candidate and declared_name:
            name_match = compare_names(declared_name, candidate.text)
        pattern = document_parser.offline_verify(text, doc_type)

        # 4. Paràmetres
        summary = score(
            ScoringContext(
                text=text,
                document_type=doc_type,
                document_number=number,
                declared_document_number=declared_document_number,
                candidate_name=candidate,
                name_match=name_match,
                pattern=pattern,
            ),
            pass_threshold=self.config.pass_threshold_percentage,
        )

        if summary.is_valid:
            message = (
                f"Document verified successfully! {summary.passed}/{summary.total} parameters passed "
                f"({summary.pass_percentage:.1f}%)"
            )
        else:
            message = (
                f"Document verification failed. Only {summary.passed}/{summary.total} parameters passed "
                f"({summary.pass_percentage:.1f}%). Need at least {self.config.pass_threshold_percentage:g}%."
            )

        log.info("verify_done", extra={
            **redact_report_info(number.value if number else None, doc_type.value, extraction.engine),
            "valid": summary.is_valid,
            "passed": summary.passed,
            "pass_percentage": summary.pass_percentage,
            "name_source": candidate.source if candidate else None,
            "preferred_document": decision.preferred,
        })

        return VerificationReport(
            is_valid=summary.is_valid,
            failure_reason=None if summary.is_valid else "insufficient_parameters",
            message=message,
            document_type=doc_type,
            document_number=number.value if number else None,
            extracted_name=candidate.text if candidate else None,
            name_source=candidate.source if candidate else None,
            name_match=name_match,
            pass_percentage=summary.pass_percentage,
            passed_parameters=summary.passed,
            total_parameters=summary.total,
            parameters=summary.parameters,
            recommendations=summary.recommendations,
            **common,
        )
