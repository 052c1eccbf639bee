"""
Puntuació de paràmetres de verificació

Cinc paràmetres booleans avaluats sobre el mateix context:
  1. Document Keywords
  2. Document Number Match / Document Number Extraction
  3. Document Number Format
  4. Holder Name Extraction
  5. Document Pattern Recognition

pass_percentage = superats / total × 100. Vàlid si ≥ llindar (60 per defecte).
"""
import re
from dataclasses import dataclass
from typing import Optional, List, Tuple, Callable
from docverify.models.verification import (
    DocumentType, DocumentNumber, CandidateName, NameMatchResult,
    PatternVerification, VerificationParameter,
)
from docverify.parsers.signatures import SIGNATURES, SHARED_KEYWORDS
from docverify.parsers.document_parser import keyword_hits

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_PASS_THRESHOLD = 60.0
PATTERN_CONFIDENCE_THRESHOLD = 0.5
MIN_NAME_LENGTH = 3

REMEDIATION = (
    "Ensure the document image is clear and all text is readable",
    "Verify that the document number matches what you entered",
    "Check that the document is a valid government-issued ID",
)


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScoringContext:
    """Tot el que els avaluadors necessiten. Calculat una sola vegada per document."""
    text: str
    document_type: DocumentType
    document_number: Optional[DocumentNumber]
    declared_document_number: Optional[str]
    candidate_name: Optional[CandidateName]
    name_match: Optional[NameMatchResult]
    pattern: PatternVerification


@dataclass(frozen=True)
class ScoreSummary:
    parameters: List[VerificationParameter]
    passed: int
    total: int
    pass_percentage: float
    is_valid: bool
    recommendations: Optional[List[str]]


def normalize_document_number(value: Optional[str]) -> str:
    """Sense espais ni guions, majúscules."""
    return re.sub(r"[\s\-]", "", value or "").upper()


# ---------------------------------------------------------------------------
# Avaluadors
# ---------------------------------------------------------------------------

def evaluate_keywords(ctx: ScoringContext) -> VerificationParameter:
    signature = SIGNATURES.get(ctx.document_type)
    keywords = (signature.keywords if signature else ()) + SHARED_KEYWORDS
    found = keyword_hits(ctx.text, keywords)
    return VerificationParameter(
        name="Document Keywords",
        passed=bool(found),
        details=f"Found keywords: {', '.join(found)}" if found else "No document keywords found",
    )


def evaluate_document_number(ctx: ScoringContext) -> VerificationParameter:
    extracted = ctx.document_number.value if ctx.document_number else None

    if ctx.declared_document_number:
        name = "Document Number Match"
        if not extracted:
            return VerificationParameter(
                name=name, passed=False, details="Could not extract document number from image",
            )
        if normalize_document_number(ctx.declared_document_number) == normalize_document_number(extracted):
            return VerificationParameter(
                name=name, passed=True, details=f"Document number matches: {extracted}",
            )
        return VerificationParameter(
            name=name,
            passed=False,
            details=f"Mismatch - User provided: {ctx.declared_document_number}, Extracted: {extracted}",
        )

    name = "Document Number Extraction"
    if extracted:
        return VerificationParameter(name=name, passed=True, details=f"Document number extracted: {extracted}")
    return VerificationParameter(name=name, passed=False, details="Could not extract document number from image")


def evaluate_format(ctx: ScoringContext) -> VerificationParameter:
    name = "Document Number Format"
    if ctx.document_number is None:
        return VerificationParameter(name=name, passed=False, details="No document number to validate")
    if ctx.document_number.format_valid:
        return VerificationParameter(
            name=name, passed=True, details=f"Format is valid for {ctx.document_type.value}",
        )
    signature = SIGNATURES.get(ctx.document_type)
    expected = signature.format_description if signature else "n/a"
    return VerificationParameter(
        name=name,
        passed=False,
        details=f"Invalid format - Expected: {expected}, Got: {ctx.document_number.value}",
    )


def evaluate_name(ctx: ScoringContext) -> VerificationParameter:
    # La coincidència amb el nom declarat és informativa, no bloqueja
    name = ctx.candidate_name.text if ctx.candidate_name else None
    if not name or len(name) < MIN_NAME_LENGTH:
        return VerificationParameter(
            name="Holder Name Extraction", passed=False, details="Could not extract name from document",
        )
    details = f"Name extracted: {name}"
    if ctx.name_match is not None:
        verdict = "matches" if ctx.name_match.match else "does not match"
        details += f" ({verdict} declared name, similarity {ctx.name_match.similarity:.2f})"
    return VerificationParameter(name="Holder Name Extraction", passed=True, details=details)


def evaluate_pattern(ctx: ScoringContext) -> VerificationParameter:
    confidence = ctx.pattern.confidence
    return VerificationParameter(
        name="Document Pattern Recognition",
        passed=confidence >= PATTERN_CONFIDENCE_THRESHOLD,
        details=f"Pattern confidence: {confidence * 100:.1f}%",
    )


# Taula ordenada (nom, avaluador). L'ordre és el del report.
EVALUATORS: Tuple[Tuple[str, Callable[[ScoringContext], VerificationParameter]], ...] = (
    ("keywords", evaluate_keywords),
    ("document_number", evaluate_document_number),
    ("format", evaluate_format),
    ("holder_name", evaluate_name),
    ("pattern", evaluate_pattern),
)


# ---------------------------------------------------------------------------
# Agregació
# ---------------------------------------------------------------------------

def score(ctx: ScoringContext, pass_threshold: float = DEFAULT_PASS_THRESHOLD) -> ScoreSummary:
    parameters = [evaluator(ctx) for _, evaluator in EVALUATORS]
    return summarize(parameters, pass_threshold)


def summarize(parameters: List[VerificationParameter], pass_threshold: float = DEFAULT_PASS_THRESHOLD) -> ScoreSummary:
    total = len(parameters)
    passed = sum(1 for p in parameters if p.passed)
    percentage = round(passed / total * 100, 1) if total else 0.0
    is_valid = total > 0 and percentage >= pass_threshold

    recommendations = None
    if not is_valid:
        failed = [p.name for p in parameters if not p.passed]
        recommendations = [
            f"Only {passed}/{total} parameters passed. Failed: {', '.join(failed)}",
            *REMEDIATION,
        ]

    return ScoreSummary(
        parameters=parameters,
        passed=passed,
        total=total,
        pass_percentage=percentage,
        is_valid=is_valid,
        recommendations=recommendations,
    )
