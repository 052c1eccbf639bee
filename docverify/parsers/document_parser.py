"""
Parser de documents d'identitat indis (PAN, Aadhaar, Passaport, Permís de conduir)

  classify():                 tipus de document per puntuació de signatures
  extract_document_number():  número del document (patró primari → alternatiu)
  validate_document_format(): validació estructural independent de l'extracció
  offline_verify():           confiança agregada per patrons (paràmetre 5)

Python pur, sense estat: mateix text → mateix resultat.
"""
import re
import logging
from typing import Optional
from docverify.models.verification import (
    DocumentType, ClassificationResult, DocumentNumber, PatternVerification,
)
from docverify.parsers.signatures import SIGNATURES

log = logging.getLogger("docverify.parser")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Pesos de classificació
PRIMARY_WEIGHT = 0.6
ALTERNATIVE_WEIGHT = 0.3
KEYWORD_WEIGHT = 0.4
UNKNOWN_THRESHOLD = 0.5

# Pesos de verificació offline
OFFLINE_PRIMARY_WEIGHT = 0.4
OFFLINE_ALTERNATIVE_WEIGHT = 0.2
OFFLINE_KEYWORD_WEIGHT = 0.3
OFFLINE_FORMAT_WEIGHT = 0.1


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _strip_ws(value: str) -> str:
    return re.sub(r"\s", "", value)


def keyword_hits(text: str, keywords) -> list[str]:
    """Paraules clau presents al text (cerca de subcadena sense majúscules)."""
    upper = text.upper()
    return [kw for kw in keywords if kw.upper() in upper]


def validate_document_format(number: Optional[str], doc_type: DocumentType) -> bool:
    """Longitud exacta + regex estricta del tipus. UNKNOWN mai és vàlid."""
    signature = SIGNATURES.get(doc_type)
    if not number or signature is None:
        return False
    return len(number) == signature.length and bool(signature.strict_format.match(number))


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

class DocumentParser:

    @staticmethod
    def classify(text: str) -> ClassificationResult:
        """
        Puntua cada tipus: +0.6 primari, +0.3 alternatiu, fins a +0.4 per paraules clau.
        Guanya la puntuació més alta (empat → ordre de declaració).
        Si cap supera 0.5 → UNKNOWN.
        """
        text = text or ""
        scores: dict[DocumentType, float] = {}
        best_type, best_score = DocumentType.UNKNOWN, 0.0

        for doc_type, signature in SIGNATURES.items():
            score = 0.0
            if signature.primary.search(text):
                score += PRIMARY_WEIGHT
            if signature.alternative.search(text):
                score += ALTERNATIVE_WEIGHT
            hits = keyword_hits(text, signature.keywords)
            score += len(hits) / len(signature.keywords) * KEYWORD_WEIGHT
            scores[doc_type] = round(score, 4)

            if score > best_score:
                best_type, best_score = doc_type, score

        if best_score <= UNKNOWN_THRESHOLD:
            best_type = DocumentType.UNKNOWN

        log.debug("classified", extra={"doc_type": best_type.value, "score": round(best_score, 3)})
        return ClassificationResult(
            type=best_type,
            confidence=round(min(best_score, 1.0), 4),
            scores=scores,
        )

    @staticmethod
    def extract_document_number(text: str, doc_type: DocumentType) -> Optional[DocumentNumber]:
        """Patró primari primer; si no, grup 1 del patró etiquetat. Sense espais."""
        signature = SIGNATURES.get(doc_type)
        if signature is None or not text:
            return None

        value: Optional[str] = None
        m = signature.primary.search(text)
        if m:
            value = _strip_ws(m.group(0))
        else:
            m = signature.alternative.search(text)
            if m:
                value = _strip_ws(m.group(1) if m.groups() and m.group(1) else m.group(0))

        if not value:
            return None
        return DocumentNumber(value=value, format_valid=validate_document_format(value, doc_type))

    @staticmethod
    def offline_verify(text: str, doc_type: DocumentType) -> PatternVerification:
        """
        Confiança agregada per patrons:
          +0.4 primari, +0.2 alternatiu, +0.3 × cobertura paraules clau,
          +0.1 si el número té format vàlid.
        Per sota del mínim del tipus → no verificat. Limitada al màxim del tipus.
        """
        signature = SIGNATURES.get(doc_type)
        if signature is None:
            return PatternVerification(verified=False, confidence=0.0, reasons=["Unknown document type"])

        confidence = 0.0
        verified = True
        reasons: list[str] = []

        if signature.primary.search(text):
            confidence += OFFLINE_PRIMARY_WEIGHT
            reasons.append("Primary pattern matched")
        else:
            verified = False
            reasons.append("Primary pattern failed")

        if signature.alternative.search(text):
            confidence += OFFLINE_ALTERNATIVE_WEIGHT
            reasons.append("Alternative pattern matched")

        hits = keyword_hits(text, signature.keywords)
        confidence += len(hits) / len(signature.keywords) * OFFLINE_KEYWORD_WEIGHT
        reasons.append(f"{len(hits)}/{len(signature.keywords)} keywords found")

        number = DocumentParser.extract_document_number(text, doc_type)
        if number is None:
            verified = False
            reasons.append("Document number not found")
        elif number.format_valid:
            confidence += OFFLINE_FORMAT_WEIGHT
            reasons.append("Document number format valid")
        else:
            verified = False
            reasons.append("Document number format invalid")

        min_conf, max_conf = signature.confidence_range
        if confidence < min_conf:
            verified = False

        return PatternVerification(
            verified=verified,
            confidence=round(min(confidence, max_conf), 4),
            reasons=reasons,
            document_number=number.value if number else None,
        )


# Singleton
document_parser = DocumentParser()
