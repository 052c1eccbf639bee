"""
Contracte de verificació de documents d'identitat (v1)

L'únic artefacte que surt del motor és VerificationReport:
{
  "is_valid": bool,
  "failure_reason": null | "ocr_failed" | "unrecognized_document"
                    | "role_not_allowed" | "insufficient_parameters",
  "message": "...",
  "document_type": "AADHAAR|PAN|PASSPORT|DRIVING_LICENSE|UNKNOWN",
  "document_number": "...",
  "extracted_name": "...",
  "pass_percentage": 0-100,
  "passed_parameters": n,
  "total_parameters": 5,
  "parameters": [ VerificationParameter, ... ],
  "recommendations": [ "...", ... ],
  "timestamp": "ISO-8601 UTC"
}

Regles:
  is_valid = True si i només si:
    - el tipus de document és reconegut
    - el rol de l'usuari accepta aquest tipus
    - pass_percentage >= 60 (passed_parameters / total_parameters × 100)
"""
from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Literal, List, Dict


class DocumentType(str, Enum):
    """Tipus de document suportats. L'ordre de declaració desempata la classificació."""
    PAN = "PAN"
    AADHAAR = "AADHAAR"
    PASSPORT = "PASSPORT"
    DRIVING_LICENSE = "DRIVING_LICENSE"
    UNKNOWN = "UNKNOWN"


FailureReason = Literal[
    "ocr_failed",
    "unrecognized_document",
    "role_not_allowed",
    "insufficient_parameters",
]


class ClassificationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: DocumentType
    confidence: float = Field(ge=0.0, le=1.0)
    scores: Dict[DocumentType, float] = {}              # puntuació bruta (màx. 1.3)


class DocumentNumber(BaseModel):
    """Número extret (sense espais) + validesa estructural segons el tipus."""
    value: str
    format_valid: bool = False


class CandidateName(BaseModel):
    text: str
    source: str                                         # id de l'estratègia que l'ha trobat
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class NameMatchResult(BaseModel):
    """Resultat informatiu de la comparació nom declarat vs nom extret."""
    match: bool
    similarity: float = Field(ge=0.0, le=1.0)
    strategy: str = "none"


class PatternVerification(BaseModel):
    """Verificació offline per patrons (paràmetre 5)."""
    verified: bool
    confidence: float
    reasons: List[str] = []
    document_number: Optional[str] = None


class RolePolicyDecision(BaseModel):
    allowed: bool
    preferred: bool
    min_confidence: float                               # advisory, no bloqueja
    message: str


class VerificationParameter(BaseModel):
    name: str
    passed: bool
    details: str


class VerificationReport(BaseModel):
    """Resposta de verificació, contracte v1."""
    is_valid: bool
    failure_reason: Optional[FailureReason] = None
    message: str
    role: str
    document_type: DocumentType = DocumentType.UNKNOWN
    document_number: Optional[str] = None
    extracted_name: Optional[str] = None
    name_source: Optional[str] = None
    name_match: Optional[NameMatchResult] = None
    pass_percentage: float = 0.0
    passed_parameters: int = 0
    total_parameters: int = 0
    parameters: List[VerificationParameter] = []
    recommendations: Optional[List[str]] = None
    ocr_engine: Optional[str] = None
    ocr_confidence: Optional[float] = None
    extracted_text_preview: Optional[str] = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
