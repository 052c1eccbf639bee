"""
Signatures dels documents d'identitat indis suportats

Cada tipus té:
  - patró primari (estructura estricta del número)
  - patró alternatiu etiquetat ("PAN: ...", "Passport No ...")
  - paraules clau
  - longitud i format estricte del número
  - rang de confiança [min, max] de la verificació per patrons
"""
import re
from dataclasses import dataclass
from typing import Tuple, Dict
from docverify.models.verification import DocumentType


@dataclass(frozen=True)
class DocumentSignature:
    primary: re.Pattern
    alternative: re.Pattern
    keywords: Tuple[str, ...]
    length: int
    format_description: str
    strict_format: re.Pattern
    confidence_range: Tuple[float, float]


SIGNATURES: Dict[DocumentType, DocumentSignature] = {
    DocumentType.PAN: DocumentSignature(
        primary=re.compile(r"\b[A-Z]{5}[0-9]{4}[A-Z]\b"),
        alternative=re.compile(r"PAN\s*:?\s*([A-Z]{5}[0-9]{4}[A-Z])", re.IGNORECASE),
        keywords=("PAN", "Permanent Account Number", "Income Tax"),
        length=10,
        format_description="5 letters + 4 digits + 1 letter",
        strict_format=re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$"),
        confidence_range=(0.85, 0.95),
    ),
    DocumentType.AADHAAR: DocumentSignature(
        primary=re.compile(r"\b\d{4}\s\d{4}\s\d{4}\b"),
        alternative=re.compile(r"Aadhaar\s*:?\s*(\d{4}\s\d{4}\s\d{4})", re.IGNORECASE),
        keywords=("Aadhaar", "UID", "Unique Identification"),
        length=12,
        format_description="12 digits (with or without spaces)",
        strict_format=re.compile(r"^\d{12}$"),
        confidence_range=(0.80, 0.92),
    ),
    DocumentType.PASSPORT: DocumentSignature(
        primary=re.compile(r"\b[A-Z]\d{7}\b"),
        alternative=re.compile(r"Passport\s*:?\s*([A-Z]\d{7})", re.IGNORECASE),
        keywords=("Passport", "Passport No", "Passport Number"),
        length=8,
        format_description="1 letter + 7 digits",
        strict_format=re.compile(r"^[A-Z]\d{7}$"),
        confidence_range=(0.85, 0.90),
    ),
    DocumentType.DRIVING_LICENSE: DocumentSignature(
        primary=re.compile(r"\b[A-Z]{2}\d{2}\s?\d{11}\b"),
        alternative=re.compile(
            r"(?:DL|Driving\s*License)\s*:?\s*([A-Z]{2}\d{2}\s?\d{11})", re.IGNORECASE
        ),
        keywords=("Driving License", "DL", "License No"),
        length=15,
        format_description="2 letters + 2 digits + 11 digits",
        strict_format=re.compile(r"^[A-Z]{2}\d{2}\d{11}$"),
        confidence_range=(0.75, 0.88),
    ),
}

# Marca comuna de tots els documents oficials (paràmetre de paraules clau)
SHARED_KEYWORDS: Tuple[str, ...] = ("Government of India",)
