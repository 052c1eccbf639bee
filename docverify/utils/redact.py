"""
Utilitats de redacció de PII per a logs

Cap número de document ni nom de titular ha d'aparèixer en clar als logs.
"""
from typing import Optional


def redact_document_number(number: Optional[str]) -> str:
    """
    Redacta un número de document per a logs.
    "ABCDE1234F"   → "ABCD****F"
    "123456789012" → "1234****2"
    """
    if not number or len(number) < 3:
        return "***"
    return number[:4] + "****" + number[-1]


def redact_name(name: Optional[str]) -> str:
    """
    Redacta un nom per a logs.
    "ARNAV MEHTA" → "A**********"
    """
    if not name:
        return "***"
    return name[0] + "*" * (len(name) - 1)


def redact_report_info(number: Optional[str], document_type: Optional[str], engine: Optional[str]) -> dict:
    """
    Retorna un dict segur per a logging: dades tècniques sense PII.
    """
    return {
        "doc_redacted": redact_document_number(number),
        "doc_type": document_type,
        "engine": engine,
    }
