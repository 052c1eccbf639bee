"""
Ruta de verificació de documents d'identitat, contracte v1
"""
import asyncio
import logging
import tempfile
import os
import time
from typing import Literal, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from docverify.config import settings
from docverify.models.verification import VerificationReport
from docverify.services.verification_service import DocumentVerificationService
from docverify.utils.redact import redact_report_info

log = logging.getLogger("docverify.request")

# Tesseract és CPU-bound: màxim 2 documents alhora
_ocr_semaphore = asyncio.Semaphore(2)

VALID_MIME_TYPES = {"image/jpeg", "image/png", "image/webp"}

_MAGIC = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG":      "image/png",
    b"RIFF":         "image/webp",
}

_SUFFIX = {
    "image/jpeg": ".jpg",
    "image/png":  ".png",
    "image/webp": ".webp",
}


def _detect_image_type(content: bytes) -> Optional[str]:
    for magic, mime in _MAGIC.items():
        if content[: len(magic)] == magic:
            return mime
    return None


def get_verification_service(request: Request) -> DocumentVerificationService:
    """Servei creat al lifespan; 503 si no hi ha cap motor OCR."""
    service = getattr(request.app.state, "verification_service", None)
    if service is None or not service.adapter.is_available():
        raise HTTPException(status_code=503, detail="No OCR engine available")
    return service


router = APIRouter()


@router.post("/document", response_model=VerificationReport)
async def verify_document(
    file: UploadFile = File(...),
    role: Literal["tenant", "owner", "admin"] = Form(default="tenant"),
    declared_name: Optional[str] = Form(default=None),
    document_number: Optional[str] = Form(default=None),
    service: DocumentVerificationService = Depends(get_verification_service),
):
    """
    Verifica un document d'identitat indi (PAN, Aadhaar, Passaport, Permís de conduir).

    - **file**: Imatge del document (JPG, PNG, WEBP)
    - **role**: tenant | owner | admin
    - **declared_name**: nom declarat per l'usuari (opcional, ajuda a trobar el nom)
    - **document_number**: número declarat (opcional, es compara amb l'extret)
    """
    content = await file.read()
    max_size = settings.max_file_size_mb * 1024 * 1024

    log.info("verify_request", extra={
        "uploaded_filename": file.filename,
        "mime_type": file.content_type,
        "file_size_kb": round(len(content) / 1024, 2),
        "role": role,
    })

    if file.content_type not in VALID_MIME_TYPES:
        raise HTTPException(status_code=400, detail="Unsupported format. Accepted: JPG, PNG or WEBP.")

    if len(content) > max_size:
        raise HTTPException(status_code=413, detail=f"Image too large. Maximum {settings.max_file_size_mb}MB.")

    detected = _detect_image_type(content)
    if detected is None:
        raise HTTPException(status_code=400, detail="The file is not a valid image.")

    with tempfile.NamedTemporaryFile(delete=False, suffix=_SUFFIX[detected]) as tmp:
        tmp.write(content)
        temp_path = tmp.name
    del content

    try:
        t0 = time.monotonic()
        async with _ocr_semaphore:
            report = await asyncio.wait_for(
                run_in_threadpool(
                    service.verify_document, temp_path, role, declared_name, document_number
                ),
                timeout=settings.ocr_timeout_seconds,
            )
        log.info("verify_response", extra={
            **redact_report_info(report.document_number, report.document_type.value, report.ocr_engine),
            "valid": report.is_valid,
            "failure_reason": report.failure_reason,
            "pass_percentage": report.pass_percentage,
            "durada_ms": round((time.monotonic() - t0) * 1000),
        })
        return report

    except asyncio.TimeoutError:
        log.warning("verify_timeout", extra={"timeout_s": settings.ocr_timeout_seconds})
        raise HTTPException(status_code=504, detail="Timeout processing the document.")
    except Exception:
        log.exception("verify_unexpected_error")
        raise HTTPException(status_code=500, detail="Internal error processing the document.")

    finally:
        if os.path.exists(temp_path):
            try:
                os.unlink(temp_path)
            except OSError:
                log.warning("temp_file_cleanup_failed")
