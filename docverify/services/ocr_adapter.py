"""
Interfície comuna dels motors OCR

Tot motor (Tesseract, Google Vision, híbrid) implementa OCRAdapter:
  open() / close()   : recurs amb cicle de vida explícit (lifespan de FastAPI)
  extract_text()     : ExtractionResult (confiança 0-1), amb layout si la
                       mateixa crida dona posicions de paraula
  extract_words()    : WordLayout o None si el motor no dona posicions

Qualsevol error del motor es propaga com OCRError.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional
from docverify.models.ocr_result import ExtractionResult, WordLayout

log = logging.getLogger("docverify.ocr")


class OCRError(Exception):
    """Error irrecuperable d'un motor OCR."""


class OCRAdapter(ABC):

    name: str = "unknown"

    def open(self) -> None:
        """Inicialitza recursos (clients, comprovació de binaris)."""

    def close(self) -> None:
        """Allibera recursos."""

    @abstractmethod
    def is_available(self) -> bool:
        ...

    @abstractmethod
    def extract_text(self, image_path: str) -> ExtractionResult:
        ...

    def extract_words(self, image_path: str, engine: Optional[str] = None) -> Optional[WordLayout]:
        return None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class HybridOCRAdapter(OCRAdapter):
    """
    Primari → secundari seqüencial.
    Es reintenta amb el secundari si el primari falla o la confiança < llindar.
    Si el secundari també falla, es manté el resultat del primari (si n'hi ha).
    """

    name = "hybrid"

    def __init__(self, primary: OCRAdapter, secondary: OCRAdapter, threshold: float = 0.7):
        self.primary = primary
        self.secondary = secondary
        self.threshold = threshold

    def open(self) -> None:
        self.primary.open()
        self.secondary.open()

    def close(self) -> None:
        self.primary.close()
        self.secondary.close()

    def is_available(self) -> bool:
        return self.primary.is_available() or self.secondary.is_available()

    def extract_text(self, image_path: str) -> ExtractionResult:
        primary_result: Optional[ExtractionResult] = None
        primary_error: Optional[OCRError] = None

        if self.primary.is_available():
            try:
                primary_result = self.primary.extract_text(image_path)
            except OCRError as e:
                primary_error = e
                log.warning("ocr_primary_error", extra={"engine": self.primary.name, "error": str(e)})

        if primary_result is not None and primary_result.confidence >= self.threshold:
            return primary_result

        if primary_result is not None:
            log.info("ocr_primary_low_confidence", extra={
                "engine": self.primary.name,
                "confidence": primary_result.confidence,
                "threshold": self.threshold,
            })

        if self.secondary.is_available():
            try:
                return self.secondary.extract_text(image_path)
            except OCRError as e:
                log.warning("ocr_secondary_error", extra={"engine": self.secondary.name, "error": str(e)})
                if primary_result is None:
                    raise

        if primary_result is not None:
            return primary_result

        raise primary_error or OCRError("Cap motor OCR disponible")

    def extract_words(self, image_path: str, engine: Optional[str] = None) -> Optional[WordLayout]:
        # Posicions del motor que ha donat el text
        adapter = self.secondary if engine == self.secondary.name else self.primary
        return adapter.extract_words(image_path)


def build_ocr_adapter(config) -> OCRAdapter:
    """Construeix l'adaptador segons config.ocr_engine."""
    from docverify.services.tesseract_service import TesseractOCRAdapter
    from docverify.services.google_vision_service import GoogleVisionOCRAdapter

    if config.ocr_engine == "google_vision":
        return GoogleVisionOCRAdapter(config)
    if config.ocr_engine == "hybrid":
        return HybridOCRAdapter(
            TesseractOCRAdapter(config),
            GoogleVisionOCRAdapter(config),
            threshold=config.hybrid_confidence_threshold,
        )
    return TesseractOCRAdapter(config)
