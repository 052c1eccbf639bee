"""
Adaptador de Tesseract OCR
"""
import logging
import pytesseract
from PIL import Image
from typing import Optional, Tuple
from docverify.models.ocr_result import ExtractionResult, WordBox, WordLayout
from docverify.services.ocr_adapter import OCRAdapter, OCRError

log = logging.getLogger("docverify.ocr")

# Errors de lectura d'imatge o del binari que es converteixen en OCRError
_IMAGE_ERRORS = (pytesseract.TesseractError, Image.DecompressionBombError, OSError, RuntimeError)


def layout_from_data(data: dict, page_height: float) -> WordLayout:
    """Paraules amb caixa i confiança (0-1) a partir de la sortida d'image_to_data."""
    words = []
    for i, raw in enumerate(data["text"]):
        text = (raw or "").strip()
        conf = float(data["conf"][i])
        if not text or conf < 0:
            continue
        left, top = float(data["left"][i]), float(data["top"][i])
        words.append(WordBox(
            text=text,
            bbox=(left, top, left + float(data["width"][i]), top + float(data["height"][i])),
            confidence=min(conf / 100, 1.0),
        ))
    return WordLayout(words=words, page_height=float(page_height or 1))


class TesseractOCRAdapter(OCRAdapter):
    """Wrapper per Tesseract OCR"""

    name = "tesseract"

    def __init__(self, config):
        self.enabled = config.tesseract_enabled
        self.lang = config.tesseract_lang
        # PSM 6: un bloc uniforme de text (millor per targetes d'identitat)
        self.tess_config = f"--psm {config.tesseract_psm}"
        self._available = False

    def open(self) -> None:
        """Verifica que Tesseract està instal·lat"""
        if not self.enabled:
            log.info("ocr_tesseract_disabled")
            return
        try:
            version = pytesseract.get_tesseract_version()
            self._available = True
            log.info("ocr_tesseract_ready", extra={"version": str(version)})
        except pytesseract.TesseractNotFoundError as e:
            self._available = False
            log.warning("ocr_tesseract_unavailable", extra={"error": str(e)})

    def close(self) -> None:
        self._available = False

    def is_available(self) -> bool:
        return self.enabled and self._available

    def _recognize(self, image_path: str, lang: str, with_text: bool) -> Tuple[str, dict, int]:
        """Obre la imatge una sola vegada: text (opcional) + dades per paraula."""
        try:
            with Image.open(image_path) as image:
                text = ""
                if with_text:
                    text = pytesseract.image_to_string(image, lang=lang, config=self.tess_config)
                data = pytesseract.image_to_data(
                    image, lang=lang, config=self.tess_config, output_type=pytesseract.Output.DICT
                )
                return text, data, image.height
        except _IMAGE_ERRORS as e:
            raise OCRError(f"Error en Tesseract OCR: {e}") from e

    def extract_text(self, image_path: str, lang: Optional[str] = None) -> ExtractionResult:
        """
        Detecta text en una imatge.

        Confiança = mitjana de les confiances positives per paraula / 100.
        Les posicions de paraula surten del mateix image_to_data.
        """
        if not self.is_available():
            raise OCRError("Tesseract no està disponible")

        text, data, page_height = self._recognize(image_path, lang or self.lang, with_text=True)

        confidences = [float(c) for c in data["conf"] if float(c) > 0]
        avg_confidence = sum(confidences) / len(confidences) if confidences else 0.0

        return ExtractionResult(
            text=text,
            confidence=round(min(avg_confidence / 100, 1.0), 4),
            engine=self.name,
            layout=layout_from_data(data, page_height),
        )

    def extract_words(self, image_path: str, engine: Optional[str] = None) -> Optional[WordLayout]:
        if not self.is_available():
            return None
        _, data, page_height = self._recognize(image_path, self.lang, with_text=False)
        return layout_from_data(data, page_height)
