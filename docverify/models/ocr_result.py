"""
Models de sortida dels motors OCR

Tots els adaptadors (Tesseract, Google Vision, híbrid) retornen aquests
objectes. Són immutables: cap etapa posterior del pipeline els modifica.
Confiances sempre en escala 0-1.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Tuple


class WordBox(BaseModel):
    """Paraula individual amb la seva caixa (x0, y0, x1, y1) en píxels."""
    model_config = ConfigDict(frozen=True)

    text: str
    bbox: Tuple[float, float, float, float]
    confidence: float = Field(ge=0.0, le=1.0)

    @property
    def center_y(self) -> float:
        return (self.bbox[1] + self.bbox[3]) / 2

    @property
    def height(self) -> float:
        return self.bbox[3] - self.bbox[1]


class WordLayout(BaseModel):
    """Paraules posicionades d'una pàgina, per l'extracció de nom per posició."""
    model_config = ConfigDict(frozen=True)

    words: List[WordBox] = []
    page_height: float = Field(default=1000.0, gt=0)


class ExtractionResult(BaseModel):
    """
    Text complet transcrit per un motor OCR.

    layout porta les posicions de paraula obtingudes a la mateixa crida
    (None si el motor no en dona).
    """
    model_config = ConfigDict(frozen=True)

    text: str
    confidence: float = Field(ge=0.0, le=1.0)
    engine: str = "unknown"                   # "tesseract" | "google_vision"
    layout: Optional[WordLayout] = None
