"""
Configuració del motor de verificació de documents
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, Literal


class Settings(BaseSettings):
    """Configuració de l'aplicació"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # App
    app_name: str = "Document Verification Engine"
    app_version: str = "1.0.0"
    debug: bool = False

    # Motor OCR
    ocr_engine: Literal["tesseract", "google_vision", "hybrid"] = "tesseract"
    hybrid_confidence_threshold: float = 0.7

    # Tesseract
    tesseract_enabled: bool = True
    tesseract_lang: str = "eng"
    tesseract_psm: int = 6

    # Google Cloud Vision
    google_cloud_vision_enabled: bool = True
    google_cloud_credentials_json: Optional[str] = None
    google_cloud_project_id: Optional[str] = None

    # Extracció de nom per posició
    word_layout_enabled: bool = True
    name_top_region_ratio: float = 0.4
    name_word_confidence_floor: float = 0.6

    # Verificació
    pass_threshold_percentage: float = 60.0

    # API
    api_key_enabled: bool = False
    api_key: Optional[str] = None

    # Limits
    max_file_size_mb: int = 5
    ocr_timeout_seconds: int = 30


# Singleton de configuració
settings = Settings()
