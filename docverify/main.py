"""
Document Verification Engine - API FastAPI

Verificació de documents d'identitat indis (PAN, Aadhaar, Passaport, Permís de conduir)
"""
import time
import logging
import json
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from docverify.config import settings
from docverify.routes import verify
from docverify.services.ocr_adapter import build_ocr_adapter
from docverify.services.verification_service import DocumentVerificationService


class _JsonFormatter(logging.Formatter):
    """Format JSON per logs estructurats (compatible amb Datadog, Loki, etc.)"""
    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        # Camps extra (mètriques, context)
        for key, val in record.__dict__.items():
            if key not in _RESERVED and not key.startswith("_"):
                payload[key] = val
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def _configure_logging() -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(_JsonFormatter())
    root = logging.getLogger("docverify")
    root.setLevel(logging.DEBUG if settings.debug else logging.INFO)
    root.addHandler(handler)
    root.propagate = False


_configure_logging()
log = logging.getLogger("docverify.request")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Motor OCR creat un sol cop; tancat en aturar l'aplicació."""
    adapter = build_ocr_adapter(settings)
    adapter.open()
    app.state.ocr_adapter = adapter
    app.state.verification_service = DocumentVerificationService(adapter, settings)
    log.info("app_started", extra={"engine": adapter.name, "available": adapter.is_available()})
    try:
        yield
    finally:
        adapter.close()
        log.info("app_stopped")


# Crear app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Verificació de documents d'identitat indis (PAN, Aadhaar, Passaport, Permís de conduir)",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # En producció, especificar origins concrets
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware de latència i logging de peticions
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Registra mètrica de latència per a cada petició."""
    t0 = time.monotonic()
    response = await call_next(request)
    durada_ms = round((time.monotonic() - t0) * 1000)
    log.info(
        "http_request",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "durada_ms": durada_ms,
        }
    )
    return response


# Middleware de validació d'API Key
@app.middleware("http")
async def validate_api_key(request: Request, call_next):
    """
    Valida l'API key en cada petició (excepte endpoints públics)
    """
    public_paths = ["/", "/health"]

    if request.url.path in public_paths or not settings.api_key_enabled:
        return await call_next(request)

    if not settings.api_key:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "API key not configured on the server"}
        )

    api_key = request.headers.get("X-API-Key")
    if not api_key or api_key != settings.api_key:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "Invalid or missing API key"},
            headers={"WWW-Authenticate": "ApiKey"}
        )

    return await call_next(request)


# Routes
app.include_router(verify.router, prefix="/verify", tags=["Verificació"])


@app.get("/")
async def root():
    """Root endpoint - retorna només estat bàsic"""
    return {"status": "ok"}


@app.get("/health")
async def health(request: Request):
    """Endpoint de health check"""
    adapter = getattr(request.app.state, "ocr_adapter", None)
    return {
        "status": "healthy",
        "services": {
            "engine": adapter.name if adapter else None,
            "available": adapter.is_available() if adapter else False,
        }
    }
