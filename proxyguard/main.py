"""
Proxy Guard Service - FastAPI Application
"""
import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .proctor.api import get_session, router as proctor_router
from .utils.logging_config import Colors, setup_logging

logger = logging.getLogger(__name__)


app = FastAPI(
    title=settings.APP_NAME,
    description="Live proxy detection: unrecognized faces, noise and multiple voices",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None
)


# ============================================================================
# Request Logging Middleware
# ============================================================================

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming requests with timing."""
    start = time.time()
    method = request.method
    path = request.url.path

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"RequestError: {method} {path}: {e}")
        raise

    # The status endpoint is polled every frame by the UI
    if path not in ["/health", "/favicon.ico", "/api/proctor/status", "/api/proctor/overlay"]:
        duration_ms = int((time.time() - start) * 1000)
        logger.info(f"{method} {path} -> {response.status_code} in {duration_ms}ms")

    return response


# CORS - the control UI is served from a different local origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,  # Must be False when using wildcard origin
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(proctor_router)


@app.on_event("startup")
async def startup_event():
    """Configure logging and load face models."""
    setup_logging(
        service_name="proxy-guard",
        level=settings.LOG_LEVEL,
        log_to_file=settings.LOG_TO_FILE,
        log_dir=settings.LOG_DIR
    )

    print(f"\n{Colors.BOLD}{Colors.GREEN}{'='*60}{Colors.RESET}")
    print(f"{Colors.BOLD}{Colors.GREEN}  {settings.APP_NAME} STARTED{Colors.RESET}")
    print(f"{Colors.BOLD}{Colors.GREEN}{'='*60}{Colors.RESET}")
    print(f"  Running on: {Colors.CYAN}http://{settings.HOST}:{settings.PORT}{Colors.RESET}")
    print(f"  Face tolerance: {Colors.CYAN}{settings.FACE_MATCH_TOLERANCE}{Colors.RESET}")
    print(f"  Noise threshold: {Colors.CYAN}{settings.NOISE_THRESHOLD}{Colors.RESET}")
    print(f"  Voices threshold: {Colors.CYAN}{settings.MULTIPLE_VOICES_THRESHOLD}{Colors.RESET}\n")

    if settings.PRELOAD_MODELS:
        session = get_session()
        if session.load_models():
            print(f"  {Colors.GREEN}✓ Face models loaded{Colors.RESET}\n")
        else:
            print(f"  {Colors.RED}✗ Face models failed to load{Colors.RESET}\n")


@app.on_event("shutdown")
async def shutdown_event():
    """Release camera and microphone."""
    await get_session().shutdown()


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": "1.0.0"
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": settings.APP_NAME,
        "docs": "/docs" if settings.DEBUG else "Disabled in production"
    }


def run():
    """Console entry point"""
    import uvicorn

    uvicorn.run("proxyguard.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
