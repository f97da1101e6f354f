"""
app/main.py

Purpose: Application entry point

- Initializes FastAPI app
- Loads configuration and logging
- Builds the SMS dispatcher once at startup
- Registers API routes (transaction form, receipt, details)
- Manages application lifecycle (startup/shutdown)
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware
from contextlib import asynccontextmanager
import time

from app.core.config import settings, validate_settings, ProviderConfig
from app.core.errors import add_exception_handlers
from app.core.logging import setup_logging, get_logger
from app.services.sms_service import MessageDispatcher
from app.services.sms_transport import AfricasTalkingTransport
from app.api import transactions

# Initialize logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info("🚀 Starting TxnAlert demo application...")

    transport = None
    try:
        logger.info("Validating configuration...")
        validate_settings()
        logger.info("✅ Configuration validated")

        if settings.SMS_ENABLED:
            provider_config = ProviderConfig.from_settings(settings)
            transport = AfricasTalkingTransport(provider_config)
            app.state.dispatcher = MessageDispatcher(provider_config, transport)

            if provider_config.is_sandbox:
                logger.info('🧪 SMS relay in sandbox mode with from: "sandbox"')
            elif provider_config.sender_id:
                logger.info(f'🚀 SMS relay in production mode with from: "{provider_config.sender_id}"')
            else:
                logger.warning("⚠️ Production mode without AT_SENDER; every SMS will fail")
        else:
            app.state.dispatcher = None
            logger.info("SMS relay disabled")

        logger.info("📝 This is for EDUCATIONAL PURPOSES ONLY; all transactions are DEMO simulations")
        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"Debug Mode: {settings.DEBUG}")

    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        raise

    yield  # Application runs here

    logger.info("🛑 Shutting down TxnAlert demo application...")

    try:
        if transport is not None:
            await transport.close()
            logger.info("✅ SMS transport closed")

        logger.info("👋 TxnAlert shut down successfully")

    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}", exc_info=True)


app = FastAPI(
    title="TxnAlert - Demo Transaction Alert Simulator",
    description="Educational bank transfer receipt simulator with SMS relay",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
    docs_url="/docs" if settings.is_development else None,  # Disable docs in production
    redoc_url="/redoc" if settings.is_development else None,
)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Signed cookie session holding the submitted transaction
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    max_age=settings.SESSION_MAX_AGE_SECONDS,
    same_site="lax",
    https_only=settings.is_production,
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add processing time header to all responses."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    if process_time > 5.0:
        logger.warning(
            f"Slow request detected: {request.method} {request.url.path}",
            extra={"process_time": process_time}
        )

    return response


add_exception_handlers(app)

app.include_router(transactions.router, tags=["Transactions"])
app.include_router(transactions.api_router, prefix=settings.API_PREFIX, tags=["Transactions"])


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - basic info."""
    return {
        "name": "TxnAlert API",
        "version": "1.0.0",
        "description": "DEMO bank transfer receipt simulator (educational use only)",
        "status": "running",
        "environment": settings.ENVIRONMENT,
        "submit": "/submit-transaction"
    }


@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """
    Health check endpoint. Reports whether the SMS relay is configured;
    the provider itself is not contacted.
    """
    dispatcher = getattr(request.app.state, "dispatcher", None)

    health_status = {
        "status": "healthy",
        "timestamp": time.time(),
        "environment": settings.ENVIRONMENT,
        "version": "1.0.0",
        "checks": {
            "sms_relay": dispatcher.config.mode if dispatcher else "disabled"
        }
    }
    return health_status


@app.get("/ready", tags=["Health"])
async def readiness_check():
    """
    Readiness probe - indicates if app is ready to receive traffic.
    """
    return {"status": "ready"}


@app.get("/live", tags=["Health"])
async def liveness_check():
    """
    Liveness probe - indicates if app is alive.
    """
    return {"status": "alive"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
