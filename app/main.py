from fastapi import FastAPI, Request, Depends, Header
from fastapi.responses import JSONResponse
import logging
import secrets
from datetime import datetime, timezone
from typing import Optional

from config import Settings, get_settings
from db.database import create_engine, create_session_factory, init_db
from db.store import ReminderStore
from db.sql_store import SQLReminderStore
from scheduler.reminder import setup_scheduler
from services.clock import SystemClock
from services.email_service import EmailService
from services.reminder_service import ReminderProcessor

settings = get_settings()

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=settings.log_level
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(title="Study Reminder Service")
app.state.settings = settings
app.state.processor = None
app.state.reminder_scheduler = None
app.state.store = None


def create_store(settings: Settings) -> ReminderStore:
    """Build the reminder store selected by STORE_BACKEND."""
    if settings.store_backend == "sql":
        engine = create_engine(settings.database_url)
        return SQLReminderStore(create_session_factory(engine), engine)

    if settings.store_backend == "firestore":
        from db.firestore_store import FirestoreReminderStore

        return FirestoreReminderStore.from_credentials(
            settings.firebase_project_id,
            settings.firebase_client_email,
            settings.firebase_private_key,
        )

    raise ValueError(f"Unknown STORE_BACKEND {settings.store_backend!r}, expected 'firestore' or 'sql'")


def create_email_service(settings: Settings) -> EmailService:
    if not settings.email_user or not settings.email_password:
        logger.warning("EMAIL_USER/EMAIL_PASSWORD not set, reminder emails will fail")
    return EmailService(
        sender=settings.email_user or "",
        password=settings.email_password or "",
        smtp_server=settings.smtp_server,
        smtp_port=settings.smtp_port,
    )


@app.on_event("startup")
async def startup_event():
    """Create the store and mail handles and start the timer if enabled."""
    settings = app.state.settings
    store = create_store(settings)
    if isinstance(store, SQLReminderStore):
        await init_db(store.engine)

    app.state.store = store
    app.state.processor = ReminderProcessor(store, create_email_service(settings), SystemClock())

    if settings.scheduler_enabled:
        reminder_scheduler = setup_scheduler(app.state.processor, settings.check_interval_minutes)
        reminder_scheduler.start()
        app.state.reminder_scheduler = reminder_scheduler

    logger.info(f"Reminder service running on port {settings.port} ({settings.store_backend} store)")
    logger.info(f"Email configured: {settings.email_user}")

@app.on_event("shutdown")
async def shutdown_event():
    """Stop the timer and release the store."""
    if app.state.reminder_scheduler is not None:
        app.state.reminder_scheduler.shutdown()
        app.state.reminder_scheduler = None
    store = getattr(app.state, "store", None)
    if store is not None:
        await store.close()


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_processor(request: Request) -> ReminderProcessor:
    processor = request.app.state.processor
    if processor is None:
        raise RuntimeError("Reminder processor is not initialized")
    return processor

def secret_matches(provided: Optional[str], expected: Optional[str]) -> bool:
    """Constant-time comparison; an unset secret never matches."""
    if not provided or not expected:
        return False
    return secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))

def unauthorized() -> JSONResponse:
    return JSONResponse(status_code=401, content={"error": "Unauthorized"})


@app.get("/")
async def root():
    """Liveness endpoint."""
    return {
        "status": "Reminder Service Running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

@app.get("/process-reminders")
async def process_reminders(
    request: Request,
    x_api_key: Optional[str] = Header(None),
    app_settings: Settings = Depends(get_app_settings),
):
    """Manual trigger, authenticated with the x-api-key header."""
    if not secret_matches(x_api_key, app_settings.api_key):
        logger.warning("Rejected manual trigger with invalid API key")
        return unauthorized()

    processor = get_processor(request)
    return await processor.process_reminders()

@app.get("/cron/process-reminders")
async def cron_process_reminders(
    request: Request,
    x_cron_secret: Optional[str] = Header(None),
    app_settings: Settings = Depends(get_app_settings),
):
    """Cron trigger, authenticated with the x-cron-secret header."""
    if not secret_matches(x_cron_secret, app_settings.cron_secret):
        logger.warning("Rejected cron trigger with invalid secret")
        return unauthorized()

    processor = get_processor(request)
    return await processor.process_reminders()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=settings.port)
