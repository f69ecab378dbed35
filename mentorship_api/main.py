# mentorship_api/main.py
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .config import get_settings
from .constants import ErrorMessages
from .database import create_db_and_tables, SessionLocal
from .routers import auth_router, mentorship_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Mentorship Request API",
    description="Applies for, approves, rejects and cancels mentorship requests.",
    version="1.0.0",
)

app.include_router(auth_router.router)
app.include_router(mentorship_router.router)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and parameters are reported as 400 Bad Request"""
    logger.info(f"Invalid payload for {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"detail": ErrorMessages.INVALID_PAYLOAD, "errors": jsonable_errors(exc)},
    )

def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]

@app.on_event("startup")
async def startup_event():
    """Initialize application on startup"""
    logger.info("Application startup event triggered.")
    try:
        create_db_and_tables()
        logger.info("Startup sequence completed successfully.")
    except SQLAlchemyError as e:
        logger.critical(f"Critical error during startup: {e}", exc_info=True)

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "ok"}
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        return {"status": "unhealthy", "error": str(e)}
