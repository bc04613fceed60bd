# career_canvas/main.py
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .config import get_settings
from .constants import ErrorMessages
from .database import Database
from .exceptions import BusinessLogicError, InternalError
from .routers import auth_router, connection_router, mentor_router, preferences_router, profile_router, story_router
from .schemas import ConnectionTestResponse

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)


def error_response(status_code: int, error: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


def create_app(database: Optional[Database] = None) -> FastAPI:
    app = FastAPI(
        title="Career Canvas Mentorship API",
        description="Mentor discovery, mentor profiles, OAuth login, mentorship preferences and career stories.",
        version="1.0.0",
    )
    app.state.database = database or Database()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(auth_router.router)
    app.include_router(mentor_router.router)
    app.include_router(profile_router.router)
    app.include_router(preferences_router.router)
    app.include_router(connection_router.router)
    app.include_router(story_router.router)

    @app.exception_handler(BusinessLogicError)
    async def business_error_handler(request: Request, exc: BusinessLogicError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.details})")
        else:
            logger.info(f"{request.method} {request.url.path} -> {exc.code}: {exc.message}")
        return error_response(exc.status_code, exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = [
            {"field": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg")}
            for err in exc.errors()
        ]
        return error_response(400, {"code": "VALIDATION_ERROR", "message": "Invalid request", "details": details})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
        return error_response(500, {"code": "INTERNAL_ERROR", "message": ErrorMessages.INTERNAL, "details": str(exc)})

    @app.on_event("startup")
    async def startup_event():
        """Initialize application on startup"""
        logger.info("Application startup event triggered.")
        try:
            app.state.database.create_all()
            logger.info("Startup sequence completed successfully.")
        except Exception as e:
            logger.critical(f"Critical error during startup: {e}", exc_info=True)

    @app.on_event("shutdown")
    async def shutdown_event():
        app.state.database.dispose()

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        try:
            app.state.database.ping()
            return {"status": "healthy", "database": "reachable"}
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return {"status": "unhealthy", "database": "unreachable", "error": str(e)}

    @app.get("/api/testConnection", response_model=ConnectionTestResponse)
    async def test_connection():
        """Lists the tables the service can see"""
        db = app.state.database
        try:
            tables = db.table_names()
        except SQLAlchemyError as e:
            logger.error(f"Database connection test failed: {e}")
            raise InternalError("Database connection failed", details=str(e))
        return ConnectionTestResponse(
            message="Connected to database successfully",
            database=db.name,
            collections_count=len(tables),
            collections=tables,
        )

    return app


app = create_app()
