from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from config import Settings
from database import build_engine, create_db_and_tables
from errors import register_exception_handlers
from logging_config import setup_logging
from routes import auth, tasks

API_VERSION = "1.0.0"


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        settings: Application settings; read from the environment if omitted
        engine: Database engine; built from settings.database_url if omitted

    Returns:
        Configured FastAPI app
    """
    if settings is None:
        settings = Settings.from_env()
    if engine is None:
        engine = build_engine(settings.database_url, echo=settings.sql_echo)

    setup_logging(settings.log_level)

    app = FastAPI(
        title="Task Tracker API",
        description="RESTful API for personal task lists with multi-user support",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.settings = settings
    app.state.engine = engine

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(auth.router, tags=["auth"])
    app.include_router(tasks.router, tags=["tasks"])

    @app.on_event("startup")
    def on_startup():
        """Create database tables on startup"""
        create_db_and_tables(app.state.engine)

    @app.get("/")
    def read_root():
        """Root endpoint"""
        return {
            "message": "Task Tracker API is running",
            "version": API_VERSION,
            "docs": "/docs"
        }

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {"status": "ok"}

    return app


def main() -> None:
    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
