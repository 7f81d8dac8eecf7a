"""FastAPI application."""

import argparse
from typing import Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from leadsync.configs import settings
from leadsync.controllers.lead_controllers import lead_router
from leadsync.controllers.sync_controllers import sync_router
from leadsync.logger_config import get_logger
from leadsync.repositories.database import Base, engine
from leadsync.repositories import models  # noqa: F401

from startup import build_orchestrator, seed_store_directory

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """Create the API with its routers and the orchestrator in ``app.state``."""
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully!")

    logger.info("Seeding the store directory...")
    seed_store_directory()

    logger.info("Starting FastAPI application...")
    application = FastAPI(
        title="LeadSync API",
        root_path=settings.ROOT_PATH_BACKEND,
        description="Lead listing and reporting sync endpoints",
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.state.sync_orchestrator = build_orchestrator()
    application.include_router(lead_router)
    application.include_router(sync_router)

    @application.get("/", response_description="Api healthcheck")  # type: ignore[misc]
    async def index() -> Dict[str, str]:
        """Define a route for handling HTTP GET requests to the root URL ("/")."""
        return {"status": "ok"}

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    parser = argparse.ArgumentParser()
    parser.add_argument("--host", required=True, help="Application host.")
    parser.add_argument("--port", required=True, help="Application port.")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development purposes.",
    )
    args = parser.parse_args()

    uvicorn.run("app:app", host=args.host, port=int(args.port), reload=args.reload)
