from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from db.seed import seed
from services.portfolio.app.db import Database
from services.portfolio.app.errors import StoreError
from services.portfolio.app.logging import configure_logging, logger
from services.portfolio.app.observability import (
    STORE_ERROR_TOTAL,
    add_metrics_middleware,
    instrument_sqlalchemy,
    setup_tracing,
)
from services.portfolio.app.repository import Storage
from services.portfolio.app.schemas import (
    Achievement,
    Education,
    ErrorResponse,
    InquiryAccepted,
    InquiryCreate,
    Project,
    Skill,
)
from services.portfolio.app.settings import SETTINGS, PortfolioSettings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: PortfolioSettings = app.state.settings
    database = Database(settings.database_url, echo=settings.db_echo)
    await database.open()
    if settings.otel_enabled:
        instrument_sqlalchemy(database.engine)

    storage = Storage(database)
    app.state.database = database
    app.state.storage = storage
    try:
        # Seeding finishes (or fails) before the app serves its first request.
        if settings.seed_on_startup:
            try:
                await seed(storage)
            except StoreError as e:
                if settings.seed_fail_fast:
                    raise
                logger.error("seed_failed", kind=e.kind, operation=e.operation, error=str(e))
        logger.info("app_ready")
        yield
    finally:
        await database.close()


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


router = APIRouter(prefix="/api")


@router.get("/projects", response_model=list[Project])
async def list_projects(storage: Storage = Depends(get_storage)) -> list[Project]:
    return await storage.projects.list()


@router.get("/projects/{project_id}", response_model=Project, responses={404: {"model": ErrorResponse}})
async def get_project(project_id: int, storage: Storage = Depends(get_storage)) -> Project:
    project = await storage.projects.get(project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.get("/skills", response_model=list[Skill])
async def list_skills(storage: Storage = Depends(get_storage)) -> list[Skill]:
    return await storage.skills.list()


@router.get("/education", response_model=list[Education])
async def list_education(storage: Storage = Depends(get_storage)) -> list[Education]:
    return await storage.education.list()


@router.get("/achievements", response_model=list[Achievement])
async def list_achievements(storage: Storage = Depends(get_storage)) -> list[Achievement]:
    return await storage.achievements.list()


@router.post(
    "/inquiries", response_model=InquiryAccepted, status_code=201, responses={400: {"model": ErrorResponse}}
)
async def create_inquiry(req: InquiryCreate, storage: Storage = Depends(get_storage)) -> InquiryAccepted:
    inquiry = await storage.inquiries.create(req)
    logger.info("inquiry_received", inquiry_id=inquiry.id)
    return InquiryAccepted()


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    body = ErrorResponse(message=str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(message="Invalid input", details=jsonable_encoder(exc.errors())).model_dump(),
    )


async def _store_error(request: Request, exc: StoreError) -> JSONResponse:
    STORE_ERROR_TOTAL.labels(exc.kind or "unknown", type(exc).__name__).inc()
    logger.error(
        "store_error",
        path=request.url.path,
        kind=exc.kind,
        operation=exc.operation,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    body = ErrorResponse(message="Internal server error")
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


def create_app(settings: PortfolioSettings | None = None) -> FastAPI:
    settings = settings or SETTINGS
    configure_logging(settings.log_level)

    app = FastAPI(title="Portfolio API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings

    if settings.otel_enabled:
        setup_tracing(app, service_name="portfolio")
    add_metrics_middleware(app, service_name="portfolio")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Starlette's base class also covers router-level 404/405 responses.
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(StoreError, _store_error)

    @app.get("/healthz")
    async def healthz(database: Database = Depends(get_database)) -> dict:
        await database.ping()
        return {"ok": True}

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=SETTINGS.host, port=SETTINGS.port, log_level=SETTINGS.log_level.lower())
