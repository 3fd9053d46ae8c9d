from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.config import Settings, load_settings
from core.errors import DataError, ErrorKind, error_body
from core.pool import ClientFactory, mongo_pool
from tasks import router as tasks_router
from tenancy.dependencies import tenant_middleware

API_PREFIX = "/api/v1"


def create_app(
    settings: Settings | None = None,
    client_factory: ClientFactory | None = None,
) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # One pool per process, owned by the app.
        pool = mongo_pool(settings, client_factory)
        await pool.start()
        app.state.pool = pool
        try:
            yield
        finally:
            await pool.close()
            app.state.pool = None

    app = FastAPI(title="tasks-api", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.pool = None

    app.middleware("http")(tenant_middleware(settings.subdomain_offset))

    @app.exception_handler(RequestValidationError)
    async def invalid_request(_: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        message = str(errors[0].get("msg")) if errors else "Invalid request."
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(ErrorKind.INVALID_REQUEST, message),
        )

    @app.exception_handler(DataError)
    async def data_error(_: Request, exc: DataError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(exc.kind, exc.message),
        )

    app.include_router(tasks_router.router, prefix=API_PREFIX, tags=["tasks"])

    @app.get("/health")
    def health(request: Request) -> dict:
        pool = request.app.state.pool
        return {"status": "ok", "pool": pool.stats() if pool is not None else None}

    @app.get("/")
    def root() -> dict:
        return {"message": "tasks api", "env": settings.env}

    return app


# For `uvicorn main:app`; the pool is only built when the lifespan runs.
app = create_app()
