import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ticketd.config import settings
from ticketd.database import init_models
from ticketd.errors import ErrorKind, TicketdError, status_code_for

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_models()
    yield


async def ticketd_error_handler(request: Request, exc: TicketdError) -> JSONResponse:
    if exc.kind == ErrorKind.INTERNAL:
        logger.error(f"{request.method} {request.url.path} failed: {exc!r}", exc_info=exc.__cause__ or exc)
        return JSONResponse({"detail": "internal server error"}, status_code=500)
    return JSONResponse({"detail": str(exc)}, status_code=status_code_for(exc))


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # Routers
    from ticketd.routes.api import admin_router
    from ticketd.intake.router import router as intake_router
    from ticketd.embed.router import router as embed_router

    app.include_router(intake_router)
    app.include_router(embed_router)
    app.include_router(admin_router, prefix="/admin/api")

    app.add_exception_handler(TicketdError, ticketd_error_handler)

    # Every storage call is awaited inside the request task, so the deadline cancels it
    @app.middleware("http")
    async def request_timeout(request: Request, call_next):
        try:
            return await asyncio.wait_for(call_next(request), timeout=settings.REQUEST_TIMEOUT_SECONDS)
        except asyncio.TimeoutError:
            logger.warning(f"{request.method} {request.url.path} exceeded {settings.REQUEST_TIMEOUT_SECONDS}s")
            return JSONResponse({"detail": "request timed out"}, status_code=503)

    # Health Check
    @app.get("/health")
    def health_check():
        return {"status": "ok", "version": settings.VERSION}

    return app


app = create_app()


def run() -> None:
    """Console entry point: validate settings and serve with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        settings.check()
    except ValueError as e:
        raise SystemExit(f"invalid configuration: {e}")

    logger.info(settings.describe())
    logger.info(f"TicketD listening on :{settings.PORT}")
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()
