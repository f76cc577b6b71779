import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from authkit.cache import StateCacheError
from authkit.logger import logger
from internal.config.settings import Settings, get_settings
from internal.core.exception import AppException, global_codes
from internal.core.logger import init_logger
from internal.core.response import error_response
from internal.infra.redis import close_redis, init_redis
from internal.services.oauth import close_oauth_service, init_oauth_service


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        debug=settings.DEBUG,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=_new_lifespan(settings),
    )

    register_router(app)
    register_exception(app)

    return app


def register_router(app: FastAPI):
    from internal.controllers import api

    app.include_router(api.router)


def register_exception(app: FastAPI):
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_: Request, exc: RequestValidationError):
        logger.error(f"Validation Error: {exc!r}")
        return error_response(global_codes.BadRequest, message=f"Validation Error: {exc.errors()}", http_status=422)

    @app.exception_handler(AppException)
    async def app_exception_handler(_: Request, exc: AppException):
        logger.warning(f"App Exception: {exc}")
        http_status = 404 if exc.error == global_codes.NotFound else 400
        return error_response(exc.error, message=exc.message, http_status=http_status)

    @app.exception_handler(StateCacheError)
    async def state_cache_exception_handler(_: Request, exc: StateCacheError):
        logger.error(f"State cache unavailable: {exc!r}")
        return error_response(global_codes.ServiceUnavailable, message=str(exc), http_status=503)


def _new_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        init_logger(settings)
        logger.info(f"Init lifespan... env: {settings.APP_ENV}, pid: {os.getpid()}")

        if settings.REDIS_URL is not None:
            init_redis(str(settings.REDIS_URL))
        init_oauth_service(settings)

        logger.info("Application will start.")

        yield

        # 关闭时的清理逻辑
        await close_oauth_service()
        await close_redis()

    return lifespan
