from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional
import logging
import traceback

from app.api.v1 import routers
from app.core.config import Settings
from app.core.exceptions import AppError
from app.db.session import connect_db_pool, close_db_pool
from app.services.storage_service import CloudinaryStorage

logging.basicConfig(level=logging.INFO)


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        cause = exc.__cause__ or exc
        logging.error(
            f"{request.method} {request.url.path} failed: {exc.message}\n"
            f"{''.join(traceback.format_exception(cause))}"
        )
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message}, headers=exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logging.error(f"Internal Server Error in {request.method} {request.url.path}: {exc}\n{traceback.format_exc()}")
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"message": "Server error"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API. Settings are read from the environment at startup unless given."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # fails fast here when a required variable such as SECRET_KEY is missing
        app.state.settings = settings or Settings()
        logging.getLogger().setLevel(app.state.settings.LOG_LEVEL.upper())
        app.state.storage = CloudinaryStorage.from_settings(app.state.settings)
        app.state.db_pool = await connect_db_pool(app.state.settings)
        yield
        await close_db_pool(app.state.db_pool)

    app = FastAPI(
        title="Driving School API",
        description="Admin and client accounts with client enrollment records",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(routers.router)

    @app.get("/")
    async def root():
        return {"message": "Welcome to Driving School API 🚗"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    server_settings = Settings()
    uvicorn.run("app.main:app", host="0.0.0.0", port=server_settings.PORT)
