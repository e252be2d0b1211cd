import logging

from fastapi import FastAPI, Request

from recipe_steps.src.api.routes import router as api_router
from recipe_steps.src.common.app_error_utils import app_error_response
from recipe_steps.src.common.errors import AppError
from recipe_steps.src.common.utils import configure_logging
from recipe_steps.src.constants import APP_TITLE

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title=APP_TITLE)

    @app.exception_handler(AppError)
    async def _handle_app_error(request: Request, exc: AppError):
        # handler/服务层只 raise AppError；这里统一转为 HTTP JSONResponse。
        _ = request
        return app_error_response(exc)

    app.include_router(api_router, prefix="/api")
    logger.debug("app_created title=%s", APP_TITLE)
    return app


app = create_app()
