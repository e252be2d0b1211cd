from __future__ import annotations

from recipe_steps.src.common.errors import AppError
from recipe_steps.src.common.utils import error_response
from recipe_steps.src.constants import ERROR_CODE_INVALID_REQUEST, HTTP_STATUS_BAD_REQUEST


def invalid_request_error(message: str) -> AppError:
    return AppError(
        code=ERROR_CODE_INVALID_REQUEST,
        message=str(message),
        status_code=HTTP_STATUS_BAD_REQUEST,
    )


def app_error_response(exc: AppError):
    return error_response(exc.code, exc.message, exc.status_code)
