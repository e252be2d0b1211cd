from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from recipe_steps.src.constants import (
    ERROR_CODE_ARITY,
    ERROR_CODE_EMPTY_OR_NON_STRING,
    ERROR_CODE_INVALID_ARGUMENT,
    ERROR_CODE_PARAMETER_TYPE,
    ERROR_CODE_UNKNOWN_METHOD,
    ERROR_CODE_UNRECOGNIZED_PARAMETER,
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_NOT_FOUND,
)


@dataclass
class AppError(Exception):
    """
    统一的业务异常（handler 抛出，API/CLI 层捕获并转换为错误响应）。

    设计目标：
    - handler 不直接依赖 FastAPI / click，只表达“错误是什么”；
    - API 层统一处理错误协议（error.code/error.message/status_code）。
    """

    code: str
    message: str
    status_code: int
    details: Optional[dict] = None

    def __str__(self) -> str:
        return self.message


class ParameterError(AppError):
    """
    参数校验失败（致命错误）：在任何副作用发生前抛出，中止当前步骤。

    与“执行失败”（命令非零退出/网络错误/文件系统错误）严格区分：后者只体现为 success=false。
    """

    default_code = ERROR_CODE_INVALID_ARGUMENT

    def __init__(self, message: str, *, parameter: object = None, code: Optional[str] = None):
        details = {"parameter": parameter} if parameter is not None else None
        super().__init__(
            code=code or self.default_code,
            message=str(message),
            status_code=HTTP_STATUS_BAD_REQUEST,
            details=details,
        )
        self.parameter = parameter


class ArityError(ParameterError):
    default_code = ERROR_CODE_ARITY


class UnrecognizedParameterError(ParameterError):
    default_code = ERROR_CODE_UNRECOGNIZED_PARAMETER


class EmptyOrNonStringError(ParameterError):
    default_code = ERROR_CODE_EMPTY_OR_NON_STRING


class ParameterTypeError(ParameterError, TypeError):
    default_code = ERROR_CODE_PARAMETER_TYPE


class InvalidArgumentError(ParameterError, ValueError):
    """命令/URL/timeout/mode 等取值非法。"""

    default_code = ERROR_CODE_INVALID_ARGUMENT


class UnknownMethodError(AppError):
    def __init__(self, method: str):
        super().__init__(
            code=ERROR_CODE_UNKNOWN_METHOD,
            message=f'Method "{method}" is not registered.',
            status_code=HTTP_STATUS_NOT_FOUND,
            details={"method": method},
        )
        self.method = method
