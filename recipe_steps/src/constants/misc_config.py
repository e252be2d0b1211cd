# -*- coding: utf-8 -*-
"""
杂项配置常量。

包含：
- 命令执行默认值
- 下载传输配置
- 文件系统默认值
- 错误码 / HTTP 状态码
- 环境变量名
"""

from typing import Final

APP_TITLE: Final = "Recipe Steps API"

# 命令执行：缺省 timeout 为 60 秒；显式 null/0 表示不限时
RUN_DEFAULT_TIMEOUT_SECONDS: Final = 60
RUN_TERMINATE_GRACE_SECONDS: Final = 2.0
# 等待子进程时 poll() 以毫秒 C int 计时：更大的 timeout 截断到该上限（约 24 天）
RUN_MAX_TIMEOUT_SECONDS: Final = (2**31 - 1) // 1000

# 下载
DOWNLOAD_CHUNK_SIZE: Final = 64 * 1024
DOWNLOAD_CONNECT_TIMEOUT_SECONDS: Final = 10.0
DOWNLOAD_DEFAULT_READ_TIMEOUT_SECONDS: Final = 60.0
DOWNLOAD_HTTP_STATUS_OK: Final = 200
DOWNLOAD_USER_AGENT: Final = "recipe-steps/1.0"

# 文件系统
MAKE_DIR_DEFAULT_MODE: Final = 0o777
FILE_DEFAULT_ENCODING: Final = "utf-8"

# 错误码
ERROR_CODE_INVALID_REQUEST: Final = "invalid_request"
ERROR_CODE_ARITY: Final = "invalid_arity"
ERROR_CODE_UNRECOGNIZED_PARAMETER: Final = "unrecognized_parameter"
ERROR_CODE_EMPTY_OR_NON_STRING: Final = "empty_or_non_string"
ERROR_CODE_PARAMETER_TYPE: Final = "invalid_parameter_type"
ERROR_CODE_INVALID_ARGUMENT: Final = "invalid_argument"
ERROR_CODE_UNKNOWN_METHOD: Final = "unknown_method"

# HTTP 状态码
HTTP_STATUS_BAD_REQUEST: Final = 400
HTTP_STATUS_NOT_FOUND: Final = 404

# 健康检查
HEALTH_STATUS_OK: Final = "ok"

# 环境变量
ENV_ENABLE_HTTPX: Final = "RECIPE_STEPS_ENABLE_HTTPX"
ENV_DOWNLOAD_TIMEOUT: Final = "RECIPE_STEPS_DOWNLOAD_TIMEOUT"
ENV_LOG_LEVEL: Final = "RECIPE_STEPS_LOG_LEVEL"
ENV_HOST: Final = "RECIPE_STEPS_HOST"
ENV_PORT: Final = "RECIPE_STEPS_PORT"

# serve 默认值
DEFAULT_HOST: Final = "127.0.0.1"
DEFAULT_PORT: Final = 8130
DEFAULT_LOG_LEVEL: Final = "INFO"
