from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

# 文件系统原语可能抛出的“执行失败”：shutil.Error 是 OSError 的子类，UnicodeError 是 ValueError 的子类；
# 路径含 NUL 时抛 ValueError，mode 超出 C int 范围时抛 OverflowError
FILESYSTEM_ERRORS = (OSError, ValueError, OverflowError)


def attempt_filesystem_call(method_name: str, primitive: Callable[..., Any], *args: Any) -> bool:
    """
    调用文件系统原语，把执行失败转换为 False（不向上抛出）。
    """
    try:
        primitive(*args)
    except FILESYSTEM_ERRORS as exc:
        logger.warning("%s failed args=%s error=%s", method_name, args, exc)
        return False
    return True
