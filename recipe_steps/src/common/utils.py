from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from recipe_steps.src.constants import DEFAULT_LOG_LEVEL, ENV_LOG_LEVEL

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def env_enabled(name: str, default: bool = True) -> bool:
    raw = str(os.getenv(name, "") or "").strip().lower()
    if not raw:
        return bool(default)
    return raw in {"1", "true", "yes", "on"}


def env_float(name: str, default: float) -> float:
    raw = str(os.getenv(name) or "").strip()
    if not raw:
        return float(default)
    try:
        value = float(raw)
    except ValueError:
        logger.warning("invalid_env_value name=%s value=%s", name, raw)
        return float(default)
    return value if value > 0 else float(default)


def configure_logging(level: Optional[str] = None) -> None:
    """
    初始化根 logger（CLI / HTTP app 启动时调用，import 时不产生副作用）。

    优先级：显式参数 > 环境变量 RECIPE_STEPS_LOG_LEVEL > INFO。
    """
    name = str(level or os.getenv(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL).strip().upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        numeric = logging.INFO
    logging.basicConfig(level=numeric, format=_LOG_FORMAT)
    logging.getLogger().setLevel(numeric)


def error_response(code: str, message: str, status_code: int) -> "JSONResponse":
    """
    统一错误响应结构：{"error": {"code": "...", "message": "..."}}。
    """
    # 懒导入：避免通用工具模块在被离线单测/CLI 使用时强依赖 fastapi。
    from fastapi.responses import JSONResponse

    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
    )


def truncate_inline_text(text: object, max_chars: int = 220) -> str:
    raw = str(text or "").replace("\r\n", "\n").replace("\r", "\n")
    raw = " ".join(raw.split()).strip()
    if not raw:
        return ""
    limit = max(1, int(max_chars))
    if len(raw) <= limit:
        return raw
    return f"{raw[: max(0, limit - 1)]}…"


def discard_file(path: "str | Path | None") -> None:
    """尽量删除临时文件；文件不存在或删除失败只记日志。"""
    if not path:
        return
    try:
        Path(path).unlink()
    except FileNotFoundError:
        return
    except OSError as exc:
        logger.warning("discard_file failed path=%s error=%s", path, exc)


def atomic_write_text(path: "str | Path", text: str, *, encoding: str = "utf-8") -> None:
    """
    原子写文件：先写临时文件，再 os.replace 覆盖目标文件，避免半写入导致文件损坏。

    父目录不存在时自动创建；写入失败时抛出 OSError，由调用方决定如何处理。
    """
    target = Path(path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding=encoding,
            delete=False,
            dir=str(target.parent),
            prefix=f".{target.name}.",
            suffix=".tmp",
            newline="",
        ) as f:
            tmp_path = f.name
            f.write(text)
        os.replace(tmp_path, str(target))
        tmp_path = None
    finally:
        # 若 replace 前出错，清理临时文件
        discard_file(tmp_path)
