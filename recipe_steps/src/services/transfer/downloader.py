# -*- coding: utf-8 -*-
"""
文件下载（两种传输方式）。

- 首选：httpx 流式下载（跟随重定向、按块回调进度）；
- 兜底：urllib.request 顺序读取 URL 并写入文件（首选被禁用或运行时不可用时使用）。

约定：
- 每次调用只选一次传输方式、只尝试一次，失败不会换另一种方式重试；
- 网络错误 / 非 200 状态 / 写入失败只返回 False，不抛异常；
- 内容先写入目标目录下的临时文件，成功后 os.replace 到目标路径，失败时删除临时文件，不留半截文件。
"""

from __future__ import annotations

import http.client
import importlib.util
import logging
import os
import tempfile
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Mapping, Optional
from urllib.parse import urlsplit

from recipe_steps.src.common.errors import InvalidArgumentError
from recipe_steps.src.common.utils import discard_file, env_float
from recipe_steps.src.constants import (
    DOWNLOAD_CHUNK_SIZE,
    DOWNLOAD_CONNECT_TIMEOUT_SECONDS,
    DOWNLOAD_DEFAULT_READ_TIMEOUT_SECONDS,
    DOWNLOAD_HTTP_STATUS_OK,
    DOWNLOAD_USER_AGENT,
    ENV_DOWNLOAD_TIMEOUT,
)

logger = logging.getLogger(__name__)

TRANSPORT_HTTPX = "httpx"
TRANSPORT_URLLIB = "urllib"

# (已传输字节数, 总字节数|None)
ProgressCallback = Callable[[int, Optional[int]], None]


@dataclass(frozen=True)
class TransferRequest:
    source_url: str
    destination_path: str


def is_valid_url(url: str) -> bool:
    try:
        return bool(urlsplit(str(url or "").strip()).scheme)
    except ValueError:
        return False


def build_transfer_request(url: str, filename: str) -> TransferRequest:
    """URL 必须能解析出 scheme，否则在任何 I/O 之前抛 InvalidArgumentError。"""
    if not is_valid_url(url):
        raise InvalidArgumentError(f'The URL "{url}" is not valid.', parameter="url")
    return TransferRequest(source_url=str(url).strip(), destination_path=str(filename))


def is_httpx_available() -> bool:
    return importlib.util.find_spec("httpx") is not None


def select_transport(enable_httpx: bool) -> str:
    if enable_httpx and is_httpx_available():
        return TRANSPORT_HTTPX
    return TRANSPORT_URLLIB


def resolve_read_timeout() -> float:
    return env_float(ENV_DOWNLOAD_TIMEOUT, DOWNLOAD_DEFAULT_READ_TIMEOUT_SECONDS)


def _content_length(headers: Optional[Mapping[str, str]]) -> Optional[int]:
    if not headers:
        return None
    raw = headers.get("content-length") or headers.get("Content-Length")
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    return value if value >= 0 else None


def _emit_progress(progress: Optional[ProgressCallback], done: int, total: Optional[int]) -> None:
    if progress is None:
        return
    try:
        progress(done, total)
    except Exception as exc:
        # 进度通道只写：它自身出错不能中断下载
        logger.debug("download progress sink failed: %s", exc)


def _write_stream(
    destination: str,
    chunks: Iterable[bytes],
    total: Optional[int],
    progress: Optional[ProgressCallback],
) -> None:
    """
    把字节流写入目标文件（临时文件 + os.replace）；任何异常都会先清理临时文件再向上抛出。
    """
    target = Path(destination).expanduser()
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="wb",
            delete=False,
            dir=str(target.parent),
            prefix=f".{target.name}.",
            suffix=".part",
        ) as handle:
            tmp_path = handle.name
            done = 0
            for chunk in chunks:
                if not chunk:
                    continue
                handle.write(chunk)
                done += len(chunk)
                _emit_progress(progress, done, total)
        os.replace(tmp_path, str(target))
        tmp_path = None
    finally:
        discard_file(tmp_path)


def download_with_httpx(
    request: TransferRequest,
    progress: Optional[ProgressCallback] = None,
    *,
    read_timeout: Optional[float] = None,
) -> bool:
    import httpx

    timeout = httpx.Timeout(
        read_timeout or resolve_read_timeout(),
        connect=DOWNLOAD_CONNECT_TIMEOUT_SECONDS,
    )
    try:
        with httpx.Client(timeout=timeout) as client:
            with client.stream(
                "GET",
                request.source_url,
                headers={"User-Agent": DOWNLOAD_USER_AGENT},
                follow_redirects=True,
            ) as resp:
                status_code = int(resp.status_code)
                if status_code != DOWNLOAD_HTTP_STATUS_OK:
                    logger.warning("download failed transport=httpx status=%s url=%s", status_code, request.source_url)
                    return False
                total = _content_length(resp.headers)
                _write_stream(
                    request.destination_path,
                    resp.iter_bytes(chunk_size=DOWNLOAD_CHUNK_SIZE),
                    total,
                    progress,
                )
    except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError, OSError, ValueError) as exc:
        logger.warning("download failed transport=httpx url=%s error=%s", request.source_url, exc)
        return False
    return True


def download_with_urllib(
    request: TransferRequest,
    progress: Optional[ProgressCallback] = None,
    *,
    read_timeout: Optional[float] = None,
) -> bool:
    req = urllib.request.Request(request.source_url, headers={"User-Agent": DOWNLOAD_USER_AGENT})
    try:
        with urllib.request.urlopen(req, timeout=read_timeout or resolve_read_timeout()) as resp:
            # file:// 等非 HTTP scheme 没有状态码：读取完成即视为成功
            status_code = getattr(resp, "status", None)
            if status_code is not None and int(status_code) != DOWNLOAD_HTTP_STATUS_OK:
                logger.warning("download failed transport=urllib status=%s url=%s", status_code, request.source_url)
                return False
            total = _content_length(getattr(resp, "headers", None))
            _write_stream(
                request.destination_path,
                iter(lambda: resp.read(DOWNLOAD_CHUNK_SIZE), b""),
                total,
                progress,
            )
    except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError) as exc:
        logger.warning("download failed transport=urllib url=%s error=%s", request.source_url, exc)
        return False
    return True


def download_file(
    request: TransferRequest,
    *,
    enable_httpx: bool = True,
    progress: Optional[ProgressCallback] = None,
    read_timeout: Optional[float] = None,
) -> bool:
    """
    执行一次下载；返回是否成功（目标文件已完整写入）。
    """
    transport = select_transport(enable_httpx)
    logger.debug("download start transport=%s url=%s", transport, request.source_url)
    if transport == TRANSPORT_HTTPX:
        return download_with_httpx(request, progress, read_timeout=read_timeout)
    return download_with_urllib(request, progress, read_timeout=read_timeout)
