# -*- coding: utf-8 -*-
"""
步骤输出通道（只写）。

handler 只通过 `write(text)` 汇报进度，从不读取；具体落到哪里（日志/终端/丢弃）由调用方决定。
"""

from __future__ import annotations

import logging
from typing import List, Protocol

logger = logging.getLogger(__name__)


class OutputSink(Protocol):
    def write(self, text: str) -> None:
        ...


class NullOutput:
    """丢弃所有输出（默认值）。"""

    def write(self, text: str) -> None:
        _ = text


class LoggingOutput:
    """把输出转发到 logger（HTTP API 使用）。"""

    def __init__(self, logger: logging.Logger, level: int = logging.INFO):
        self._logger = logger
        self._level = level

    def write(self, text: str) -> None:
        line = str(text or "").rstrip("\r\n")
        if line:
            self._logger.log(self._level, "%s", line)


class BufferedOutput:
    """收集输出到内存列表，便于测试/调试断言。"""

    def __init__(self) -> None:
        self.lines: List[str] = []

    def write(self, text: str) -> None:
        self.lines.append(str(text))


def safe_write(output: OutputSink, text: str) -> None:
    """写入输出通道；通道自身出错只记日志，不影响步骤执行。"""
    try:
        output.write(text)
    except Exception as exc:
        logger.debug("output sink write failed: %s", exc)
