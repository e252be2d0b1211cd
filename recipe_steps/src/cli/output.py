# -*- coding: utf-8 -*-
"""
终端输出格式化。

支持两种模式：
- rich 模式（默认）：使用表格/面板渲染
- JSON 模式（--json）：原始 JSON 输出，便于管道/脚本消费
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.markup import escape as rich_escape
from rich.panel import Panel
from rich.table import Table

console = Console()


def print_json(data: Any) -> None:
    """JSON 格式输出。"""
    console.print_json(json.dumps(data, ensure_ascii=False, default=str))


def print_error(message: str, code: Optional[str] = None) -> None:
    """错误信息输出。"""
    title = f"错误 [{code}]" if code else "错误"
    console.print(Panel(rich_escape(str(message)), title=title, border_style="red"))


def print_warning(message: str) -> None:
    console.print(f"[yellow]{rich_escape(message)}[/yellow]")


class ConsoleOutput:
    """
    步骤输出通道的终端实现：以 `\\r` 结尾的文本视为进度行，原地覆盖刷新。
    """

    def __init__(self, target: Optional[Console] = None):
        self._console = target or console

    def write(self, text: str) -> None:
        raw = str(text or "")
        line = raw.rstrip("\r\n")
        if not line:
            return
        end = "\r" if raw.endswith("\r") else "\n"
        self._console.print(rich_escape(line), end=end, highlight=False)


def print_methods_table(items: List[Dict[str, Any]]) -> None:
    """表格形式展示已注册方法及其参数契约。"""
    if not items:
        print_warning("暂无已注册方法")
        return
    table = Table(title="步骤方法")
    table.add_column("方法", style="cyan", no_wrap=True)
    table.add_column("模块", style="dim", no_wrap=True)
    table.add_column("参数个数", justify="center", no_wrap=True)
    table.add_column("参数名", style="white")
    for item in items:
        min_arity = item.get("min_arity")
        max_arity = item.get("max_arity")
        if max_arity is None:
            arity = f"{min_arity}+"
        elif max_arity == min_arity:
            arity = str(min_arity)
        else:
            arity = f"{min_arity}-{max_arity}"
        keys = item.get("allowed_keys") or []
        keys_text = ", ".join(str(k) for k in keys) if keys else "(位置参数)"
        table.add_row(str(item.get("name", "")), str(item.get("module", "")), arity, keys_text)
    console.print(table)


def print_step_result(method: str, success: bool, payload: Dict[str, Any]) -> None:
    """面板形式展示单步执行结果。"""
    lines = [f"方法:   {method}", f"成功:   {'是' if success else '否'}"]
    for key, value in (payload or {}).items():
        lines.append("")
        lines.append(f"{key}:")
        lines.append("null" if value is None else str(value))
    border = "green" if success else "red"
    console.print(Panel(rich_escape("\n".join(lines)), title="执行结果", border_style=border))
