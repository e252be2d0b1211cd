# -*- coding: utf-8 -*-
"""本地执行单个步骤方法。"""

from __future__ import annotations

import json
import sys
from typing import Any, Dict, Tuple

import click

from recipe_steps.src.actions.context import ExecutionContext
from recipe_steps.src.actions.executor import execute_method
from recipe_steps.src.actions.parameters import ParameterBag
from recipe_steps.src.cli.output import ConsoleOutput, print_error, print_json, print_step_result
from recipe_steps.src.common.app_error_utils import invalid_request_error
from recipe_steps.src.common.errors import AppError
from recipe_steps.src.common.output import NullOutput

EXIT_CODE_FAILED = 1
EXIT_CODE_INVALID = 2


def coerce_cli_value(text: str) -> Any:
    """
    命令行参数值：能按 JSON 解析就用解析结果（数字/数组/null 等），否则原样作为字符串。
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def parse_named_params(pairs: Tuple[str, ...]) -> Dict[str, Any]:
    params: Dict[str, Any] = {}
    for pair in pairs:
        name, sep, value = str(pair).partition("=")
        name = name.strip()
        if not sep or not name:
            raise click.BadParameter(f"参数格式应为 name=value: {pair}", param_hint="-p/--param")
        if name in params:
            raise click.BadParameter(f"参数重复: {name}", param_hint="-p/--param")
        params[name] = coerce_cli_value(value)
    return params


def _print_app_error(exc: AppError, output_json: bool) -> None:
    if output_json:
        print_json({"error": {"code": exc.code, "message": exc.message}})
    else:
        print_error(exc.message, code=exc.code)


@click.command("exec")
@click.argument("method")
@click.argument("args", nargs=-1)
@click.option("-p", "--param", "params", multiple=True, help="命名参数 name=value（可重复）")
@click.pass_context
def exec_step(ctx: click.Context, method: str, args: Tuple[str, ...], params: Tuple[str, ...]) -> None:
    """执行一个步骤方法（位置参数 ARGS + 命名参数 -p）"""
    output_json = bool(ctx.obj["output_json"])
    named = parse_named_params(params)
    try:
        bag = ParameterBag.from_call([coerce_cli_value(a) for a in args], named)
    except (TypeError, ValueError) as exc:
        _print_app_error(invalid_request_error(str(exc)), output_json)
        sys.exit(EXIT_CODE_INVALID)

    # JSON 模式下 stdout 只输出结果，不渲染进度
    context_kwargs: Dict[str, Any] = {"output": NullOutput() if output_json else ConsoleOutput()}
    if ctx.obj.get("enable_httpx") is not None:
        context_kwargs["enable_httpx"] = bool(ctx.obj["enable_httpx"])

    try:
        result = execute_method(method, bag, ExecutionContext(**context_kwargs))
    except AppError as exc:
        _print_app_error(exc, output_json)
        sys.exit(EXIT_CODE_INVALID)

    if output_json:
        print_json({"method": method, "success": result.success, "result": result.payload})
    else:
        print_step_result(method, result.success, result.payload)
    if not result.success:
        sys.exit(EXIT_CODE_FAILED)
