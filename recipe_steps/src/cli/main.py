# -*- coding: utf-8 -*-
"""
recipe-steps CLI 顶层命令组。

用法：
    recipe-steps [全局选项] <子命令> [子命令选项]
    python -m recipe_steps.src.cli [全局选项] <子命令> [子命令选项]
"""

from __future__ import annotations

import click

from recipe_steps.src.common.utils import configure_logging
from recipe_steps.src.constants import ENV_LOG_LEVEL


@click.group()
@click.option(
    "--json",
    "output_json",
    is_flag=True,
    default=False,
    help="以 JSON 格式输出",
)
@click.option(
    "--no-httpx",
    "no_httpx",
    is_flag=True,
    default=False,
    help="download_file 不使用 httpx，改用 urllib 传输",
)
@click.option(
    "--log-level",
    default="WARNING",
    envvar=ENV_LOG_LEVEL,
    show_default=True,
    help="日志级别",
)
@click.pass_context
def cli(ctx: click.Context, output_json: bool, no_httpx: bool, log_level: str) -> None:
    """recipe 步骤方法命令行工具"""
    configure_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj["output_json"] = output_json
    # 未显式传 --no-httpx 时交给 ExecutionContext 读取环境变量
    ctx.obj["enable_httpx"] = False if no_httpx else None


# ── 注册子命令 ──


def _register_commands() -> None:
    """延迟导入并注册所有子命令，避免循环导入。"""
    from recipe_steps.src.cli.commands.exec_step import exec_step
    from recipe_steps.src.cli.commands.methods import methods
    from recipe_steps.src.cli.commands.serve import serve

    cli.add_command(methods)
    cli.add_command(exec_step)
    cli.add_command(serve)


_register_commands()
