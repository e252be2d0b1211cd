# -*- coding: utf-8 -*-
"""启动 HTTP API。"""

from __future__ import annotations

import click

from recipe_steps.src.constants import DEFAULT_HOST, DEFAULT_PORT, ENV_HOST, ENV_PORT


@click.command()
@click.option("--host", default=DEFAULT_HOST, envvar=ENV_HOST, show_default=True, help="监听地址")
@click.option("--port", default=DEFAULT_PORT, type=int, envvar=ENV_PORT, show_default=True, help="监听端口")
def serve(host: str, port: int) -> None:
    """使用 uvicorn 启动步骤执行 HTTP API"""
    import uvicorn

    uvicorn.run("recipe_steps.src.main:app", host=host, port=port)
