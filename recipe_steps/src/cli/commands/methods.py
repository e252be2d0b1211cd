# -*- coding: utf-8 -*-
"""方法列表命令。"""

from __future__ import annotations

import click

from recipe_steps.src.actions.registry import export_method_contracts
from recipe_steps.src.cli.output import print_json, print_methods_table


@click.command()
@click.pass_context
def methods(ctx: click.Context) -> None:
    """列出已注册的步骤方法及其参数契约"""
    items = export_method_contracts()
    if ctx.obj["output_json"]:
        print_json({"items": items})
    else:
        print_methods_table(items)
