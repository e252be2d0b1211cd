import logging
import time
from typing import Optional

from recipe_steps.src.actions.context import ExecutionContext
from recipe_steps.src.actions.contracts import validate_parameters
from recipe_steps.src.actions.parameters import ParameterBag
from recipe_steps.src.actions.registry import get_method_spec, normalize_method_name
from recipe_steps.src.actions.result import ExecutionResult
from recipe_steps.src.common.errors import UnknownMethodError

logger = logging.getLogger(__name__)


def execute_method(
    name: str, bag: ParameterBag, context: Optional[ExecutionContext] = None
) -> ExecutionResult:
    """
    执行单个步骤方法（API 与 CLI 共用）。

    流程：查找方法 → 校验参数（纯前置，无副作用）→ 调用 handler。
    - 方法未注册：抛 UnknownMethodError；
    - 参数非法：抛 ParameterError 子类（不会触发任何文件/网络/进程操作）；
    - 执行失败：不抛异常，只体现为 result.success=false。
    """
    method = normalize_method_name(name)
    spec = get_method_spec(method) if method else None
    if not spec:
        raise UnknownMethodError(str(name))

    validate_parameters(bag, spec.contract)

    ctx = context or ExecutionContext()
    started = time.monotonic()
    result = spec.executor(bag, ctx)
    logger.info(
        "method_executed method=%s success=%s duration_ms=%s",
        spec.name,
        result.success,
        int((time.monotonic() - started) * 1000),
    )
    return result


__all__ = ["execute_method"]
