import logging

from fastapi import APIRouter

from recipe_steps.src.actions.context import ExecutionContext
from recipe_steps.src.actions.executor import execute_method
from recipe_steps.src.actions.parameters import ParameterBag
from recipe_steps.src.actions.registry import export_method_contracts
from recipe_steps.src.api.schemas import StepExecuteRequest
from recipe_steps.src.common.app_error_utils import app_error_response, invalid_request_error
from recipe_steps.src.common.errors import AppError
from recipe_steps.src.common.output import LoggingOutput

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/steps/methods")
def list_methods() -> dict:
    return {"items": export_method_contracts()}


@router.post("/steps/execute")
def execute_step(payload: StepExecuteRequest):
    """
    执行单个步骤方法。

    说明：
    - 同步路由：FastAPI 会放到线程池执行，run/download 的阻塞 I/O 不会卡住事件循环；
    - 进度输出转发到日志（HTTP 请求没有终端可写）；
    - 参数非法 → 400，方法未注册 → 404；执行失败仍是 200 + success=false。
    """
    try:
        bag = ParameterBag.from_call(payload.args, payload.params)
    except (TypeError, ValueError) as exc:
        return app_error_response(invalid_request_error(str(exc)))

    context = ExecutionContext(output=LoggingOutput(logger))
    try:
        result = execute_method(payload.method, bag, context)
    except AppError as exc:
        logger.info("step_rejected method=%s code=%s message=%s", payload.method, exc.code, exc.message)
        return app_error_response(exc)
    return {"method": payload.method, "success": result.success, "result": result.payload}
