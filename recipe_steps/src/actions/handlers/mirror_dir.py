from recipe_steps.src.actions.context import ExecutionContext
from recipe_steps.src.actions.handlers.file_action_common import attempt_filesystem_call
from recipe_steps.src.actions.parameters import ParameterBag
from recipe_steps.src.actions.result import ExecutionResult
from recipe_steps.src.constants import METHOD_MIRROR_DIR


def execute_mirror_dir(bag: ParameterBag, context: ExecutionContext) -> ExecutionResult:
    """
    执行 mirror_dir：把源目录的全部内容复制到目标目录。
    """
    ok = attempt_filesystem_call(METHOD_MIRROR_DIR, context.filesystem.mirror, bag.get("from"), bag.get("to"))
    return ExecutionResult.empty(ok)
