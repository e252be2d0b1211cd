from recipe_steps.src.actions.context import ExecutionContext
from recipe_steps.src.actions.handlers.file_action_common import attempt_filesystem_call
from recipe_steps.src.actions.parameters import ParameterBag
from recipe_steps.src.actions.result import ExecutionResult
from recipe_steps.src.constants import METHOD_COPY_FILE


def execute_copy_file(bag: ParameterBag, context: ExecutionContext) -> ExecutionResult:
    """
    执行 copy_file：复制单个文件（from -> to）。
    """
    ok = attempt_filesystem_call(METHOD_COPY_FILE, context.filesystem.copy, bag.get("from"), bag.get("to"))
    return ExecutionResult.empty(ok)
