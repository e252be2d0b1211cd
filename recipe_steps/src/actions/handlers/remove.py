from recipe_steps.src.actions.context import ExecutionContext
from recipe_steps.src.actions.handlers.file_action_common import attempt_filesystem_call
from recipe_steps.src.actions.parameters import ParameterBag
from recipe_steps.src.actions.result import ExecutionResult
from recipe_steps.src.constants import METHOD_REMOVE


def execute_remove(bag: ParameterBag, context: ExecutionContext) -> ExecutionResult:
    """
    执行 remove：删除全部位置参数对应的文件/目录/符号链接。
    """
    paths = bag.values_list()
    ok = attempt_filesystem_call(METHOD_REMOVE, context.filesystem.remove, paths)
    return ExecutionResult.empty(ok)
