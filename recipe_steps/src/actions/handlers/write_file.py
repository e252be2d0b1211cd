from recipe_steps.src.actions.context import ExecutionContext
from recipe_steps.src.actions.handlers.file_action_common import attempt_filesystem_call
from recipe_steps.src.actions.parameters import ParameterBag
from recipe_steps.src.actions.result import ExecutionResult
from recipe_steps.src.constants import METHOD_WRITE_FILE


def execute_write_file(bag: ParameterBag, context: ExecutionContext) -> ExecutionResult:
    """
    执行 write_file：把 content 原子写入 filename（自动创建父目录）。
    """
    ok = attempt_filesystem_call(
        METHOD_WRITE_FILE,
        context.filesystem.dump_file,
        bag.get("filename"),
        bag.get("content"),
    )
    return ExecutionResult.empty(ok)
