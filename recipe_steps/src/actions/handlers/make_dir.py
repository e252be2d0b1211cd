from recipe_steps.src.actions.context import ExecutionContext
from recipe_steps.src.actions.handlers.file_action_common import attempt_filesystem_call
from recipe_steps.src.actions.parameters import ParameterBag
from recipe_steps.src.actions.result import ExecutionResult
from recipe_steps.src.constants import MAKE_DIR_DEFAULT_MODE, METHOD_MAKE_DIR


def execute_make_dir(bag: ParameterBag, context: ExecutionContext) -> ExecutionResult:
    """
    执行 make_dir：递归创建目录。

    目录取 `dir` 或位置参数 0。
    - 未指定 mode：使用 0o777，实际权限受 umask 影响；
    - 显式指定 mode：新建目录的权限就是该 mode。
    """
    directory = bag.get_name_or_position("dir", 0)
    exact_mode = bag.has("mode")
    mode = bag.get("mode", MAKE_DIR_DEFAULT_MODE)
    ok = attempt_filesystem_call(METHOD_MAKE_DIR, context.filesystem.mkdir, directory, mode, exact_mode)
    return ExecutionResult.empty(ok)
