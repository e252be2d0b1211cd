import logging

from recipe_steps.src.actions.context import ExecutionContext
from recipe_steps.src.actions.handlers.file_action_common import FILESYSTEM_ERRORS
from recipe_steps.src.actions.parameters import ParameterBag
from recipe_steps.src.actions.result import ExecutionResult

logger = logging.getLogger(__name__)


def execute_read_file(bag: ParameterBag, context: ExecutionContext) -> ExecutionResult:
    """
    执行 read_file：读取文本文件内容。

    返回 {"content": 文本}；读取失败时 success=false 且 content 为 None。
    """
    filename = bag.get_name_or_position("filename", 0)
    try:
        content = context.filesystem.read_file(filename)
    except FILESYSTEM_ERRORS as exc:
        logger.warning("read_file failed filename=%s error=%s", filename, exc)
        return ExecutionResult(success=False, payload={"content": None})
    return ExecutionResult(success=True, payload={"content": content})
