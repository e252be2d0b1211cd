import logging
from typing import Optional

from recipe_steps.src.actions.context import ExecutionContext
from recipe_steps.src.actions.parameters import ParameterBag
from recipe_steps.src.actions.result import ExecutionResult
from recipe_steps.src.common.output import OutputSink, safe_write
from recipe_steps.src.services.transfer.downloader import build_transfer_request, download_file

logger = logging.getLogger(__name__)


def _progress_writer(output: OutputSink):
    def _write(done: int, total: Optional[int]) -> None:
        total_text = str(total) if total is not None else "?"
        output.write(f"Downloading {done}/{total_text}\r")

    return _write


def execute_download_file(bag: ParameterBag, context: ExecutionContext) -> ExecutionResult:
    """
    执行 download_file：下载 url 内容并保存为 filename。

    URL 无 scheme 时在任何 I/O 之前抛 InvalidArgumentError；网络/状态码/写入失败只返回 success=false。
    """
    url = bag.get("url")
    filename = bag.get("filename")
    request = build_transfer_request(url, filename)

    safe_write(context.output, f'Downloading file from "{url}" into "{filename}"')
    ok = download_file(
        request,
        enable_httpx=context.enable_httpx,
        progress=_progress_writer(context.output),
    )
    if not ok:
        logger.warning("download_file failed url=%s filename=%s", url, filename)
    return ExecutionResult.empty(ok)
