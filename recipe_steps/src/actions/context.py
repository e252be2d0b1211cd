from __future__ import annotations

from dataclasses import dataclass, field

from recipe_steps.src.common.output import NullOutput, OutputSink
from recipe_steps.src.common.utils import env_enabled
from recipe_steps.src.constants import ENV_ENABLE_HTTPX
from recipe_steps.src.services.filesystem.filesystem import Filesystem


def _default_enable_httpx() -> bool:
    return env_enabled(ENV_ENABLE_HTTPX, default=True)


@dataclass(frozen=True)
class ExecutionContext:
    """
    单次方法调用的协作者（调用方持有，handler 只读）。

    - output：只写进度通道（仅 download_file 使用）；
    - filesystem：文件系统原语，测试中可替换为 mock；
    - enable_httpx：是否优先使用 httpx 传输（默认读取 RECIPE_STEPS_ENABLE_HTTPX，未设置则开启）。
    """

    output: OutputSink = field(default_factory=NullOutput)
    filesystem: Filesystem = field(default_factory=Filesystem)
    enable_httpx: bool = field(default_factory=_default_enable_httpx)
