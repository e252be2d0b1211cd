from __future__ import annotations

import locale
import logging
import os
import signal
import subprocess
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from recipe_steps.src.actions.parameters import ParameterBag
from recipe_steps.src.common.errors import InvalidArgumentError
from recipe_steps.src.common.utils import truncate_inline_text
from recipe_steps.src.constants import (
    RUN_DEFAULT_TIMEOUT_SECONDS,
    RUN_MAX_TIMEOUT_SECONDS,
    RUN_TERMINATE_GRACE_SECONDS,
)

logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass(frozen=True)
class ShellLine:
    """字面量 shell 命令行（交给系统 shell 解释）。"""

    line: str


@dataclass(frozen=True)
class Argv:
    """字面量 argv 向量（不经过 shell）。"""

    tokens: Tuple[str, ...]


Program = Union[ShellLine, Argv]


@dataclass(frozen=True)
class CommandSpec:
    """
    一次命令执行的完整描述。

    timeout_seconds=None 表示不限时（显式传入 null/0）；缺省为 60 秒。
    """

    program: Program
    working_directory: Optional[str] = None
    timeout_seconds: Optional[int] = RUN_DEFAULT_TIMEOUT_SECONDS


@dataclass(frozen=True)
class CommandOutcome:
    stdout: str
    stderr: str
    returncode: Optional[int]
    timed_out: bool = False
    spawn_error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out and self.spawn_error is None


def _parse_program(command: object) -> Program:
    if isinstance(command, str):
        if command.strip():
            return ShellLine(command)
    elif isinstance(command, (list, tuple)):
        tokens: List[str] = []
        for item in command:
            # argv 只接受标量：嵌套列表/对象/null 无法映射成一个参数
            if item is None or isinstance(item, (list, tuple, dict)):
                tokens = []
                break
            if isinstance(item, bool):
                item = "true" if item else "false"
            tokens.append(str(item))
        if tokens:
            return Argv(tuple(tokens))
    raise InvalidArgumentError("Invalid command. Expected string or array value.", parameter="command")


def _parse_timeout(raw: object) -> Optional[int]:
    if raw is _MISSING:
        return RUN_DEFAULT_TIMEOUT_SECONDS
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        raise InvalidArgumentError(f"Invalid timeout value. Value found: {raw}.", parameter="timeout")
    if raw == 0:
        return None
    return min(raw, RUN_MAX_TIMEOUT_SECONDS)


def _parse_cwd(raw: object) -> Optional[str]:
    if raw is None:
        return None
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidArgumentError(f"Invalid cwd value. Value found: {raw}.", parameter="cwd")
    return raw


def build_command_spec(bag: ParameterBag) -> CommandSpec:
    """
    从已通过契约校验的参数构造 CommandSpec（Built → Configured）。

    命令取 `command` 或位置参数 0；类型不合法、timeout 为负/非整数时抛 InvalidArgumentError。
    """
    program = _parse_program(bag.get_name_or_position("command", 0))
    working_directory = _parse_cwd(bag.get("cwd"))
    timeout_seconds = _parse_timeout(bag.get("timeout", _MISSING))
    return CommandSpec(
        program=program,
        working_directory=working_directory,
        timeout_seconds=timeout_seconds,
    )


def decode_subprocess_stream(value: object) -> str:
    """
    将 subprocess 输出统一解码为字符串，避免编码不一致导致 UnicodeDecodeError。
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value

    if isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
    else:
        raw = str(value).encode("utf-8", errors="replace")

    preferred = str(locale.getpreferredencoding(False) or "").strip()
    encodings: List[str] = ["utf-8"]
    if preferred:
        encodings.append(preferred)

    seen = set()
    for enc in encodings:
        normalized = str(enc or "").strip().lower()
        if not normalized or normalized in seen:
            continue
        seen.add(normalized)
        try:
            return raw.decode(normalized, errors="strict")
        except (UnicodeDecodeError, LookupError):
            continue

    return raw.decode("utf-8", errors="replace")


def _terminate_process_tree(proc: "subprocess.Popen[bytes]") -> None:
    """
    超时后结束整个进程组：shell 命令行可能派生子进程，只杀 shell 会留下孤儿进程。
    """
    if proc.poll() is not None:
        return
    if os.name == "nt":
        proc.kill()
        return
    try:
        pgid = os.getpgid(proc.pid)
    except ProcessLookupError:
        return
    try:
        os.killpg(pgid, signal.SIGTERM)
    except ProcessLookupError:
        return
    deadline = time.monotonic() + RUN_TERMINATE_GRACE_SECONDS
    while proc.poll() is None and time.monotonic() < deadline:
        time.sleep(0.05)
    try:
        os.killpg(pgid, signal.SIGKILL)
    except ProcessLookupError:
        pass


def run_command(spec: CommandSpec) -> CommandOutcome:
    """
    执行命令并收集 stdout/stderr（Running → Succeeded/Failed）。

    进程级失败（非零退出/超时/无法启动）不抛异常，只体现在 CommandOutcome.ok 上。
    """
    if isinstance(spec.program, ShellLine):
        args: Union[str, List[str]] = spec.program.line
        use_shell = True
    else:
        args = list(spec.program.tokens)
        use_shell = False

    try:
        proc = subprocess.Popen(
            args,
            shell=use_shell,
            cwd=spec.working_directory,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            start_new_session=os.name != "nt",
        )
    except (OSError, ValueError) as exc:
        logger.warning("run_command spawn failed cwd=%s error=%s", spec.working_directory, exc)
        return CommandOutcome(stdout="", stderr="", returncode=None, spawn_error=str(exc))

    timed_out = False
    with proc:
        try:
            stdout, stderr = proc.communicate(timeout=spec.timeout_seconds)
        except subprocess.TimeoutExpired:
            timed_out = True
            _terminate_process_tree(proc)
            stdout, stderr = proc.communicate()
            logger.warning("run_command timeout seconds=%s pid=%s", spec.timeout_seconds, proc.pid)

    outcome = CommandOutcome(
        stdout=decode_subprocess_stream(stdout),
        stderr=decode_subprocess_stream(stderr),
        returncode=None if timed_out else proc.returncode,
        timed_out=timed_out,
    )
    if outcome.stderr:
        logger.debug("run_command stderr=%s", truncate_inline_text(outcome.stderr))
    if not outcome.ok and not timed_out:
        logger.warning("run_command failed returncode=%s", outcome.returncode)
    return outcome
