from recipe_steps.src.actions.context import ExecutionContext
from recipe_steps.src.actions.parameters import ParameterBag
from recipe_steps.src.actions.result import ExecutionResult
from recipe_steps.src.services.execution.command_runner import build_command_spec, run_command


def execute_run(bag: ParameterBag, context: ExecutionContext) -> ExecutionResult:
    """
    执行 run：运行外部命令并返回 stdout。

    支持三种写法：
    - `run: "echo hi"`（位置参数，shell 命令行）
    - `run: {command: "echo hi", timeout: 60}`
    - `run: {command: ["echo", "hi"], timeout: 60, cwd: "/tmp"}`（argv，不经过 shell）

    命令/timeout/cwd 非法时抛 InvalidArgumentError；进程失败只体现为 success=false。
    """
    _ = context
    spec = build_command_spec(bag)
    outcome = run_command(spec)
    return ExecutionResult(success=outcome.ok, payload={"output": outcome.stdout})
