from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class ExecutionResult:
    """
    handler 的统一返回值：success + 结构化 payload（JSON 对象）。

    每次调用只构造一次；payload 在构造时拷贝，之后不再修改。
    """

    success: bool
    payload: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "success", bool(self.success))
        object.__setattr__(self, "payload", dict(self.payload or {}))

    @classmethod
    def empty(cls, success: bool) -> "ExecutionResult":
        return cls(success=success)

    def to_json(self) -> str:
        return json.dumps(self.payload, ensure_ascii=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"success": self.success, "result": dict(self.payload)}
