from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from recipe_steps.src.actions.contracts import FIELD_KIND_NON_NEGATIVE_INT, ParameterContract
from recipe_steps.src.actions.context import ExecutionContext
from recipe_steps.src.actions.handlers.copy_file import execute_copy_file
from recipe_steps.src.actions.handlers.download_file import execute_download_file
from recipe_steps.src.actions.handlers.make_dir import execute_make_dir
from recipe_steps.src.actions.handlers.mirror_dir import execute_mirror_dir
from recipe_steps.src.actions.handlers.read_file import execute_read_file
from recipe_steps.src.actions.handlers.remove import execute_remove
from recipe_steps.src.actions.handlers.run import execute_run
from recipe_steps.src.actions.handlers.write_file import execute_write_file
from recipe_steps.src.actions.parameters import ParameterBag
from recipe_steps.src.actions.result import ExecutionResult
from recipe_steps.src.common.errors import InvalidArgumentError
from recipe_steps.src.constants import (
    METHOD_COPY_FILE,
    METHOD_DOWNLOAD_FILE,
    METHOD_MAKE_DIR,
    METHOD_MIRROR_DIR,
    METHOD_READ_FILE,
    METHOD_REMOVE,
    METHOD_RUN,
    METHOD_WRITE_FILE,
    MODULE_FILESYSTEM,
    MODULE_SYSTEM,
)

MethodExecutor = Callable[[ParameterBag, ExecutionContext], ExecutionResult]


@dataclass(frozen=True)
class MethodSpec:
    name: str
    module: str
    description: str
    contract: ParameterContract
    executor: MethodExecutor

    def describe(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            "name": self.name,
            "module": self.module,
            "description": self.description,
        }
        data.update(self.contract.describe())
        return data


_SPECS: Dict[str, MethodSpec] = {}
_REGISTRY_FROZEN = False
_REGISTRY_LOCK = threading.Lock()


def register_method(spec: MethodSpec) -> None:
    key = str(spec.name or "").strip()
    if not key:
        return
    with _REGISTRY_LOCK:
        if _REGISTRY_FROZEN:
            raise RuntimeError(f"注册表已冻结，无法注册新方法: {key}")
        _SPECS[key] = spec


def _freeze_registry() -> None:
    """冻结注册表，之后不再允许新增注册。运行时只读访问无需加锁。"""
    global _REGISTRY_FROZEN
    with _REGISTRY_LOCK:
        _REGISTRY_FROZEN = True


def normalize_method_name(value: str) -> Optional[str]:
    """
    归一化方法名：
    - 去空白、小写
    - '-' -> '_'
    未注册返回 None。
    """
    raw = str(value or "").strip()
    if not raw:
        return None
    normalized = raw.replace("-", "_").lower()
    return normalized if normalized in _SPECS else None


def get_method_spec(name: str) -> Optional[MethodSpec]:
    return _SPECS.get(name)


def list_method_names() -> List[str]:
    # 稳定顺序：system 在前，其余按注册顺序
    preferred = [METHOD_RUN]
    seen: List[str] = []
    for name in preferred:
        if name in _SPECS and name not in seen:
            seen.append(name)
    for name in _SPECS:
        if name not in seen:
            seen.append(name)
    return seen


def export_method_contracts() -> List[Dict[str, object]]:
    """导出全部方法的参数契约（API `/steps/methods` 与 CLI `methods` 共用）。"""
    items: List[Dict[str, object]] = []
    for name in list_method_names():
        spec = get_method_spec(name)
        if spec:
            items.append(spec.describe())
    return items


def _register_builtin_specs() -> None:
    register_method(
        MethodSpec(
            name=METHOD_RUN,
            module=MODULE_SYSTEM,
            description="Run an external command and capture its standard output.",
            # 单参数时只认命令本身（位置/命名均可），多参数才校验参数名
            contract=ParameterContract(
                min_arity=1,
                max_arity=3,
                allowed_keys=frozenset({"command", "timeout", "cwd"}),
                names_checked_from_arity=2,
                name_error=InvalidArgumentError,
                name_error_message="Unexpected parameter name.",
            ),
            executor=execute_run,
        )
    )
    register_method(
        MethodSpec(
            name=METHOD_COPY_FILE,
            module=MODULE_FILESYSTEM,
            description="Copy a single file, overwriting the target.",
            contract=ParameterContract(
                min_arity=2,
                max_arity=2,
                allowed_keys=frozenset({"from", "to"}),
                required_non_empty_strings=("from", "to"),
            ),
            executor=execute_copy_file,
        )
    )
    register_method(
        MethodSpec(
            name=METHOD_DOWNLOAD_FILE,
            module=MODULE_FILESYSTEM,
            description="Download a URL into a local file.",
            contract=ParameterContract(
                min_arity=2,
                max_arity=2,
                allowed_keys=frozenset({"url", "filename"}),
                required_non_empty_strings=("url", "filename"),
            ),
            executor=execute_download_file,
        )
    )
    register_method(
        MethodSpec(
            name=METHOD_MAKE_DIR,
            module=MODULE_FILESYSTEM,
            description="Create a directory recursively.",
            contract=ParameterContract(
                min_arity=1,
                max_arity=2,
                allowed_keys=frozenset({"dir", "mode"}),
                single_allowed_keys=frozenset({"dir", 0}),
                required_non_empty_strings=("dir",),
                optional_typed_fields={"mode": FIELD_KIND_NON_NEGATIVE_INT},
                positional_aliases={"dir": 0},
            ),
            executor=execute_make_dir,
        )
    )
    register_method(
        MethodSpec(
            name=METHOD_MIRROR_DIR,
            module=MODULE_FILESYSTEM,
            description="Copy the whole content of a directory into another one.",
            contract=ParameterContract(
                min_arity=2,
                max_arity=2,
                allowed_keys=frozenset({"from", "to"}),
                required_non_empty_strings=("from", "to"),
            ),
            executor=execute_mirror_dir,
        )
    )
    register_method(
        MethodSpec(
            name=METHOD_WRITE_FILE,
            module=MODULE_FILESYSTEM,
            description="Write text content into a file.",
            contract=ParameterContract(
                min_arity=2,
                max_arity=2,
                allowed_keys=frozenset({"filename", "content"}),
                required_non_empty_strings=("filename",),
                string_fields=("content",),
            ),
            executor=execute_write_file,
        )
    )
    register_method(
        MethodSpec(
            name=METHOD_READ_FILE,
            module=MODULE_FILESYSTEM,
            description="Read the text content of a file.",
            contract=ParameterContract(
                min_arity=1,
                max_arity=1,
                allowed_keys=frozenset({"filename", 0}),
                string_fields=("filename",),
                positional_aliases={"filename": 0},
            ),
            executor=execute_read_file,
        )
    )
    register_method(
        MethodSpec(
            name=METHOD_REMOVE,
            module=MODULE_FILESYSTEM,
            description="Remove files, directories and symlinks.",
            contract=ParameterContract(
                min_arity=1,
                positional_only=True,
                positional_values_non_empty=True,
            ),
            executor=execute_remove,
        )
    )


_register_builtin_specs()
_freeze_registry()
