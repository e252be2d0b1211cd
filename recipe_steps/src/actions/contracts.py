# -*- coding: utf-8 -*-
"""
ParameterContract：方法参数的声明式契约 + 校验器。

校验是纯前置检查：不修改 bag、不做 I/O，按固定顺序返回“第一个”违规：
1) 参数个数（ArityError）
2) 参数名（UnrecognizedParameterError，或契约指定的 name_error）
3) 逐字段：非空字符串 → 字符串 → 可选类型字段 → 位置参数值
调用方只能依赖“第一个错误”，不要假设会列出全部违规。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple, Type

from recipe_steps.src.actions.parameters import ParamKey, ParameterBag
from recipe_steps.src.common.errors import (
    ArityError,
    EmptyOrNonStringError,
    InvalidArgumentError,
    ParameterError,
    ParameterTypeError,
    UnrecognizedParameterError,
)

FIELD_KIND_INT = "int"
FIELD_KIND_NON_NEGATIVE_INT = "non_negative_int"
FIELD_KIND_STRING = "string"
FIELD_KIND_BOOL = "bool"

_FIELD_KINDS = {FIELD_KIND_INT, FIELD_KIND_NON_NEGATIVE_INT, FIELD_KIND_STRING, FIELD_KIND_BOOL}


@dataclass(frozen=True)
class ParameterContract:
    """
    方法参数契约。

    - allowed_keys=None 表示不做参数名校验；
    - single_allowed_keys：仅传 1 个参数时使用的 key 集合（例如 {"dir", 0}），为空则沿用 allowed_keys；
    - names_checked_from_arity：参数个数达到该值才校验参数名（run 只在多参数时校验）；
    - positional_only：只允许位置参数（remove）；
    - positional_aliases：name -> position，字段校验时按“名称优先、位置兜底”取值。
    """

    min_arity: int
    max_arity: Optional[int] = None
    allowed_keys: Optional[FrozenSet[ParamKey]] = None
    single_allowed_keys: Optional[FrozenSet[ParamKey]] = None
    names_checked_from_arity: int = 1
    positional_only: bool = False
    required_non_empty_strings: Tuple[str, ...] = ()
    string_fields: Tuple[str, ...] = ()
    optional_typed_fields: Mapping[str, str] = field(default_factory=dict)
    positional_values_non_empty: bool = False
    positional_aliases: Mapping[str, int] = field(default_factory=dict)
    name_error: Type[ParameterError] = UnrecognizedParameterError
    name_error_message: Optional[str] = None

    def __post_init__(self) -> None:
        if self.min_arity < 0:
            raise ValueError("min_arity must be >= 0")
        if self.max_arity is not None and self.max_arity < self.min_arity:
            raise ValueError("min_arity must be <= max_arity")
        for name, kind in self.optional_typed_fields.items():
            if kind not in _FIELD_KINDS:
                raise ValueError(f"Unknown field kind for {name}: {kind}")

    def keys_for_arity(self, count: int) -> Optional[FrozenSet[ParamKey]]:
        if count < self.names_checked_from_arity:
            return None
        if count == 1 and self.single_allowed_keys is not None:
            return self.single_allowed_keys
        return self.allowed_keys

    def describe(self) -> Dict[str, Any]:
        keys = self.allowed_keys or frozenset()
        return {
            "min_arity": self.min_arity,
            "max_arity": self.max_arity,
            "allowed_keys": sorted(str(key) for key in keys),
            "positional_only": self.positional_only,
        }


def _arity_message(contract: ParameterContract) -> str:
    if contract.max_arity is None:
        return f"Expected at least {contract.min_arity} parameters."
    if contract.min_arity == contract.max_arity:
        return f"Expected {contract.min_arity} parameters."
    return f"Expected between {contract.min_arity} and {contract.max_arity} parameters."


def _lookup(bag: ParameterBag, contract: ParameterContract, name: str) -> Any:
    position = contract.positional_aliases.get(name)
    if position is None:
        return bag.get(name)
    return bag.get_name_or_position(name, position)


def _require_non_empty_string(value: object, name: object) -> Optional[ParameterError]:
    if not isinstance(value, str):
        return EmptyOrNonStringError(f'Expected a string as parameter "{name}".', parameter=name)
    if not value.strip():
        return EmptyOrNonStringError(f'Parameter "{name}" cannot be white space or empty.', parameter=name)
    return None


def _check_arity(bag: ParameterBag, contract: ParameterContract) -> Optional[ParameterError]:
    count = len(bag)
    if count < contract.min_arity or (contract.max_arity is not None and count > contract.max_arity):
        return ArityError(_arity_message(contract))
    return None


def _check_names(bag: ParameterBag, contract: ParameterContract) -> Optional[ParameterError]:
    if contract.positional_only:
        for key in bag:
            if not isinstance(key, int):
                return UnrecognizedParameterError(f'Parameter "{key}" is not recognized.', parameter=key)
        return None

    allowed = contract.keys_for_arity(len(bag))
    if allowed is None:
        return None
    for key in bag:
        if key not in allowed:
            message = contract.name_error_message or f'Parameter "{key}" is not recognized.'
            return contract.name_error(message, parameter=key)
    return None


def _check_typed_field(bag: ParameterBag, name: str, kind: str) -> Optional[ParameterError]:
    if not bag.has(name):
        return None
    value = bag.get(name)
    if kind in (FIELD_KIND_INT, FIELD_KIND_NON_NEGATIVE_INT):
        # bool 是 int 的子类：显式排除，避免 true/false 被当成 1/0
        if not isinstance(value, int) or isinstance(value, bool):
            return ParameterTypeError(f'Parameter "{name}" is expected as integer.', parameter=name)
        if kind == FIELD_KIND_NON_NEGATIVE_INT and value < 0:
            return InvalidArgumentError(
                f'Parameter "{name}" is expected as a non-negative integer. Value found: {value}.',
                parameter=name,
            )
        return None
    if kind == FIELD_KIND_STRING and not isinstance(value, str):
        return ParameterTypeError(f'Parameter "{name}" is expected as string.', parameter=name)
    if kind == FIELD_KIND_BOOL and not isinstance(value, bool):
        return ParameterTypeError(f'Parameter "{name}" is expected as boolean.', parameter=name)
    return None


def find_contract_violation(bag: ParameterBag, contract: ParameterContract) -> Optional[ParameterError]:
    """
    返回第一个违规（ParameterError 实例），全部通过返回 None。
    """
    error = _check_arity(bag, contract)
    if error:
        return error

    error = _check_names(bag, contract)
    if error:
        return error

    for name in contract.required_non_empty_strings:
        error = _require_non_empty_string(_lookup(bag, contract, name), name)
        if error:
            return error

    for name in contract.string_fields:
        value = _lookup(bag, contract, name)
        if not isinstance(value, str):
            return EmptyOrNonStringError(f'Expected a string as parameter "{name}".', parameter=name)

    for name, kind in contract.optional_typed_fields.items():
        error = _check_typed_field(bag, name, kind)
        if error:
            return error

    if contract.positional_values_non_empty:
        for key, value in bag.items():
            error = _require_non_empty_string(value, key)
            if error:
                return error

    return None


def validate_parameters(bag: ParameterBag, contract: ParameterContract) -> None:
    error = find_contract_violation(bag, contract)
    if error is not None:
        raise error
