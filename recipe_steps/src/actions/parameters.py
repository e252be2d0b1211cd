# -*- coding: utf-8 -*-
"""
ParameterBag：方法调用参数（按名称或位置索引）。

约定：
- key 为 str（命名参数）或 int（从 0 开始的位置参数），key 唯一；
- 保留插入顺序，但顺序本身没有语义（除位置别名外）；
- 交给 handler 后不可变：不提供任何修改方法，`with_parameter` 返回新对象。
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

ParamKey = Union[str, int]

_MISSING = object()


def normalize_param_key(key: object) -> ParamKey:
    """
    统一 key 类型：int 保持；纯数字字符串（JSON 对象的 key 只能是字符串）转为位置参数。
    """
    if isinstance(key, bool):
        raise TypeError(f"Invalid parameter key: {key!r}")
    if isinstance(key, int):
        if key < 0:
            raise ValueError(f"Invalid parameter position: {key}")
        return key
    if isinstance(key, str):
        text = key.strip()
        if text.isdigit():
            return int(text)
        return key
    raise TypeError(f"Invalid parameter key: {key!r}")


class ParameterBag(Mapping[ParamKey, Any]):
    __slots__ = ("_items",)

    def __init__(self, items: Optional[Iterable[Tuple[ParamKey, Any]]] = None):
        data: Dict[ParamKey, Any] = {}
        for key, value in items or ():
            normalized = normalize_param_key(key)
            if normalized in data:
                raise ValueError(f'Duplicated parameter "{normalized}".')
            data[normalized] = value
        self._items = data

    @classmethod
    def from_call(cls, args: Sequence[Any] = (), kwargs: Optional[Mapping[str, Any]] = None) -> "ParameterBag":
        """位置参数依次编号 0..n-1，命名参数保留名称。"""
        items: List[Tuple[ParamKey, Any]] = list(enumerate(args or ()))
        items.extend((kwargs or {}).items())
        return cls(items)

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[Any, Any]]) -> "ParameterBag":
        return cls((mapping or {}).items())

    def __getitem__(self, key: ParamKey) -> Any:
        return self._items[key]

    def __iter__(self) -> Iterator[ParamKey]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"ParameterBag({list(self._items.items())!r})"

    def get(self, key: ParamKey, default: Any = None) -> Any:
        return self._items.get(key, default)

    def has(self, key: ParamKey) -> bool:
        return key in self._items

    def get_name_or_position(self, name: str, position: int = 0, default: Any = None) -> Any:
        """
        名称优先：同时存在 name 与位置别名时取 name；否则取位置参数；都不存在返回 default。
        """
        value = self._items.get(name, _MISSING)
        if value is not _MISSING:
            return value
        return self._items.get(position, default)

    def keys_list(self) -> List[ParamKey]:
        return list(self._items.keys())

    def values_list(self) -> List[Any]:
        return list(self._items.values())

    def with_parameter(self, key: ParamKey, value: Any) -> "ParameterBag":
        items = [(k, v) for k, v in self._items.items() if k != normalize_param_key(key)]
        items.append((key, value))
        return ParameterBag(items)

    def to_dict(self) -> Dict[ParamKey, Any]:
        return dict(self._items)
