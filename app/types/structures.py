"""通用结构化数据类型别名.

统一 JSON/Mapping 风格的类型,方便在视图、表单处理器、仓储等模块中共享定义,避免重复声明.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping, Sequence
from typing import TypeAlias

ScalarValue: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = ScalarValue | Sequence["JsonValue"] | Mapping[str, "JsonValue"]
JsonDict: TypeAlias = dict[str, JsonValue]
MutablePayloadDict: TypeAlias = dict[str, JsonValue]
ContextDict: TypeAlias = dict[str, JsonValue]
StructlogEventDict: TypeAlias = MutableMapping[str, JsonValue]
LoggerExtra: TypeAlias = Mapping[str, JsonValue]

# 布局插件配置与区块字段项的持久化形态
LayoutConfiguration: TypeAlias = dict[str, JsonValue]
SectionItemPayload: TypeAlias = dict[str, JsonValue]
