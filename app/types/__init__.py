"""共享类型别名入口."""

from .structures import (
    ContextDict,
    JsonDict,
    JsonValue,
    LayoutConfiguration,
    LoggerExtra,
    MutablePayloadDict,
    ScalarValue,
    SectionItemPayload,
    StructlogEventDict,
)

__all__ = [
    "ContextDict",
    "JsonDict",
    "JsonValue",
    "LayoutConfiguration",
    "LoggerExtra",
    "MutablePayloadDict",
    "ScalarValue",
    "SectionItemPayload",
    "StructlogEventDict",
]
