"""布局配置子表单 schema."""

from __future__ import annotations

from typing import Any

from pydantic import Field, StrictStr, ValidationInfo, field_validator

from app.constants.layout_builder import LAYOUT_LABEL_MAX_LENGTH
from app.schemas.base import PayloadSchema

WIDTH_OPTIONS_CONTEXT_KEY = "width_options"

_INVALID_WIDTH_MESSAGE = "请选择有效的列宽"


class OneColumnSettings(PayloadSchema):
    """单列布局配置 payload."""

    label: StrictStr = ""

    @field_validator("label", mode="before")
    @classmethod
    def _ensure_label_is_text(cls, value: Any) -> Any:
        if not isinstance(value, str):
            raise ValueError("管理标签必须为字符串")
        return value

    @field_validator("label")
    @classmethod
    def _validate_label(cls, value: str) -> str:
        cleaned = value.strip()
        if len(cleaned) > LAYOUT_LABEL_MAX_LENGTH:
            raise ValueError(f"管理标签不能超过 {LAYOUT_LABEL_MAX_LENGTH} 个字符")
        return cleaned


class MultiWidthSettings(PayloadSchema):
    """多列布局配置 payload, 可选列宽通过校验上下文传入."""

    # 缺失时同样走校验,给出统一的列宽错误文案
    width: StrictStr = Field(default=None, validate_default=True)

    @field_validator("width", mode="before")
    @classmethod
    def _ensure_width_is_text(cls, value: Any) -> Any:
        if not isinstance(value, str):
            raise ValueError(_INVALID_WIDTH_MESSAGE)
        return value

    @field_validator("width")
    @classmethod
    def _validate_width(cls, value: str, info: ValidationInfo) -> str:
        options = (info.context or {}).get(WIDTH_OPTIONS_CONTEXT_KEY, ())
        if value not in options:
            raise ValueError(_INVALID_WIDTH_MESSAGE)
        return value
