"""表单树描述模型.

这些定义会被表单处理器、布局插件的配置子表单以及视图层共享,
视图层将其序列化为 JSON 交给前端渲染.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from app.types import JsonDict, JsonValue, MutablePayloadDict


class FieldComponent(str, Enum):
    """表单控件类型."""

    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    RADIOS = "radios"
    CHECKBOX = "checkbox"
    HIDDEN = "hidden"


@dataclass(slots=True)
class FieldOption:
    """下拉或单选项描述."""

    value: str
    label: str

    def to_dict(self) -> JsonDict:
        return {"value": self.value, "label": self.label}


@dataclass(slots=True)
class FormField:
    """单个字段的元数据."""

    name: str
    label: str
    component: FieldComponent = FieldComponent.TEXT
    required: bool = False
    placeholder: str | None = None
    help_text: str | None = None
    default: JsonValue = None
    options: list[FieldOption] = field(default_factory=list)
    props: MutablePayloadDict = field(default_factory=dict)

    def to_dict(self) -> JsonDict:
        """序列化为前端可渲染的结构."""
        payload: JsonDict = {
            "name": self.name,
            "label": self.label,
            "component": self.component.value,
            "required": self.required,
            "default": self.default,
        }
        if self.placeholder:
            payload["placeholder"] = self.placeholder
        if self.help_text:
            payload["help_text"] = self.help_text
        if self.options:
            payload["options"] = [option.to_dict() for option in self.options]
        if self.props:
            payload["props"] = dict(self.props)
        return payload


# 配置子表单的元素集合,键为字段名
FormElements: TypeAlias = dict[str, FormField]


@dataclass(slots=True)
class SubmitAction:
    """提交按钮描述.

    Attributes:
        label: 按钮文案.
        button_type: 按钮样式.
        ajax_callback: AJAX 请求下绑定的回调名称,非 AJAX 请求为 None.

    """

    label: str
    button_type: str = "primary"
    ajax_callback: str | None = None

    def to_dict(self) -> JsonDict:
        payload: JsonDict = {"type": "submit", "label": self.label, "button_type": self.button_type}
        if self.ajax_callback:
            payload["ajax"] = {"callback": self.ajax_callback}
        return payload


@dataclass(slots=True)
class SectionFormTree:
    """区块配置表单树.

    ``layout_settings`` 为插件配置子表单的保留子树,``actions`` 至少包含 ``submit``.
    """

    form_id: str
    layout_settings: FormElements = field(default_factory=dict)
    actions: dict[str, SubmitAction] = field(default_factory=dict)
    tree: bool = True

    def to_dict(self) -> JsonDict:
        return {
            "form_id": self.form_id,
            "tree": self.tree,
            "layout_settings": {name: element.to_dict() for name, element in self.layout_settings.items()},
            "actions": {name: action.to_dict() for name, action in self.actions.items()},
        }
