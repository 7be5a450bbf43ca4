"""表单状态对象.

``FormState`` 在一次请求内贯穿 build → validate → submit 三个阶段;
``SubformState`` 是限定在某个子树(如 ``layout_settings``)上的视图,
读写值与错误时自动加上父级路径前缀.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.types import JsonValue, MutablePayloadDict


@dataclass(slots=True)
class FormState:
    """单次请求的表单状态.

    Attributes:
        values: 已提交的嵌套值.
        is_ajax: 是否为增量(AJAX)请求.
        errors: 以点分路径为键的字段错误,如 ``layout_settings.width``.
        redirect: 提交成功后的跳转地址.

    """

    values: MutablePayloadDict = field(default_factory=dict)
    is_ajax: bool = False
    errors: dict[str, str] = field(default_factory=dict)
    redirect: str | None = None

    def get_values(self) -> MutablePayloadDict:
        return self.values

    def get_value(self, key: str, default: JsonValue = None) -> JsonValue:
        return self.values.get(key, default)

    def set_value(self, key: str, value: JsonValue) -> None:
        self.values[key] = value

    def set_error_by_name(self, name: str, message: str) -> None:
        # 同一字段只保留第一条错误
        self.errors.setdefault(name, message)

    def get_errors(self) -> dict[str, str]:
        return dict(self.errors)

    def has_any_errors(self) -> bool:
        return bool(self.errors)

    def set_redirect(self, url: str) -> None:
        self.redirect = url


class SubformState:
    """限定在父表单某个子树上的表单状态."""

    def __init__(self, parents: tuple[str, ...], complete_form_state: FormState) -> None:
        if not parents:
            msg = "子表单状态至少需要一级父路径"
            raise ValueError(msg)
        self.parents = parents
        self._complete_form_state = complete_form_state

    @classmethod
    def create_for_subform(cls, parents: tuple[str, ...], form_state: FormState) -> SubformState:
        return cls(parents, form_state)

    def get_complete_form_state(self) -> FormState:
        return self._complete_form_state

    @property
    def is_ajax(self) -> bool:
        return self._complete_form_state.is_ajax

    def get_values(self) -> MutablePayloadDict:
        """返回子树的值字典,缺失或类型不符时替换为空字典."""
        container = self._complete_form_state.values
        for key in self.parents:
            child = container.get(key)
            if not isinstance(child, dict):
                child = {}
                container[key] = child
            container = child
        return container

    def get_value(self, key: str, default: JsonValue = None) -> JsonValue:
        return self.get_values().get(key, default)

    def set_value(self, key: str, value: JsonValue) -> None:
        self.get_values()[key] = value

    def set_error_by_name(self, name: str, message: str) -> None:
        self._complete_form_state.set_error_by_name(".".join((*self.parents, name)), message)

    def has_any_errors(self) -> bool:
        prefix = ".".join(self.parents) + "."
        return any(path.startswith(prefix) for path in self._complete_form_state.errors)
