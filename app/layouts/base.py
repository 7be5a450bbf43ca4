"""布局插件基础模型与能力声明.

布局插件只在单次请求内存活: 每次请求根据持久化的插件 ID 与配置重新实例化,
插件本身从不落盘,落盘的只有 ``plugin_id`` 与 ``get_configuration()`` 的结果.

插件提供配置表单的两种能力:
- ``ConfigurablePluginForm``: 插件自身即配置表单(直接能力).
- ``PluginWithForms``: 插件按操作名声明独立的表单类(聚合能力),由 ``PluginFormFactory`` 实例化.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from copy import deepcopy
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.forms.definitions.base import FormElements
    from app.forms.form_state import SubformState
    from app.types import JsonValue, LayoutConfiguration


@dataclass(frozen=True, slots=True)
class LayoutDefinition:
    """布局插件定义(注册表对外暴露的元数据)."""

    id: str
    label: str
    regions: tuple[str, ...]
    default_region: str
    provides_configuration_form: bool


class PluginForm(Protocol):
    """配置子表单协议.

    build/validate/submit 三个步骤均在 ``layout_settings`` 作用域的子表单状态上执行.
    """

    def build_configuration_form(self, form: FormElements, form_state: SubformState) -> FormElements:
        """构建配置子表单元素."""
        ...

    def validate_configuration_form(self, form: FormElements, form_state: SubformState) -> None:
        """校验提交值,错误写入子表单状态."""
        ...

    def submit_configuration_form(self, form: FormElements, form_state: SubformState) -> None:
        """将提交值写回插件配置."""
        ...


class LayoutPlugin:
    """布局插件基类.

    Attributes:
        plugin_id: 插件唯一标识.
        label: 人类可读的名称.
        regions: 布局包含的区域,按渲染顺序排列.

    """

    plugin_id: ClassVar[str]
    label: ClassVar[str]
    regions: ClassVar[tuple[str, ...]] = ("content",)

    def __init__(self, configuration: Mapping[str, JsonValue] | None = None) -> None:
        self._configuration: LayoutConfiguration = {}
        self.set_configuration(configuration or {})

    def get_plugin_id(self) -> str:
        return self.plugin_id

    def default_configuration(self) -> LayoutConfiguration:
        """返回插件的默认配置,子类按需覆盖."""
        return {}

    def get_configuration(self) -> LayoutConfiguration:
        """返回当前配置的副本,调用方修改不会影响插件实例."""
        return deepcopy(self._configuration)

    def set_configuration(self, configuration: Mapping[str, JsonValue]) -> None:
        """以默认配置为底合并新配置."""
        merged = self.default_configuration()
        merged.update(deepcopy(dict(configuration)))
        self._configuration = merged

    @classmethod
    def get_definition(cls) -> LayoutDefinition:
        """构造插件定义元数据."""
        return LayoutDefinition(
            id=cls.plugin_id,
            label=cls.label,
            regions=cls.regions,
            default_region=cls.regions[0],
            provides_configuration_form=issubclass(cls, (ConfigurablePluginForm, PluginWithForms)),
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} plugin_id={self.plugin_id!r}>"


class ConfigurablePluginForm(ABC):
    """直接能力: 插件自身实现配置表单的三个步骤."""

    @abstractmethod
    def build_configuration_form(self, form: FormElements, form_state: SubformState) -> FormElements:
        """构建配置子表单元素."""

    def validate_configuration_form(self, form: FormElements, form_state: SubformState) -> None:  # noqa: B027
        """默认不做额外校验."""

    @abstractmethod
    def submit_configuration_form(self, form: FormElements, form_state: SubformState) -> None:
        """将提交值写回插件配置."""


class PluginFormBase(ABC):
    """聚合能力下独立表单类的基类,由 ``PluginFormFactory`` 绑定插件实例."""

    def __init__(self) -> None:
        self.plugin: LayoutPlugin | None = None

    def set_plugin(self, plugin: LayoutPlugin) -> None:
        self.plugin = plugin

    def get_plugin(self) -> LayoutPlugin:
        if self.plugin is None:
            msg = f"{self.__class__.__name__} 尚未绑定插件实例"
            raise RuntimeError(msg)
        return self.plugin

    @abstractmethod
    def build_configuration_form(self, form: FormElements, form_state: SubformState) -> FormElements:
        """构建配置子表单元素."""

    def validate_configuration_form(self, form: FormElements, form_state: SubformState) -> None:  # noqa: B027
        """默认不做额外校验."""

    @abstractmethod
    def submit_configuration_form(self, form: FormElements, form_state: SubformState) -> None:
        """将提交值写回插件配置."""


class PluginWithForms:
    """聚合能力: 插件按操作名声明表单类.

    Attributes:
        form_classes: 操作名到表单类的映射,例如 ``{"configure": MultiWidthLayoutForm}``.

    """

    form_classes: ClassVar[dict[str, type[PluginFormBase]]] = {}

    def has_form_class(self, operation: str) -> bool:
        return operation in self.form_classes

    def get_form_class(self, operation: str) -> type[PluginFormBase] | None:
        return self.form_classes.get(operation)
