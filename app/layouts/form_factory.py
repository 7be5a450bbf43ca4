"""布局插件配置表单的解析.

插件提供配置表单的方式是一个封闭的变体:
- AGGREGATED: 插件按操作名声明表单类,由工厂实例化并绑定插件.
- DIRECT: 插件自身即配置表单.
- NONE: 插件不提供配置表单.

两种能力同时具备时以聚合能力为准.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, cast

from app.constants.layout_builder import CONFIGURE_OPERATION
from app.errors import UnsupportedOperationError
from app.layouts.base import ConfigurablePluginForm, PluginWithForms

if TYPE_CHECKING:
    from app.layouts.base import LayoutPlugin, PluginForm


class PluginFormSource(str, Enum):
    """配置表单来源."""

    AGGREGATED = "aggregated"
    DIRECT = "direct"
    NONE = "none"


class PluginFormFactory:
    """为声明了表单类的插件创建表单实例."""

    def create_instance(
        self,
        plugin: LayoutPlugin,
        operation: str,
        fallback_operation: str | None = None,
    ) -> PluginForm:
        """创建插件在指定操作下的表单实例.

        Args:
            plugin: 插件实例,必须具备聚合能力.
            operation: 操作名,如 ``configure``.
            fallback_operation: 操作未声明时回退使用的操作名.

        Returns:
            已绑定插件的表单实例.

        Raises:
            UnsupportedOperationError: 插件不具备聚合能力或未声明对应操作时抛出.

        """
        if not isinstance(plugin, PluginWithForms):
            raise UnsupportedOperationError(
                f'The "{plugin.get_plugin_id()}" plugin does not declare form classes',
                extra={"plugin_id": plugin.get_plugin_id(), "operation": operation},
            )

        if not plugin.has_form_class(operation):
            if fallback_operation is None or not plugin.has_form_class(fallback_operation):
                raise UnsupportedOperationError(
                    f'The "{plugin.get_plugin_id()}" plugin did not specify a "{operation}" form class',
                    extra={"plugin_id": plugin.get_plugin_id(), "operation": operation},
                )
            operation = fallback_operation

        form_class = plugin.get_form_class(operation)
        if form_class is None:
            raise UnsupportedOperationError(
                f'The "{plugin.get_plugin_id()}" plugin did not specify a "{operation}" form class',
                extra={"plugin_id": plugin.get_plugin_id(), "operation": operation},
            )
        form = form_class()
        form.set_plugin(plugin)
        return form


def classify_plugin_form(plugin: LayoutPlugin) -> PluginFormSource:
    if isinstance(plugin, PluginWithForms):
        return PluginFormSource.AGGREGATED
    if isinstance(plugin, ConfigurablePluginForm):
        return PluginFormSource.DIRECT
    return PluginFormSource.NONE


def resolve_plugin_form(
    plugin: LayoutPlugin,
    factory: PluginFormFactory,
    operation: str = CONFIGURE_OPERATION,
) -> PluginForm:
    """将插件解析为唯一的配置表单处理者.

    Raises:
        UnsupportedOperationError: 插件不提供配置表单时抛出.

    """
    source = classify_plugin_form(plugin)
    if source is PluginFormSource.AGGREGATED:
        return factory.create_instance(plugin, operation)
    if source is PluginFormSource.DIRECT:
        return cast("PluginForm", plugin)
    raise UnsupportedOperationError(
        f'The "{plugin.get_plugin_id()}" layout does not provide a configuration form',
        extra={"plugin_id": plugin.get_plugin_id()},
    )
