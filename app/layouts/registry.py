"""布局插件注册表.

插件通过 ``register`` 显式登记,不做任何自动发现.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.errors import UnknownPluginError
from app.layouts.plugins import BUILTIN_LAYOUTS

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from app.layouts.base import LayoutDefinition, LayoutPlugin
    from app.types import JsonValue


class LayoutPluginRegistry:
    """按插件 ID 解析布局插件实例."""

    def __init__(self, plugin_classes: Iterable[type[LayoutPlugin]] = ()) -> None:
        self._plugin_classes: dict[str, type[LayoutPlugin]] = {}
        for plugin_class in plugin_classes:
            self.register(plugin_class)

    def register(self, plugin_class: type[LayoutPlugin]) -> None:
        """登记插件类,同一 ID 重复登记会抛出 ValueError."""
        plugin_id = plugin_class.plugin_id
        existing = self._plugin_classes.get(plugin_id)
        if existing is not None and existing is not plugin_class:
            msg = f"布局插件 ID 重复: {plugin_id}"
            raise ValueError(msg)
        self._plugin_classes[plugin_id] = plugin_class

    def has_definition(self, plugin_id: str) -> bool:
        return plugin_id in self._plugin_classes

    def get_definition(self, plugin_id: str) -> LayoutDefinition:
        return self._get_plugin_class(plugin_id).get_definition()

    def get_definitions(self) -> list[LayoutDefinition]:
        return [plugin_class.get_definition() for plugin_class in self._plugin_classes.values()]

    def create_instance(
        self,
        plugin_id: str,
        configuration: Mapping[str, JsonValue] | None = None,
    ) -> LayoutPlugin:
        """根据插件 ID 与初始配置创建插件实例.

        Args:
            plugin_id: 插件 ID.
            configuration: 初始配置,创建时会复制一份,不与调用方共享.

        Returns:
            新的插件实例.

        Raises:
            UnknownPluginError: 插件 ID 未登记时抛出.

        """
        return self._get_plugin_class(plugin_id)(configuration or {})

    def _get_plugin_class(self, plugin_id: str) -> type[LayoutPlugin]:
        plugin_class = self._plugin_classes.get(plugin_id)
        if plugin_class is None:
            raise UnknownPluginError(
                f'布局插件 "{plugin_id}" 不存在',
                extra={"plugin_id": plugin_id},
            )
        return plugin_class


def build_default_registry() -> LayoutPluginRegistry:
    """构建登记了全部内置布局的注册表."""
    return LayoutPluginRegistry(BUILTIN_LAYOUTS)
