"""布局插件子系统.

对外提供默认注册表与表单工厂,供视图层装配表单处理器使用.
"""

from app.layouts.form_factory import PluginFormFactory, PluginFormSource, classify_plugin_form, resolve_plugin_form
from app.layouts.registry import LayoutPluginRegistry, build_default_registry

layout_plugin_manager = build_default_registry()
plugin_form_factory = PluginFormFactory()

__all__ = [
    "LayoutPluginRegistry",
    "PluginFormFactory",
    "PluginFormSource",
    "build_default_registry",
    "classify_plugin_form",
    "layout_plugin_manager",
    "plugin_form_factory",
    "resolve_plugin_form",
]
