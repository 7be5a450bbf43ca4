"""布局渲染 Service.

职责:
- 将实体的(暂存)布局转换为前端布局编辑器可渲染的结构
- 生成 AJAX 请求下"重建布局并关闭对话框"的命令列表
- 不做持久化、不返回 Response
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.constants.layout_builder import LAYOUT_BUILDER_SELECTOR, LAYOUT_FIELD_NAME, OFF_CANVAS_SELECTOR
from app.errors import UnknownPluginError

if TYPE_CHECKING:
    from app.layouts.field import LayoutEntity
    from app.layouts.registry import LayoutPluginRegistry
    from app.types import JsonDict


class LayoutRenderService:
    """布局渲染服务."""

    def __init__(self, layout_manager: LayoutPluginRegistry) -> None:
        self._layout_manager = layout_manager

    def render(self, entity: LayoutEntity) -> JsonDict:
        """渲染实体布局.

        已登记的插件输出其区域列表;未登记的插件不会中断渲染,
        对应区块标记为 ``broken``.

        Args:
            entity: 需要渲染的实体(通常为暂存区中的工作副本).

        Returns:
            布局结构字典.

        """
        sections: list[JsonDict] = []
        for delta, item in enumerate(entity.get_field(LAYOUT_FIELD_NAME)):
            section: JsonDict = {
                "delta": delta,
                "layout": item.layout,
                "layout_settings": dict(item.layout_settings),
            }
            try:
                definition = self._layout_manager.get_definition(item.layout)
            except UnknownPluginError:
                section["broken"] = True
                section["regions"] = []
            else:
                section["label"] = definition.label
                section["regions"] = list(definition.regions)
            sections.append(section)

        return {
            "entity_type": entity.entity_type,
            "entity_id": entity.entity_id,
            "label": entity.label,
            "sections": sections,
        }

    def rebuild_layout(self, entity: LayoutEntity) -> JsonDict:
        """生成替换布局编辑器区域的命令."""
        return {
            "command": "insert",
            "method": "replaceWith",
            "selector": LAYOUT_BUILDER_SELECTOR,
            "data": self.render(entity),
        }

    def rebuild_and_close(self, entity: LayoutEntity) -> list[JsonDict]:
        """重建布局并关闭侧边对话框."""
        return [
            self.rebuild_layout(entity),
            {"command": "closeDialog", "selector": OFF_CANVAS_SELECTOR, "persist": False},
        ]
