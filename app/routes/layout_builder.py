"""
页面布局编辑器 - 布局编辑路由
"""

from flask import Blueprint
from flask_login import login_required

from app.layouts import layout_plugin_manager
from app.repositories.layout_tempstore_repository import LayoutTempstoreRepository
from app.repositories.pages_repository import PagesRepository
from app.services.layout_builder.layout_render_service import LayoutRenderService
from app.utils.response_utils import jsonify_unified_success
from app.utils.route_safety import safe_route_call
from app.views.configure_section_form_view import ConfigureSectionFormView, load_layout_entity

# 创建蓝图
layout_builder_bp = Blueprint("layout_builder", __name__)

_configure_section_view = ConfigureSectionFormView.as_view("configure_section")
layout_builder_bp.add_url_rule(
    "/configure/section/<entity_type>/<int:entity_id>/<int:delta>",
    view_func=_configure_section_view,
    methods=["GET", "POST"],
)
layout_builder_bp.add_url_rule(
    "/configure/section/<entity_type>/<int:entity_id>/<int:delta>/<plugin_id>",
    view_func=_configure_section_view,
    methods=["GET", "POST"],
)


@layout_builder_bp.route("/<entity_type>/<int:entity_id>")
@login_required
def view(entity_type: str, entity_id: int):
    """布局编辑器视图。

    返回实体当前的工作布局(暂存区优先),区块配置提交成功后重定向到这里。

    Returns:
        (JSON 响应, HTTP 状态码)。
    """
    tempstore = LayoutTempstoreRepository()

    def _execute():
        entity = load_layout_entity(entity_type, entity_id, pages=PagesRepository(), tempstore=tempstore)
        metadata = tempstore.get_metadata(entity)
        return {
            "layout": LayoutRenderService(layout_plugin_manager).render(entity),
            "has_unsaved_changes": metadata is not None,
            "owner_id": metadata.owner_id if metadata else None,
            "updated_at": metadata.updated_at.isoformat() if metadata and metadata.updated_at else None,
        }

    payload = safe_route_call(
        _execute,
        module="layout_builder",
        action="layout_builder_view",
        public_error="布局加载失败",
        context={"entity_type": entity_type, "entity_id": entity_id},
    )
    return jsonify_unified_success(data=payload)


@layout_builder_bp.route("/layouts")
@login_required
def layouts():
    """列出可用的布局插件。"""
    definitions = [
        {
            "id": definition.id,
            "label": definition.label,
            "regions": list(definition.regions),
            "provides_configuration_form": definition.provides_configuration_form,
        }
        for definition in layout_plugin_manager.get_definitions()
    ]
    return jsonify_unified_success(data={"layouts": definitions})
