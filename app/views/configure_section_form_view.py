"""区块配置表单视图.

驱动 build → validate → submit 生命周期:
- GET: 构建表单并返回表单树.
- POST: 重新构建表单、校验、提交;非 AJAX 请求成功后重定向到布局编辑器,
  AJAX 请求返回"重建布局并关闭对话框"的命令列表.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask import jsonify, redirect, request
from flask.views import MethodView
from flask_login import login_required

from app.constants import FlashCategory
from app.constants.layout_builder import LAYOUT_SETTINGS_KEY
from app.errors import NotFoundError, ValidationError
from app.forms.form_state import FormState
from app.forms.handlers.configure_section_form_handler import ConfigureSectionFormHandler
from app.repositories.layout_tempstore_repository import LayoutTempstoreRepository
from app.repositories.pages_repository import PagesRepository
from app.utils.request_payload import extract_request_payload, is_ajax_request
from app.utils.response_utils import jsonify_unified_error, jsonify_unified_success
from app.utils.route_safety import safe_route_call

if TYPE_CHECKING:
    from flask.typing import ResponseReturnValue

    from app.forms.handlers.configure_section_form_handler import BuildResult
    from app.layouts.field import LayoutEntity
    from app.types import JsonDict

_MODULE = "layout_builder"


def load_layout_entity(
    entity_type: str,
    entity_id: int,
    *,
    pages: PagesRepository,
    tempstore: LayoutTempstoreRepository,
) -> LayoutEntity:
    """加载实体并优先返回暂存区中的工作副本.

    Raises:
        NotFoundError: 实体类型不受支持或实体不存在时抛出.

    """
    if entity_type != pages.entity_type:
        raise NotFoundError(f"不支持的实体类型: {entity_type}", extra={"entity_type": entity_type})
    return tempstore.get(pages.get_layout_entity(entity_id))


class ConfigureSectionFormView(MethodView):
    """区块配置表单视图."""

    decorators = [login_required]

    def __init__(self) -> None:
        self.pages = PagesRepository()
        self.tempstore = LayoutTempstoreRepository()
        self.handler = ConfigureSectionFormHandler.create(tempstore=self.tempstore)

    # ------------------------------------------------------------------ #
    # HTTP Methods
    # ------------------------------------------------------------------ #
    def get(self, entity_type: str, entity_id: int, delta: int, plugin_id: str | None = None) -> ResponseReturnValue:
        """GET 请求处理,返回表单树."""
        form_state = FormState(is_ajax=is_ajax_request(request))

        def _execute() -> BuildResult:
            entity = self._load_entity(entity_type, entity_id)
            return self.handler.build(entity, delta, plugin_id, form_state)

        build_result = safe_route_call(
            _execute,
            module=_MODULE,
            action="configure_section_build",
            public_error="区块配置表单加载失败",
            context=self._log_context(entity_type, entity_id, delta, plugin_id),
        )
        return jsonify_unified_success(
            data={
                "form": build_result.form.to_dict(),
                "form_mode": "edit" if build_result.context.is_update else "create",
            },
        )

    def post(self, entity_type: str, entity_id: int, delta: int, plugin_id: str | None = None) -> ResponseReturnValue:
        """POST 请求处理,校验并提交表单."""
        form_state = FormState(values=extract_request_payload(request), is_ajax=is_ajax_request(request))

        def _execute() -> ResponseReturnValue:
            entity = self._load_entity(entity_type, entity_id)
            build_result = self.handler.build(entity, delta, plugin_id, form_state)
            if not self.handler.validate(build_result, form_state):
                return self._render_validation_errors(build_result, form_state)

            submit_result = self.handler.submit(build_result, form_state)
            if form_state.is_ajax:
                return jsonify(self.handler.successful_ajax_submit(submit_result))
            return redirect(form_state.redirect or submit_result.redirect_url)

        return safe_route_call(
            _execute,
            module=_MODULE,
            action="configure_section_submit",
            public_error="区块保存失败",
            context=self._log_context(entity_type, entity_id, delta, plugin_id),
        )

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _load_entity(self, entity_type: str, entity_id: int) -> LayoutEntity:
        return load_layout_entity(entity_type, entity_id, pages=self.pages, tempstore=self.tempstore)

    def _render_validation_errors(self, build_result: BuildResult, form_state: FormState) -> ResponseReturnValue:
        """校验失败时重新渲染表单.

        AJAX 请求返回替换表单与状态消息的命令;普通请求返回 400.
        """
        errors = form_state.get_errors()
        form_payload: JsonDict = {
            "form": build_result.form.to_dict(),
            "errors": dict(errors),
            "values": form_state.get_values().get(LAYOUT_SETTINGS_KEY) or {},
        }
        if not form_state.is_ajax:
            return jsonify_unified_error(
                ValidationError("区块配置校验失败", extra={"errors": dict(errors)}),
                extra=form_payload,
            )

        selector = f'[data-form-selector="{build_result.form.form_id.replace("_", "-")}"]'
        messages: list[JsonDict] = [
            {
                "type": FlashCategory.ERROR,
                "message": message,
                "field": path,
                "css_class": FlashCategory.get_css_class(FlashCategory.ERROR),
            }
            for path, message in errors.items()
        ]
        return jsonify(
            [
                {"command": "insert", "method": "replaceWith", "selector": selector, "data": form_payload},
                {"command": "insert", "method": "prepend", "selector": selector, "data": {"messages": messages}},
            ],
        )

    @staticmethod
    def _log_context(entity_type: str, entity_id: int, delta: int, plugin_id: str | None) -> JsonDict:
        return {
            "entity_type": entity_type,
            "entity_id": entity_id,
            "delta": delta,
            "plugin_id": plugin_id,
            "form_mode": "edit" if plugin_id is None else "create",
        }
