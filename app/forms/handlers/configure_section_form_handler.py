"""区块配置表单处理器.

在实体的布局字段中新增或更新一个区块(带配置的布局插件实例):
- build: 解析布局插件,委托插件的配置子表单构建 ``layout_settings`` 子树
- validate: 委托插件配置子表单校验,错误落在 ``layout_settings.*``
- submit: 委托插件配置子表单提交,把插件 ID 与配置写入 delta 位置的字段项,
  并把实体写入布局暂存区

未提供插件 ID 时为更新模式(编辑 delta 位置已有的区块),否则为插入模式.
handler 不做 commit,只写暂存区.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.constants import SuccessMessages
from app.constants.layout_builder import (
    AJAX_SUBMIT_CALLBACK,
    CONFIGURE_SECTION_FORM_ID,
    LAYOUT_FIELD_NAME,
    LAYOUT_SETTINGS_KEY,
    SUBMIT_LABEL_ADD,
    SUBMIT_LABEL_UPDATE,
)
from app.errors import InvalidStateError
from app.forms.definitions.base import SectionFormTree, SubmitAction
from app.forms.form_state import SubformState
from app.layouts.form_factory import resolve_plugin_form
from app.utils.route_safety import log_with_context

if TYPE_CHECKING:
    from app.forms.form_state import FormState
    from app.layouts.base import LayoutPlugin, PluginForm
    from app.layouts.field import LayoutEntity, LayoutSectionItemList
    from app.layouts.form_factory import PluginFormFactory
    from app.layouts.registry import LayoutPluginRegistry
    from app.repositories.layout_tempstore_repository import LayoutTempstoreRepository
    from app.services.layout_builder.layout_render_service import LayoutRenderService
    from app.types import JsonDict, LayoutConfiguration

_MODULE = "layout_builder"


@dataclass(slots=True)
class SectionFormContext:
    """单次请求内的表单上下文.

    Attributes:
        entity: 正在编辑的实体(暂存区工作副本).
        delta: 区块位置.
        is_update: 是否为更新模式.
        layout: 本次请求实例化的布局插件.
        plugin_form: build 阶段解析出的配置子表单处理者.

    """

    entity: LayoutEntity
    delta: int
    is_update: bool
    layout: LayoutPlugin
    plugin_form: PluginForm


@dataclass(slots=True)
class BuildResult:
    context: SectionFormContext
    form: SectionFormTree


@dataclass(slots=True)
class SubmitResult:
    """提交结果."""

    entity: LayoutEntity
    delta: int
    plugin_id: str
    configuration: LayoutConfiguration
    is_update: bool
    redirect_url: str


class ConfigureSectionFormHandler:
    """区块配置表单处理器."""

    form_id = CONFIGURE_SECTION_FORM_ID

    def __init__(
        self,
        tempstore: LayoutTempstoreRepository,
        layout_manager: LayoutPluginRegistry,
        plugin_form_factory: PluginFormFactory,
        render_service: LayoutRenderService | None = None,
    ) -> None:
        self._tempstore = tempstore
        self._layout_manager = layout_manager
        self._plugin_form_factory = plugin_form_factory
        self._render_service = render_service

    @classmethod
    def create(cls, tempstore: LayoutTempstoreRepository | None = None) -> ConfigureSectionFormHandler:
        """使用应用默认协作者装配处理器."""
        from app.layouts import layout_plugin_manager, plugin_form_factory
        from app.repositories.layout_tempstore_repository import LayoutTempstoreRepository
        from app.services.layout_builder.layout_render_service import LayoutRenderService

        return cls(
            tempstore=tempstore or LayoutTempstoreRepository(),
            layout_manager=layout_plugin_manager,
            plugin_form_factory=plugin_form_factory,
            render_service=LayoutRenderService(layout_plugin_manager),
        )

    def build(
        self,
        entity: LayoutEntity,
        delta: int,
        plugin_id: str | None,
        form_state: FormState,
    ) -> BuildResult:
        """构建区块配置表单.

        Args:
            entity: 正在编辑的实体.
            delta: 区块位置;更新模式下必须指向已有区块,插入模式下为新区块的位置.
            plugin_id: 插入模式下的布局插件 ID;为 None 时为更新模式.
            form_state: 本次请求的表单状态.

        Returns:
            表单上下文与表单树.

        Raises:
            InvalidStateError: delta 与实体当前布局不匹配时抛出.
            UnknownPluginError: 插件 ID 未登记时抛出.
            UnsupportedOperationError: 插件不提供配置表单时抛出.

        """
        is_update = plugin_id is None
        field_list = self._get_field_list(entity)

        configuration: LayoutConfiguration = {}
        if plugin_id is None:
            item = field_list.get(delta)
            if item is None:
                raise InvalidStateError(
                    f"区块 {delta} 不存在,无法更新",
                    extra={"entity": entity.identity, "delta": delta},
                )
            plugin_id = item.layout
            configuration = item.layout_settings
        elif delta < 0 or delta > len(field_list):
            raise InvalidStateError(
                f"区块插入位置越界: {delta}",
                extra={"entity": entity.identity, "delta": delta, "section_count": len(field_list)},
            )

        layout = self._layout_manager.create_instance(plugin_id, configuration)
        plugin_form = resolve_plugin_form(layout, self._plugin_form_factory)

        subform_state = SubformState.create_for_subform((LAYOUT_SETTINGS_KEY,), form_state)
        layout_settings = plugin_form.build_configuration_form({}, subform_state)

        submit = SubmitAction(label=SUBMIT_LABEL_UPDATE if is_update else SUBMIT_LABEL_ADD)
        if form_state.is_ajax:
            submit.ajax_callback = AJAX_SUBMIT_CALLBACK

        form = SectionFormTree(
            form_id=self.form_id,
            layout_settings=layout_settings,
            actions={"submit": submit},
        )
        log_with_context(
            "debug",
            "区块配置表单已构建",
            module=_MODULE,
            action="configure_section_build",
            context={"entity": entity.identity, "delta": delta, "plugin_id": plugin_id, "is_update": is_update},
        )
        context = SectionFormContext(
            entity=entity,
            delta=delta,
            is_update=is_update,
            layout=layout,
            plugin_form=plugin_form,
        )
        return BuildResult(context=context, form=form)

    def validate(self, build_result: BuildResult, form_state: FormState) -> bool:
        """委托插件配置子表单校验.

        Returns:
            没有任何字段错误时返回 True.

        """
        subform_state = SubformState.create_for_subform((LAYOUT_SETTINGS_KEY,), form_state)
        build_result.context.plugin_form.validate_configuration_form(
            build_result.form.layout_settings,
            subform_state,
        )
        return not form_state.has_any_errors()

    def submit(self, build_result: BuildResult, form_state: FormState) -> SubmitResult:
        """提交表单: 写入区块字段项并保存到暂存区."""
        context = build_result.context
        subform_state = SubformState.create_for_subform((LAYOUT_SETTINGS_KEY,), form_state)
        context.plugin_form.submit_configuration_form(build_result.form.layout_settings, subform_state)

        plugin_id = context.layout.get_plugin_id()
        configuration = context.layout.get_configuration()

        field_list = self._get_field_list(context.entity)
        if context.is_update:
            item = field_list.get(context.delta)
            if item is None:
                raise InvalidStateError(
                    f"区块 {context.delta} 不存在,无法更新",
                    extra={"entity": context.entity.identity, "delta": context.delta},
                )
            item.layout = plugin_id
            item.layout_settings = configuration
        else:
            try:
                field_list.add_item(
                    context.delta,
                    {"layout": plugin_id, "layout_settings": configuration, "section": {}},
                )
            except IndexError as exc:
                raise InvalidStateError(
                    f"区块插入位置越界: {context.delta}",
                    extra={"entity": context.entity.identity, "delta": context.delta},
                ) from exc

        self._tempstore.set(context.entity)
        redirect_url = context.entity.layout_builder_url()
        form_state.set_redirect(redirect_url)

        log_with_context(
            "info",
            SuccessMessages.SECTION_UPDATED if context.is_update else SuccessMessages.SECTION_ADDED,
            module=_MODULE,
            action="configure_section_submit",
            context={
                "entity": context.entity.identity,
                "delta": context.delta,
                "plugin_id": plugin_id,
                "is_update": context.is_update,
            },
        )
        return SubmitResult(
            entity=context.entity,
            delta=context.delta,
            plugin_id=plugin_id,
            configuration=configuration,
            is_update=context.is_update,
            redirect_url=redirect_url,
        )

    def successful_ajax_submit(self, submit_result: SubmitResult) -> list[JsonDict]:
        """AJAX 提交成功后重建布局编辑器并关闭对话框."""
        if self._render_service is None:
            msg = "未配置 LayoutRenderService,无法响应 AJAX 提交"
            raise RuntimeError(msg)
        return self._render_service.rebuild_and_close(submit_result.entity)

    @staticmethod
    def _get_field_list(entity: LayoutEntity) -> LayoutSectionItemList:
        try:
            return entity.get_field(LAYOUT_FIELD_NAME)
        except KeyError as exc:
            raise InvalidStateError(
                f"实体 {entity.identity} 没有布局字段",
                extra={"entity": entity.identity},
            ) from exc
