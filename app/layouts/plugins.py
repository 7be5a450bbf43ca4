"""内置布局插件."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from app.constants.layout_builder import CONFIGURE_OPERATION, LAYOUT_LABEL_MAX_LENGTH
from app.forms.definitions.base import FieldComponent, FieldOption, FormField
from app.layouts.base import ConfigurablePluginForm, LayoutPlugin, PluginFormBase, PluginWithForms
from app.schemas.layout_settings import WIDTH_OPTIONS_CONTEXT_KEY, MultiWidthSettings, OneColumnSettings
from app.schemas.validation import validate_subform

if TYPE_CHECKING:
    from app.forms.definitions.base import FormElements
    from app.forms.form_state import SubformState
    from app.types import LayoutConfiguration


def _build_label_field(default: object) -> FormField:
    return FormField(
        name="label",
        label="管理标签",
        help_text="仅在布局编辑器中显示,用于区分区块",
        default=default if isinstance(default, str) else "",
        props={"maxlength": LAYOUT_LABEL_MAX_LENGTH},
    )


class OneColumnLayout(LayoutPlugin, ConfigurablePluginForm):
    """单列布局,插件自身提供配置表单(仅管理标签)."""

    plugin_id = "one_column"
    label = "One column"
    regions = ("content",)

    def default_configuration(self) -> LayoutConfiguration:
        return {"label": ""}

    def build_configuration_form(self, form: FormElements, form_state: SubformState) -> FormElements:
        form["label"] = _build_label_field(self._configuration.get("label"))
        return form

    def validate_configuration_form(self, form: FormElements, form_state: SubformState) -> None:
        validate_subform(OneColumnSettings, form_state)

    def submit_configuration_form(self, form: FormElements, form_state: SubformState) -> None:
        settings = OneColumnSettings.model_validate(form_state.get_values())
        self._configuration["label"] = settings.label


class MultiWidthLayoutForm(PluginFormBase):
    """多列布局的列宽配置表单."""

    def build_configuration_form(self, form: FormElements, form_state: SubformState) -> FormElements:
        plugin = self._get_multi_width_plugin()
        form["width"] = FormField(
            name="width",
            label="列宽",
            component=FieldComponent.SELECT,
            required=True,
            default=plugin.get_configuration().get("width"),
            options=[FieldOption(value=key, label=text) for key, text in plugin.get_width_options().items()],
        )
        return form

    def validate_configuration_form(self, form: FormElements, form_state: SubformState) -> None:
        validate_subform(MultiWidthSettings, form_state, context=self._build_validation_context())

    def submit_configuration_form(self, form: FormElements, form_state: SubformState) -> None:
        plugin = self._get_multi_width_plugin()
        configuration = plugin.get_configuration()
        settings = MultiWidthSettings.model_validate(
            form_state.get_values(),
            context=self._build_validation_context(),
        )
        configuration["width"] = settings.width
        plugin.set_configuration(configuration)

    def _build_validation_context(self) -> dict[str, object]:
        return {WIDTH_OPTIONS_CONTEXT_KEY: self._get_multi_width_plugin().get_width_options()}

    def _get_multi_width_plugin(self) -> MultiWidthLayoutBase:
        plugin = self.get_plugin()
        if not isinstance(plugin, MultiWidthLayoutBase):
            msg = f"{self.__class__.__name__} 仅支持多列布局插件"
            raise TypeError(msg)
        return plugin


class MultiWidthLayoutBase(LayoutPlugin, PluginWithForms):
    """多列布局基类,配置表单由独立的表单类提供."""

    form_classes: ClassVar[dict[str, type[PluginFormBase]]] = {CONFIGURE_OPERATION: MultiWidthLayoutForm}
    width_options: ClassVar[dict[str, str]] = {}
    default_width: ClassVar[str]

    def default_configuration(self) -> LayoutConfiguration:
        return {"width": self.default_width}

    def get_width_options(self) -> dict[str, str]:
        return dict(self.width_options)


class TwoColumnLayout(MultiWidthLayoutBase):
    plugin_id = "two_column"
    label = "Two column"
    regions = ("first", "second")
    width_options: ClassVar[dict[str, str]] = {
        "50-50": "50%/50%",
        "33-67": "33%/67%",
        "67-33": "67%/33%",
    }
    default_width = "50-50"


class ThreeColumnLayout(MultiWidthLayoutBase):
    plugin_id = "three_column"
    label = "Three column"
    regions = ("first", "second", "third")
    width_options: ClassVar[dict[str, str]] = {
        "25-50-25": "25%/50%/25%",
        "33-34-33": "33%/34%/33%",
        "25-25-50": "25%/25%/50%",
        "50-25-25": "50%/25%/25%",
    }
    default_width = "33-34-33"


class FixedBannerLayout(LayoutPlugin):
    """固定横幅布局,不提供任何配置表单."""

    plugin_id = "fixed_banner"
    label = "Fixed banner"
    regions = ("banner",)


BUILTIN_LAYOUTS: tuple[type[LayoutPlugin], ...] = (
    OneColumnLayout,
    TwoColumnLayout,
    ThreeColumnLayout,
    FixedBannerLayout,
)
