from typing import ClassVar

import pytest

from app.errors import UnknownPluginError, UnsupportedOperationError
from app.forms.form_state import FormState, SubformState
from app.layouts.base import ConfigurablePluginForm, LayoutPlugin, PluginFormBase, PluginWithForms
from app.layouts.form_factory import PluginFormFactory, PluginFormSource, classify_plugin_form, resolve_plugin_form
from app.layouts.plugins import FixedBannerLayout, MultiWidthLayoutForm, OneColumnLayout, TwoColumnLayout
from app.layouts.registry import LayoutPluginRegistry, build_default_registry


class _PreviewForm(PluginFormBase):
    def build_configuration_form(self, form, form_state):
        return form

    def submit_configuration_form(self, form, form_state):
        return None


class _PreviewOnlyLayout(LayoutPlugin, PluginWithForms):
    plugin_id = "preview_only"
    label = "Preview only"
    form_classes: ClassVar[dict[str, type[PluginFormBase]]] = {"preview": _PreviewForm}


class _DuplicateOneColumn(LayoutPlugin):
    plugin_id = "one_column"
    label = "Duplicate"


@pytest.mark.unit
def test_default_registry_registers_builtin_layouts() -> None:
    registry = build_default_registry()

    assert {definition.id for definition in registry.get_definitions()} == {
        "one_column",
        "two_column",
        "three_column",
        "fixed_banner",
    }
    assert registry.get_definition("fixed_banner").provides_configuration_form is False
    assert registry.get_definition("two_column").regions == ("first", "second")


@pytest.mark.unit
def test_registry_copies_initial_configuration() -> None:
    registry = build_default_registry()
    configuration = {"width": "33-67"}

    plugin = registry.create_instance("two_column", configuration)
    configuration["width"] = "67-33"

    assert plugin.get_configuration() == {"width": "33-67"}


@pytest.mark.unit
def test_registry_rejects_unknown_and_duplicate_ids() -> None:
    registry = build_default_registry()

    with pytest.raises(UnknownPluginError) as exc:
        registry.create_instance("missing")
    assert exc.value.status_code == 404

    with pytest.raises(ValueError):
        registry.register(_DuplicateOneColumn)


@pytest.mark.unit
def test_classify_plugin_form_sources() -> None:
    assert classify_plugin_form(TwoColumnLayout()) is PluginFormSource.AGGREGATED
    assert classify_plugin_form(OneColumnLayout()) is PluginFormSource.DIRECT
    assert classify_plugin_form(FixedBannerLayout()) is PluginFormSource.NONE


@pytest.mark.unit
def test_resolve_plugin_form_returns_bound_form_or_plugin() -> None:
    factory = PluginFormFactory()
    two_column = TwoColumnLayout()
    one_column = OneColumnLayout()

    form = resolve_plugin_form(two_column, factory)

    assert isinstance(form, MultiWidthLayoutForm)
    assert form.get_plugin() is two_column
    assert resolve_plugin_form(one_column, factory) is one_column

    with pytest.raises(UnsupportedOperationError):
        resolve_plugin_form(FixedBannerLayout(), factory)


@pytest.mark.unit
def test_factory_uses_fallback_operation() -> None:
    factory = PluginFormFactory()
    plugin = _PreviewOnlyLayout()

    with pytest.raises(UnsupportedOperationError):
        factory.create_instance(plugin, "configure")

    form = factory.create_instance(plugin, "configure", fallback_operation="preview")
    assert isinstance(form, _PreviewForm)


@pytest.mark.unit
def test_factory_rejects_plugin_without_form_classes() -> None:
    with pytest.raises(UnsupportedOperationError):
        PluginFormFactory().create_instance(OneColumnLayout(), "configure")


@pytest.mark.unit
def test_one_column_label_is_validated_and_trimmed() -> None:
    plugin = OneColumnLayout()
    form_state = FormState(values={"layout_settings": {"label": "x" * 256}})
    subform_state = SubformState(("layout_settings",), form_state)

    plugin.validate_configuration_form({}, subform_state)
    assert "layout_settings.label" in form_state.get_errors()

    ok_state = SubformState(("layout_settings",), FormState(values={"layout_settings": {"label": " Hero "}}))
    plugin.validate_configuration_form({}, ok_state)
    plugin.submit_configuration_form({}, ok_state)
    assert not ok_state.has_any_errors()
    assert plugin.get_configuration() == {"label": "Hero"}


@pytest.mark.unit
def test_custom_registry_only_knows_registered_plugins() -> None:
    registry = LayoutPluginRegistry([OneColumnLayout])

    assert registry.has_definition("one_column") is True
    assert registry.has_definition("two_column") is False
    assert isinstance(registry.create_instance("one_column"), ConfigurablePluginForm)
