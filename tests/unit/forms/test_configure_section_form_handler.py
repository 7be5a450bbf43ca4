from typing import ClassVar
from unittest.mock import MagicMock

import pytest

from app.constants.layout_builder import LAYOUT_FIELD_NAME
from app.errors import InvalidStateError, UnknownPluginError, UnsupportedOperationError
from app.forms.definitions.base import FormField
from app.forms.form_state import FormState
from app.forms.handlers.configure_section_form_handler import ConfigureSectionFormHandler
from app.layouts.base import ConfigurablePluginForm, LayoutPlugin, PluginFormBase, PluginWithForms
from app.layouts.form_factory import PluginFormFactory
from app.layouts.registry import LayoutPluginRegistry, build_default_registry
from app.repositories.layout_tempstore_repository import LayoutTempstoreRepository
from app.services.layout_builder.layout_render_service import LayoutRenderService


class _HybridLayoutForm(PluginFormBase):
    def build_configuration_form(self, form, form_state):
        form["source"] = FormField(name="source", label="来源", default="aggregated")
        return form

    def submit_configuration_form(self, form, form_state):
        return None


class _HybridLayout(LayoutPlugin, ConfigurablePluginForm, PluginWithForms):
    plugin_id = "hybrid"
    label = "Hybrid"
    form_classes: ClassVar[dict[str, type[PluginFormBase]]] = {"configure": _HybridLayoutForm}

    def build_configuration_form(self, form, form_state):
        form["source"] = FormField(name="source", label="来源", default="direct")
        return form

    def submit_configuration_form(self, form, form_state):
        return None


def _build_handler(tempstore=None, registry=None) -> ConfigureSectionFormHandler:
    registry = registry or build_default_registry()
    return ConfigureSectionFormHandler(
        tempstore=tempstore or MagicMock(spec=LayoutTempstoreRepository),
        layout_manager=registry,
        plugin_form_factory=PluginFormFactory(),
        render_service=LayoutRenderService(registry),
    )


@pytest.mark.unit
def test_build_update_mode_uses_existing_item_configuration(request_ctx, make_entity) -> None:
    entity = make_entity([{"layout": "two_column", "layout_settings": {"width": "33-67"}, "section": {}}])
    handler = _build_handler()

    result = handler.build(entity, 0, None, FormState())

    assert result.context.is_update is True
    assert result.context.layout.get_plugin_id() == "two_column"
    assert result.context.layout.get_configuration() == {"width": "33-67"}
    assert result.form.layout_settings["width"].default == "33-67"
    assert result.form.actions["submit"].label == "Update"


@pytest.mark.unit
def test_build_insert_mode_creates_plugin_with_empty_configuration(request_ctx, make_entity) -> None:
    registry = build_default_registry()
    spy = MagicMock(wraps=registry.create_instance)
    registry.create_instance = spy
    handler = _build_handler(registry=registry)

    result = handler.build(make_entity(), 0, "two_column", FormState())

    spy.assert_called_once_with("two_column", {})
    assert result.context.is_update is False
    assert result.context.layout.get_configuration() == {"width": "50-50"}
    assert result.form.actions["submit"].label == "Add section"
    assert result.form.form_id == "layout_builder_configure_section"
    assert result.form.tree is True


@pytest.mark.unit
def test_build_twice_produces_identical_form_trees(request_ctx, make_entity) -> None:
    entity = make_entity([{"layout": "one_column", "layout_settings": {"label": "Hero"}}])
    handler = _build_handler()

    first = handler.build(entity, 0, None, FormState())
    second = handler.build(entity, 0, None, FormState())

    assert first.form.to_dict() == second.form.to_dict()


@pytest.mark.unit
def test_submit_update_mode_keeps_list_length(request_ctx, make_entity) -> None:
    entity = make_entity(
        [
            {"layout": "one_column", "layout_settings": {"label": "A"}},
            {"layout": "two_column", "layout_settings": {"width": "50-50"}},
        ],
    )
    tempstore = MagicMock(spec=LayoutTempstoreRepository)
    handler = _build_handler(tempstore=tempstore)
    form_state = FormState(values={"layout_settings": {"width": "67-33"}})

    result = handler.build(entity, 1, None, form_state)
    assert handler.validate(result, form_state) is True
    handler.submit(result, form_state)

    items = entity.get_field(LAYOUT_FIELD_NAME)
    assert len(items) == 2
    assert items.get(1).layout_settings == {"width": "67-33"}
    assert items.get(0).layout_settings == {"label": "A"}
    tempstore.set.assert_called_once_with(entity)


@pytest.mark.unit
def test_submit_insert_mode_adds_item_at_delta(request_ctx, make_entity) -> None:
    entity = make_entity(
        [
            {"layout": "one_column", "layout_settings": {"label": "A"}},
            {"layout": "one_column", "layout_settings": {"label": "B"}},
        ],
    )
    handler = _build_handler()
    form_state = FormState(values={"layout_settings": {"width": "25-50-25"}})

    result = handler.build(entity, 1, "three_column", form_state)
    submit_result = handler.submit(result, form_state)

    items = entity.get_field(LAYOUT_FIELD_NAME)
    assert len(items) == 3
    assert items.get(1).layout == "three_column"
    assert items.get(2).layout_settings == {"label": "B"}
    assert submit_result.is_update is False
    assert submit_result.plugin_id == "three_column"


@pytest.mark.unit
def test_insert_into_empty_layout_stores_item_and_redirects(request_ctx, make_entity) -> None:
    entity = make_entity()
    tempstore = MagicMock(spec=LayoutTempstoreRepository)
    handler = _build_handler(tempstore=tempstore)
    form_state = FormState(values={"layout_settings": {"width": "50-50"}})

    result = handler.build(entity, 0, "two_column", form_state)
    assert handler.validate(result, form_state) is True
    submit_result = handler.submit(result, form_state)

    assert entity.get_sections()[0] == {
        "layout": "two_column",
        "layout_settings": {"width": "50-50"},
        "section": {},
    }
    assert form_state.redirect == entity.layout_builder_url() == "/layout_builder/page/1"
    assert submit_result.redirect_url == form_state.redirect
    tempstore.set.assert_called_once_with(entity)


@pytest.mark.unit
def test_submitted_values_round_trip_through_tempstore(request_ctx, make_entity) -> None:
    tempstore = LayoutTempstoreRepository()
    handler = _build_handler(tempstore=tempstore)
    original = make_entity()
    form_state = FormState(values={"layout_settings": {"label": "  Hero  "}})

    result = handler.build(tempstore.get(original), 0, "one_column", form_state)
    handler.submit(result, form_state)

    staged = tempstore.get(original)
    rebuilt = handler.build(staged, 0, None, FormState())

    assert rebuilt.context.layout.get_configuration() == {"label": "Hero"}
    assert rebuilt.form.layout_settings["label"].default == "Hero"
    assert tempstore.has(original) is True
    assert len(staged.get_field(LAYOUT_FIELD_NAME)) == 1


@pytest.mark.unit
def test_build_fails_for_layout_without_configuration_form(request_ctx, make_entity) -> None:
    tempstore = MagicMock(spec=LayoutTempstoreRepository)
    handler = _build_handler(tempstore=tempstore)

    with pytest.raises(UnsupportedOperationError) as exc:
        handler.build(make_entity(), 0, "fixed_banner", FormState())

    assert str(exc.value) == 'The "fixed_banner" layout does not provide a configuration form'
    tempstore.set.assert_not_called()


@pytest.mark.unit
def test_build_prefers_aggregated_form_over_direct_form(request_ctx, make_entity) -> None:
    registry = LayoutPluginRegistry([_HybridLayout])
    handler = _build_handler(registry=registry)

    result = handler.build(make_entity(), 0, "hybrid", FormState())

    assert isinstance(result.context.plugin_form, _HybridLayoutForm)
    assert result.form.layout_settings["source"].default == "aggregated"


@pytest.mark.unit
def test_build_update_mode_rejects_missing_delta(request_ctx, make_entity) -> None:
    handler = _build_handler()

    with pytest.raises(InvalidStateError):
        handler.build(make_entity(), 3, None, FormState())


@pytest.mark.unit
@pytest.mark.parametrize("delta", [-1, 2])
def test_build_insert_mode_rejects_out_of_range_delta(request_ctx, make_entity, delta) -> None:
    entity = make_entity([{"layout": "one_column"}])
    handler = _build_handler()

    with pytest.raises(InvalidStateError) as exc:
        handler.build(entity, delta, "one_column", FormState())

    assert exc.value.status_code == 400


@pytest.mark.unit
def test_build_rejects_unknown_plugin(request_ctx, make_entity) -> None:
    handler = _build_handler()

    with pytest.raises(UnknownPluginError):
        handler.build(make_entity(), 0, "four_column", FormState())


@pytest.mark.unit
def test_validate_records_errors_under_layout_settings(request_ctx, make_entity) -> None:
    tempstore = MagicMock(spec=LayoutTempstoreRepository)
    handler = _build_handler(tempstore=tempstore)
    form_state = FormState(values={"layout_settings": {"width": "90-10"}})

    result = handler.build(make_entity(), 0, "two_column", form_state)

    assert handler.validate(result, form_state) is False
    assert form_state.get_errors() == {"layout_settings.width": "请选择有效的列宽"}
    tempstore.set.assert_not_called()


@pytest.mark.unit
@pytest.mark.parametrize(
    ("plugin_id", "field", "value"),
    [
        ("two_column", "width", ["50-50"]),
        ("two_column", "width", {"value": "50-50"}),
        ("two_column", "width", None),
        ("one_column", "label", ["Hero"]),
        ("one_column", "label", {"text": "Hero"}),
        ("one_column", "label", None),
    ],
)
def test_validate_rejects_structured_settings_values(request_ctx, make_entity, plugin_id, field, value) -> None:
    tempstore = MagicMock(spec=LayoutTempstoreRepository)
    handler = _build_handler(tempstore=tempstore)
    form_state = FormState(values={"layout_settings": {field: value}})

    result = handler.build(make_entity(), 0, plugin_id, form_state)

    assert handler.validate(result, form_state) is False
    assert list(form_state.get_errors()) == [f"layout_settings.{field}"]
    tempstore.set.assert_not_called()


@pytest.mark.unit
def test_ajax_build_attaches_submit_callback(request_ctx, make_entity) -> None:
    handler = _build_handler()

    ajax_result = handler.build(make_entity(), 0, "one_column", FormState(is_ajax=True))
    plain_result = handler.build(make_entity(), 0, "one_column", FormState())

    assert ajax_result.form.actions["submit"].to_dict()["ajax"] == {"callback": "ajax_submit"}
    assert "ajax" not in plain_result.form.actions["submit"].to_dict()


@pytest.mark.unit
def test_successful_ajax_submit_rebuilds_layout_and_closes_dialog(request_ctx, make_entity) -> None:
    entity = make_entity()
    handler = _build_handler()
    form_state = FormState(values={"layout_settings": {"width": "33-67"}}, is_ajax=True)

    result = handler.build(entity, 0, "two_column", form_state)
    commands = handler.successful_ajax_submit(handler.submit(result, form_state))

    assert [command["command"] for command in commands] == ["insert", "closeDialog"]
    assert commands[0]["method"] == "replaceWith"
    assert commands[0]["selector"] == "#layout-builder"
    assert commands[0]["data"]["sections"][0]["layout_settings"] == {"width": "33-67"}
    assert commands[1]["selector"] == "#layout-builder-off-canvas"
