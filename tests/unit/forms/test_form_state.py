import pytest

from app.forms.form_state import FormState, SubformState


@pytest.mark.unit
def test_subform_state_reads_and_writes_scoped_values() -> None:
    form_state = FormState(values={"layout_settings": {"width": "50-50"}, "op": "Update"})
    subform_state = SubformState.create_for_subform(("layout_settings",), form_state)

    assert subform_state.get_value("width") == "50-50"
    assert subform_state.get_value("op") is None

    subform_state.set_value("label", "Hero")
    assert form_state.get_values()["layout_settings"] == {"width": "50-50", "label": "Hero"}


@pytest.mark.unit
def test_subform_state_replaces_non_mapping_subtree() -> None:
    form_state = FormState(values={"layout_settings": "broken"})
    subform_state = SubformState(("layout_settings",), form_state)

    assert subform_state.get_values() == {}
    assert form_state.get_value("layout_settings") == {}


@pytest.mark.unit
def test_subform_errors_are_prefixed_with_parents() -> None:
    form_state = FormState()
    subform_state = SubformState(("layout_settings",), form_state)

    subform_state.set_error_by_name("width", "请选择有效的列宽")
    subform_state.set_error_by_name("width", "第二条错误")

    assert form_state.get_errors() == {"layout_settings.width": "请选择有效的列宽"}
    assert subform_state.has_any_errors() is True
    assert form_state.has_any_errors() is True


@pytest.mark.unit
def test_subform_state_exposes_ajax_flag_and_parent_state() -> None:
    form_state = FormState(is_ajax=True)
    subform_state = SubformState(("layout_settings",), form_state)

    assert subform_state.is_ajax is True
    assert subform_state.get_complete_form_state() is form_state


@pytest.mark.unit
def test_subform_state_requires_parents() -> None:
    with pytest.raises(ValueError):
        SubformState((), FormState())
