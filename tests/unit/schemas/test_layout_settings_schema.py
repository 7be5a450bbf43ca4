import pytest

from app.forms.form_state import FormState, SubformState
from app.schemas.layout_settings import WIDTH_OPTIONS_CONTEXT_KEY, MultiWidthSettings, OneColumnSettings
from app.schemas.validation import validate_subform

_WIDTH_CONTEXT = {WIDTH_OPTIONS_CONTEXT_KEY: {"50-50": "50%/50%", "33-67": "33%/67%"}}


def _subform_state(values) -> tuple[FormState, SubformState]:
    form_state = FormState(values={"layout_settings": values})
    return form_state, SubformState(("layout_settings",), form_state)


@pytest.mark.unit
def test_one_column_settings_strips_label() -> None:
    settings = OneColumnSettings.model_validate({"label": "  Hero  ", "unknown": 1})

    assert settings.label == "Hero"


@pytest.mark.unit
def test_one_column_settings_defaults_missing_label_to_empty() -> None:
    assert OneColumnSettings.model_validate({}).label == ""


@pytest.mark.unit
@pytest.mark.parametrize("label", [None, 3, ["Hero"], {"text": "Hero"}])
def test_validate_subform_rejects_non_text_label(label) -> None:
    form_state, subform_state = _subform_state({"label": label})

    assert validate_subform(OneColumnSettings, subform_state) is None
    assert form_state.get_errors() == {"layout_settings.label": "管理标签必须为字符串"}


@pytest.mark.unit
def test_validate_subform_rejects_long_label() -> None:
    form_state, subform_state = _subform_state({"label": "x" * 256})

    validate_subform(OneColumnSettings, subform_state)

    assert form_state.get_errors() == {"layout_settings.label": "管理标签不能超过 255 个字符"}


@pytest.mark.unit
@pytest.mark.parametrize("width", ["90-10", None, 50, ["50-50"], {"value": "50-50"}])
def test_validate_subform_rejects_invalid_width(width) -> None:
    form_state, subform_state = _subform_state({"width": width})

    assert validate_subform(MultiWidthSettings, subform_state, context=_WIDTH_CONTEXT) is None
    assert form_state.get_errors() == {"layout_settings.width": "请选择有效的列宽"}


@pytest.mark.unit
def test_validate_subform_reports_missing_width() -> None:
    form_state, subform_state = _subform_state({})

    validate_subform(MultiWidthSettings, subform_state, context=_WIDTH_CONTEXT)

    assert form_state.get_errors() == {"layout_settings.width": "请选择有效的列宽"}


@pytest.mark.unit
def test_validate_subform_returns_model_for_known_width() -> None:
    form_state, subform_state = _subform_state({"width": "33-67"})

    settings = validate_subform(MultiWidthSettings, subform_state, context=_WIDTH_CONTEXT)

    assert settings is not None
    assert settings.width == "33-67"
    assert form_state.has_any_errors() is False
