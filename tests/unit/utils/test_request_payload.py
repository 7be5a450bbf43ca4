import pytest
from werkzeug.datastructures import MultiDict

from app.utils.request_payload import extract_request_payload, is_ajax_request, parse_payload


@pytest.mark.unit
def test_parse_multidict_nests_bracketed_keys() -> None:
    payload = MultiDict(
        [
            ("layout_settings[width]", " 50-50 "),
            ("layout_settings[label]", "Hero\x00"),
            ("op", "Add section"),
            ("_wrapper_format", "ajax"),
        ],
    )

    assert parse_payload(payload) == {
        "layout_settings": {"width": "50-50", "label": "Hero"},
        "op": "Add section",
    }


@pytest.mark.unit
def test_parse_multidict_keeps_last_value_and_malformed_keys() -> None:
    payload = MultiDict([("width", "50-50"), ("width", "33-67"), ("layout_settings[]", "x")])

    assert parse_payload(payload) == {"width": "33-67", "layout_settings[]": "x"}


@pytest.mark.unit
def test_parse_mapping_sanitizes_nested_strings() -> None:
    assert parse_payload({"layout_settings": {"label": "  Hero  ", "count": 2}}) == {
        "layout_settings": {"label": "Hero", "count": 2},
    }
    assert parse_payload(None) == {}


@pytest.mark.unit
def test_parse_payload_rejects_unsupported_types() -> None:
    with pytest.raises(TypeError):
        parse_payload(["not", "a", "mapping"])


@pytest.mark.unit
def test_extract_request_payload_prefers_json(app) -> None:
    with app.test_request_context("/", method="POST", json={"layout_settings": {"width": "50-50"}}):
        from flask import request

        assert extract_request_payload(request) == {"layout_settings": {"width": "50-50"}}

    with app.test_request_context("/", method="POST", data={"layout_settings[width]": "67-33"}):
        from flask import request

        assert extract_request_payload(request) == {"layout_settings": {"width": "67-33"}}


@pytest.mark.unit
@pytest.mark.parametrize(
    ("path", "headers", "expected"),
    [
        ("/?_wrapper_format=dialog.off_canvas", {}, True),
        ("/?_wrapper_format=ajax", {}, True),
        ("/?_wrapper_format=html", {}, False),
        ("/", {"X-Requested-With": "XMLHttpRequest"}, True),
        ("/", {}, False),
    ],
)
def test_is_ajax_request(app, path, headers, expected) -> None:
    with app.test_request_context(path, headers=headers):
        from flask import request

        assert is_ajax_request(request) is expected
