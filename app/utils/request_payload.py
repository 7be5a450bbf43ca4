"""请求 payload 解析与规范化.

目标:
- 统一处理 JSON dict 与 Werkzeug MultiDict(form).
- 表单字段支持方括号嵌套命名,如 ``layout_settings[width]`` 解析为
  ``{"layout_settings": {"width": ...}}``.
- 提供最小的输入规范化(字符串 strip/NUL 清理).

注意:
- 本模块只负责 "取参形状" 与 "基础规范化",不做业务校验.
- 业务字段校验交由布局插件的配置子表单完成.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, cast

from app.constants import HttpHeaders
from app.constants.layout_builder import AJAX_WRAPPER_FORMATS, WRAPPER_FORMAT_PARAM

if TYPE_CHECKING:
    from flask import Request

    from app.types import JsonValue, MutablePayloadDict

_STRING_LIKE_TYPES = (str, bytes, bytearray)
_BRACKET_KEY_PATTERN = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")
_MAX_NESTING_DEPTH = 8


def parse_payload(payload: object | None) -> MutablePayloadDict:
    """解析并规范化 payload.

    Args:
        payload: JSON dict 或 MultiDict 兼容对象.

    Returns:
        规范化后的嵌套 payload dict.

    Raises:
        TypeError: payload 既不是 mapping 也不是 MultiDict 时抛出.

    """
    if payload is None:
        return {}

    if hasattr(payload, "getlist"):
        return _parse_multidict(payload)

    if isinstance(payload, Mapping):
        return cast("MutablePayloadDict", _sanitize_value(payload, depth=0))

    raise TypeError("payload 必须为 mapping 或 MultiDict 兼容对象")


def extract_request_payload(req: Request) -> MutablePayloadDict:
    """从请求中提取 payload,JSON 优先."""
    if req.is_json:
        return parse_payload(req.get_json(silent=True) or {})
    return parse_payload(req.form)


def is_ajax_request(req: Request) -> bool:
    """判断是否为增量(AJAX)请求.

    以 ``_wrapper_format`` 查询参数或 ``X-Requested-With`` 头为准.
    """
    wrapper_format = req.args.get(WRAPPER_FORMAT_PARAM, "")
    if wrapper_format in AJAX_WRAPPER_FORMATS:
        return True
    return req.headers.get(HttpHeaders.X_REQUESTED_WITH) == HttpHeaders.XML_HTTP_REQUEST


def _parse_multidict(payload: object) -> MutablePayloadDict:
    multi_dict = cast(Any, payload)
    parsed: MutablePayloadDict = {}
    for key in list(multi_dict.keys()):
        if key == WRAPPER_FORMAT_PARAM:
            continue
        values = list(multi_dict.getlist(key) or [])
        value = _sanitize_scalar(values[-1]) if values else None
        _assign_nested(parsed, _split_key(key), value)
    return parsed


def _split_key(key: str) -> list[str]:
    match = _BRACKET_KEY_PATTERN.match(key)
    if match is None:
        return [key]
    head, brackets = match.groups()
    parts = [head, *re.findall(r"\[([^\[\]]*)\]", brackets)]
    if len(parts) > _MAX_NESTING_DEPTH or any(part == "" for part in parts):
        return [key]
    return parts


def _assign_nested(target: MutablePayloadDict, parts: list[str], value: JsonValue) -> None:
    container = target
    for part in parts[:-1]:
        child = container.get(part)
        if not isinstance(child, dict):
            child = {}
            container[part] = child
        container = child
    container[parts[-1]] = value


def _sanitize_value(value: object, *, depth: int) -> JsonValue:
    if depth > _MAX_NESTING_DEPTH:
        return None
    if isinstance(value, Mapping):
        return {str(key): _sanitize_value(item, depth=depth + 1) for key, item in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, _STRING_LIKE_TYPES):
        return [_sanitize_value(item, depth=depth + 1) for item in value]
    return _sanitize_scalar(value)


def _sanitize_scalar(value: object) -> JsonValue:
    if value is None or isinstance(value, (bool, int, float)):
        return cast("JsonValue", value)
    if isinstance(value, (bytes, bytearray)):
        value = value.decode(errors="ignore")
    if isinstance(value, str):
        return value.replace("\x00", "").strip()
    return str(value)
