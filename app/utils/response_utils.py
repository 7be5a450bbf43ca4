"""页面布局编辑器 - 统一响应工具.

提供统一的成功/错误响应结构,避免在视图层散落 JSON 拼装逻辑.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from flask import Response, jsonify
from werkzeug.exceptions import HTTPException

from app.constants import HttpStatus
from app.constants.system_constants import ErrorCategory, ErrorMessages, ErrorSeverity, SuccessMessages
from app.errors import AppError, map_exception_to_status
from app.utils.structlog_config import get_logger, request_id_var
from app.utils.time_utils import time_utils

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.types import JsonDict, JsonValue

logger = get_logger("response_utils")


def unified_success_response(
    data: object | None = None,
    message: object | None = None,
    *,
    status: int = HttpStatus.OK,
    meta: Mapping[str, object] | None = None,
) -> tuple[JsonDict, int]:
    """生成统一的成功响应载荷.

    Args:
        data: 响应数据,可选.
        message: 成功消息,可选,默认为"操作成功".
        status: HTTP 状态码,默认为 200.
        meta: 元数据,可选.

    Returns:
        (响应载荷字典, HTTP 状态码).

    """
    payload: JsonDict = {
        "success": True,
        "error": False,
        "message": str(message) if message is not None else SuccessMessages.OPERATION_SUCCESS,
        "timestamp": time_utils.now().isoformat(),
    }
    if data is not None:
        payload["data"] = cast("JsonValue", data)
    if meta:
        payload["meta"] = cast("JsonDict", dict(meta))
    return payload, status


def _describe_error(error: Exception) -> tuple[str, str, ErrorCategory, ErrorSeverity]:
    if isinstance(error, AppError):
        return error.message, error.message_key, error.category, error.severity
    if isinstance(error, HTTPException):
        return str(error.description or error.name), "INVALID_REQUEST", ErrorCategory.BUSINESS, ErrorSeverity.LOW
    return ErrorMessages.INTERNAL_ERROR, "INTERNAL_ERROR", ErrorCategory.SYSTEM, ErrorSeverity.HIGH


def unified_error_response(
    error: BaseException | Exception,
    *,
    status_code: int | None = None,
    extra: Mapping[str, JsonValue] | None = None,
) -> tuple[JsonDict, int]:
    """生成统一的错误响应载荷.

    未知异常只暴露通用文案,原始信息仅写入日志.

    Args:
        error: 异常对象.
        status_code: HTTP 状态码,可选,默认根据异常类型自动映射.
        extra: 额外的错误信息,可选.

    Returns:
        (错误响应载荷字典, HTTP 状态码).

    """
    safe_error = error if isinstance(error, Exception) else Exception(str(error))
    message, message_key, category, severity = _describe_error(safe_error)
    final_status = status_code or map_exception_to_status(safe_error, default=HttpStatus.INTERNAL_SERVER_ERROR)

    if final_status >= HttpStatus.INTERNAL_SERVER_ERROR:
        logger.error(
            "请求处理失败",
            error_type=safe_error.__class__.__name__,
            error_message=str(safe_error),
            status_code=final_status,
            exc_info=safe_error,
        )

    payload: JsonDict = {
        "success": False,
        "error": True,
        "message": message,
        "message_code": message_key,
        "category": category.value,
        "severity": severity.value,
        "request_id": request_id_var.get(),
        "timestamp": time_utils.now().isoformat(),
    }
    if extra:
        payload["extra"] = dict(extra)
    return payload, final_status


def jsonify_unified_success(*args: object, **kwargs: object) -> tuple[Response, int]:
    """返回 Flask Response 对象的成功响应便捷函数."""
    payload, status = unified_success_response(*args, **kwargs)  # type: ignore[arg-type]
    return jsonify(payload), status


def jsonify_unified_error(*args: object, **kwargs: object) -> tuple[Response, int]:
    """返回 Flask Response 对象的错误响应便捷函数."""
    payload, status = unified_error_response(*args, **kwargs)  # type: ignore[arg-type]
    return jsonify(payload), status
