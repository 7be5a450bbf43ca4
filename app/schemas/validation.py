"""Schema 校验与表单错误映射."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

if TYPE_CHECKING:
    from app.forms.form_state import SubformState

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_ERROR_MESSAGE = "参数校验失败"


def validate_subform(
    model: type[ModelT],
    form_state: SubformState,
    *,
    context: dict[str, Any] | None = None,
) -> ModelT | None:
    """校验子表单值, 失败时把错误写回表单状态.

    Args:
        model: pydantic model.
        form_state: 子表单状态, 错误按字段名记录在其父路径下.
        context: 传给 validator 的上下文(如可选列宽).

    Returns:
        校验通过时返回 model 实例, 否则返回 None.

    """
    try:
        return model.model_validate(form_state.get_values(), context=context)
    except PydanticValidationError as exc:
        for field, message in _iter_field_errors(exc):
            form_state.set_error_by_name(field, message)
        return None


def _iter_field_errors(exc: PydanticValidationError) -> list[tuple[str, str]]:
    resolved: list[tuple[str, str]] = []
    for error in exc.errors():
        loc = error.get("loc")
        if not (isinstance(loc, tuple) and loc and isinstance(loc[0], str)):
            continue
        resolved.append((loc[0], _resolve_message(error)))
    return resolved


def _resolve_message(error: Any) -> str:
    ctx = error.get("ctx")
    if isinstance(ctx, dict):
        raw_error = ctx.get("error")
        if isinstance(raw_error, BaseException):
            return str(raw_error)

    msg = error.get("msg")
    if isinstance(msg, str) and msg.strip():
        return msg
    return DEFAULT_ERROR_MESSAGE
