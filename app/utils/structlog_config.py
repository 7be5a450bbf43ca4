"""页面布局编辑器的结构化日志配置与辅助函数."""

from __future__ import annotations

import logging
import sys
from contextlib import suppress
from contextvars import ContextVar
from typing import TYPE_CHECKING, cast
from uuid import uuid4

import structlog
from flask import Flask, current_app, g, has_request_context, request
from flask_login import current_user

from app.settings import APP_VERSION

if TYPE_CHECKING:
    from structlog.typing import BindableLogger, Processor

    from app.types import StructlogEventDict

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

_REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_MAX_LEN = 128


class StructlogConfig:
    """structlog 配置核心类.

    负责配置处理器链与上下文注入.开发环境使用控制台渲染器,其余环境输出 JSON.

    Example:
        >>> config = StructlogConfig()
        >>> config.configure(app)
        >>> logger = get_logger('layout_builder')

    """

    def __init__(self) -> None:
        self.configured = False
        self.console = False

    def configure(self, app: Flask | None = None) -> None:
        """初始化 structlog 处理器(幂等).

        Args:
            app: Flask 应用实例,可选.提供时根据 DEBUG 选择渲染器.

        """
        console = bool(app.config.get("DEBUG", False)) if app is not None else self.console
        if self.configured and console == self.console:
            return

        processors = [
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            self._add_request_context,
            self._add_user_context,
            self._add_global_context,
            self._get_renderer(console=console),
        ]
        structlog.configure(
            processors=cast("list[structlog.types.Processor]", processors),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=False,
        )
        self.console = console
        self.configured = True

    @staticmethod
    def _add_request_context(
        _logger: BindableLogger,
        _method_name: str,
        event_dict: StructlogEventDict,
    ) -> StructlogEventDict:
        """向事件字典写入请求上下文(request_id/路径/方法)."""
        if has_request_context():
            event_dict["request_id"] = request_id_var.get()
            event_dict["path"] = request.path
            event_dict["method"] = request.method
        return event_dict

    @staticmethod
    def _add_user_context(
        _logger: BindableLogger,
        _method_name: str,
        event_dict: StructlogEventDict,
    ) -> StructlogEventDict:
        """附加当前用户上下文."""
        with suppress(RuntimeError, AttributeError):
            if current_user and getattr(current_user, "is_authenticated", False):
                event_dict["current_user_id"] = getattr(current_user, "id", None)
        return event_dict

    @staticmethod
    def _add_global_context(
        _logger: BindableLogger,
        _method_name: str,
        event_dict: StructlogEventDict,
    ) -> StructlogEventDict:
        """附加应用名称、版本等全局上下文."""
        try:
            event_dict["app_name"] = current_app.config["APP_NAME"]
            event_dict["app_version"] = current_app.config["APP_VERSION"]
        except (RuntimeError, KeyError):
            event_dict["app_version"] = APP_VERSION
        return event_dict

    @staticmethod
    def _get_renderer(*, console: bool) -> Processor:
        if console:
            return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
        return structlog.processors.JSONRenderer(ensure_ascii=False)


structlog_config = StructlogConfig()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """获取结构化日志记录器.

    Args:
        name: 日志记录器名称,通常使用模块名.

    Returns:
        绑定的 structlog 日志记录器实例.

    """
    structlog_config.configure()
    return structlog.get_logger(name)


def _resolve_request_id() -> str:
    incoming = (request.headers.get(_REQUEST_ID_HEADER) or "").strip()
    if incoming and len(incoming) <= _REQUEST_ID_MAX_LEN:
        return incoming
    return f"req_{uuid4().hex}"


def configure_structlog(app: Flask) -> None:
    """配置 structlog 并注册请求级上下文钩子.

    Args:
        app: Flask 应用实例.

    """
    structlog_config.configure(app)

    level_name = str(app.config.get("LOG_LEVEL", "INFO"))
    logging.basicConfig(format="%(message)s", stream=sys.stdout)
    logging.getLogger().setLevel(getattr(logging, level_name, logging.INFO))

    @app.before_request
    def _bind_request_id() -> None:
        g.request_id_token = request_id_var.set(_resolve_request_id())

    @app.teardown_request
    def _reset_request_id(exception: BaseException | None) -> None:
        token = g.pop("request_id_token", None)
        if token is not None:
            request_id_var.reset(token)
        if exception is not None:
            get_logger("app").error("请求处理异常", module="system", exception=str(exception))


__all__ = [
    "configure_structlog",
    "get_logger",
    "request_id_var",
    "structlog_config",
]
