"""框架扩展运行期挂载属性类型声明."""

from __future__ import annotations

from datetime import timedelta

from flask import Flask
from flask_caching import Cache
from flask_login import LoginManager


class LayoutBuilderFlask(Flask):
    """定制的 Flask 子类,补充运行期挂载的扩展属性."""

    cache: Cache


class LayoutBuilderLoginManager(LoginManager):
    """登录管理器子类,标注初始化阶段写入的配置属性."""

    login_view: str | None
    session_protection: str | None
    remember_cookie_duration: int | float | timedelta


__all__ = [
    "LayoutBuilderFlask",
    "LayoutBuilderLoginManager",
]
