"""页面布局编辑器 - Flask 应用初始化.

基于 Flask 的页面布局编辑服务: 在页面实体的布局中新增/更新区块,
编辑结果暂存在按实体划分的工作副本中.
"""

from functools import lru_cache
from importlib import import_module
from typing import TYPE_CHECKING, Union

from flask import Blueprint, Flask, jsonify
from flask.typing import ResponseReturnValue
from flask_caching import Cache
from flask_sqlalchemy import SQLAlchemy

from app.settings import Settings
from app.types.extensions import LayoutBuilderFlask, LayoutBuilderLoginManager
from app.utils.structlog_config import configure_structlog

if TYPE_CHECKING:
    from app.models.user import User

# 初始化扩展
db = SQLAlchemy()
cache = Cache()
login_manager: LayoutBuilderLoginManager = LayoutBuilderLoginManager()


@lru_cache(maxsize=1)
def get_user_model() -> type["User"]:
    """延迟加载 User 模型,避免循环导入."""
    return import_module("app.models.user").User


def create_app(*, settings: Settings | None = None) -> LayoutBuilderFlask:
    """创建Flask应用实例.

    Args:
        settings: 可选的配置对象,用于测试或多环境启动.

    Returns:
        LayoutBuilderFlask: Flask应用实例

    """
    resolved_settings = settings or Settings.load()
    app = LayoutBuilderFlask(__name__)

    # 配置应用
    app.config.from_mapping(resolved_settings.to_flask_config())

    # 配置会话安全
    configure_security(app, resolved_settings)

    # 初始化扩展
    initialize_extensions(app, resolved_settings)

    # 注册蓝图
    configure_blueprints(app)

    # 配置统一日志系统
    configure_structlog(app)

    # 注册全局错误处理器
    @app.errorhandler(Exception)
    def handle_global_exception(error: Exception) -> ResponseReturnValue:
        """全局错误处理."""
        from app.utils.response_utils import unified_error_response

        payload, status_code = unified_error_response(error)
        return jsonify(payload), status_code

    return app


def configure_security(app: Flask, settings: Settings) -> None:
    """配置会话安全参数与 Cookie 选项.

    Args:
        app: Flask 应用实例.
        settings: 统一配置对象,提供会话超时等参数.

    """
    app.config["PERMANENT_SESSION_LIFETIME"] = settings.session_lifetime_seconds
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    app.config["SESSION_COOKIE_NAME"] = "layout_builder_session"


def initialize_extensions(app: Flask, settings: Settings) -> None:
    """初始化数据库、缓存、登录等 Flask 扩展.

    Args:
        app: Flask 应用实例.
        settings: 统一配置对象,用于扩展初始化参数注入.

    """
    # 初始化数据库
    db.init_app(app)

    # 初始化缓存(布局暂存区的存储后端)
    cache.init_app(app)
    app.cache = cache

    # 初始化登录管理;认证由上游完成,未登录请求直接返回 401
    login_manager.init_app(app)
    login_manager.login_view = None
    login_manager.session_protection = "basic"
    login_manager.remember_cookie_duration = settings.session_lifetime_seconds

    @login_manager.unauthorized_handler
    def handle_unauthorized() -> ResponseReturnValue:
        from app.errors import AuthenticationError
        from app.utils.response_utils import jsonify_unified_error

        return jsonify_unified_error(AuthenticationError())

    # 用户加载器
    @login_manager.user_loader
    def load_user(user_id: str) -> Union["User", None]:
        user_model = get_user_model()
        try:
            return db.session.get(user_model, int(user_id))
        except (TypeError, ValueError):
            return None


def configure_blueprints(app: Flask) -> None:
    """注册所有蓝图以暴露路由.

    Args:
        app: Flask 应用实例.

    """
    blueprint_specs: list[tuple[str, str, str | None]] = [
        ("app.routes.layout_builder", "layout_builder_bp", "/layout_builder"),
    ]

    blueprints: list[tuple[Blueprint, str | None]] = []
    for module_path, attr_name, prefix in blueprint_specs:
        module = import_module(module_path)
        blueprint = getattr(module, attr_name)
        blueprints.append((blueprint, prefix))

    for blueprint, prefix in blueprints:
        if prefix:
            app.register_blueprint(blueprint, url_prefix=prefix)
        else:
            app.register_blueprint(blueprint)
