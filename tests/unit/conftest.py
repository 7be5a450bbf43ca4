# tests/unit/conftest.py
"""单元测试专用 fixtures.

提供应用实例、请求上下文与布局实体构造相关的通用 fixtures。
"""

import pytest

from app import create_app, db
from app.layouts.field import LayoutEntity
from app.settings import Settings


@pytest.fixture(autouse=True)
def _unit_test_env(monkeypatch):
    """为 unit tests 强制注入隔离环境变量.

    目标:
    - unit tests 不依赖外部 Redis/数据库等基础设施
    - 避免开发者本机环境变量影响测试稳定性
    """
    monkeypatch.setenv("FLASK_ENV", "testing")
    monkeypatch.setenv("CACHE_TYPE", "simple")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.delenv("CACHE_REDIS_URL", raising=False)
    monkeypatch.delenv("LAYOUT_TEMPSTORE_EXPIRE", raising=False)


@pytest.fixture(scope="function")
def app():
    """创建测试应用实例."""
    settings = Settings.load()
    app = create_app(settings=settings)
    app.config["TESTING"] = True
    return app


@pytest.fixture(scope="function")
def request_ctx(app):
    """进入请求上下文(url_for 与 current_user 需要)."""
    with app.test_request_context("/layout_builder/page/1"):
        yield


@pytest.fixture(scope="function")
def db_tables(app):
    """在内存数据库中创建全部表."""
    from app.models.page import Page  # noqa: F401
    from app.models.user import User  # noqa: F401

    with app.app_context():
        db.create_all()
        yield db
        db.session.rollback()


@pytest.fixture
def make_entity():
    """构造页面布局实体."""

    def _make(sections=None, *, entity_id: int = 1, label: str = "首页") -> LayoutEntity:
        return LayoutEntity.with_sections(
            entity_type="page",
            entity_id=entity_id,
            label=label,
            sections=sections or [],
        )

    return _make
