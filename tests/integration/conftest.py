# tests/integration/conftest.py
"""集成测试专用 fixtures.

使用完整的应用工厂、内存 SQLite 与 simple 缓存,验证 HTTP 层的端到端行为。
"""

import pytest

from app import create_app, db
from app.models.page import Page
from app.models.user import User
from app.settings import Settings


@pytest.fixture(scope="function")
def app():
    """创建测试应用实例(每个测试独立的数据库与缓存)."""
    settings = Settings(
        FLASK_ENV="testing",
        SECRET_KEY="integration-secret",
        DATABASE_URL="sqlite:///:memory:",
        CACHE_TYPE="simple",
    )
    app = create_app(settings=settings)
    app.config["TESTING"] = True

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope="function")
def page_id(app):
    """创建一个已有单列区块的页面."""
    with app.app_context():
        page = Page(
            title="首页",
            layout=[{"layout": "one_column", "layout_settings": {"label": "Hero"}, "section": {}}],
        )
        db.session.add(page)
        db.session.commit()
        return page.id


@pytest.fixture(scope="function")
def client(app):
    """未登录的测试客户端."""
    return app.test_client()


@pytest.fixture(scope="function")
def auth_client(app):
    """创建已认证的测试客户端.

    自动创建测试用户并设置会话。
    """
    with app.app_context():
        user = User(username="layout_editor")
        db.session.add(user)
        db.session.commit()
        user_id = user.id

    client = app.test_client()
    with client.session_transaction() as session:
        session["_user_id"] = str(user_id)
    return client
