"""页面布局编辑器 - 用户模型."""

from flask_login import UserMixin

from app import db
from app.utils.time_utils import time_utils


class User(UserMixin, db.Model):
    """用户模型.

    登录认证由上游系统完成,这里只保存会话加载所需的最小信息.
    继承 Flask-Login 的 UserMixin 提供会话管理功能.

    Attributes:
        id: 用户 ID,主键.
        username: 用户名,唯一索引.
        created_at: 创建时间.
        is_active: 是否启用.

    """

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(255), unique=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=time_utils.now)
    is_active: bool = db.Column(db.Boolean, default=True, nullable=False)  # pyright: ignore[reportIncompatibleMethodOverride]

    def __init__(self, username: str, *, is_active: bool = True) -> None:
        self.username = username
        self.is_active = is_active

    def __repr__(self) -> str:
        return f"<User {self.username}>"
