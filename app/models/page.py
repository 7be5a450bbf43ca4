"""页面布局编辑器 - 页面模型."""

from app import db
from app.utils.time_utils import time_utils


class Page(db.Model):
    """页面模型.

    可编辑布局的实体.``layout`` 列按顺序保存区块字段项,
    每项形如 ``{"layout": str, "layout_settings": dict, "section": dict}``.

    Attributes:
        id: 页面主键.
        title: 页面标题.
        layout: 已发布的区块列表.
        created_at: 创建时间.
        updated_at: 更新时间.

    """

    __tablename__ = "pages"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    layout = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime(timezone=True), default=time_utils.now)
    updated_at = db.Column(db.DateTime(timezone=True), default=time_utils.now, onupdate=time_utils.now)

    def __init__(self, title: str, layout: list[dict] | None = None) -> None:
        self.title = title
        self.layout = list(layout or [])

    def __repr__(self) -> str:
        return f"<Page {self.id} {self.title}>"
