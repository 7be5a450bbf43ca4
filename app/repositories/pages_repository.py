"""页面读模型 Repository.

职责:
- 仅负责数据库读取与实体转换
- 返回与 ORM 分离的 ``LayoutEntity``,编辑不会回写数据库
- 不 commit
"""

from __future__ import annotations

from typing import cast

from app import db
from app.errors import NotFoundError
from app.layouts.field import LayoutEntity
from app.models.page import Page

PAGE_ENTITY_TYPE = "page"


class PagesRepository:
    """页面查询 Repository."""

    entity_type = PAGE_ENTITY_TYPE

    def get_page(self, page_id: int) -> Page | None:
        return cast("Page | None", db.session.get(Page, page_id))

    def get_layout_entity(self, page_id: int) -> LayoutEntity:
        """加载页面并转换为可编辑布局的实体.

        Raises:
            NotFoundError: 页面不存在时抛出.

        """
        page = self.get_page(page_id)
        if page is None:
            raise NotFoundError(f"页面不存在: {page_id}", extra={"page_id": page_id})
        return LayoutEntity.with_sections(
            entity_type=self.entity_type,
            entity_id=page.id,
            label=page.title,
            sections=page.layout or [],
        )
