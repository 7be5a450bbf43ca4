"""数据模型模块.

主要模型:
- User: 编辑者,暂存区记录的归属者
- Page: 可编辑布局的页面实体
"""

__all__ = [
    "Page",
    "User",
]
