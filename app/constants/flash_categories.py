"""Flash/状态消息类别常量.

定义状态消息的标准类别,避免魔法字符串.AJAX 响应中的状态消息同样复用这些类别.
"""

from __future__ import annotations

from typing import ClassVar


class FlashCategory:
    """状态消息类别常量."""

    ERROR = "error"
    INFO = "info"

    CSS_CLASSES: ClassVar[dict[str, str]] = {
        ERROR: "messages--error",
        INFO: "messages--status",
    }

    @classmethod
    def get_css_class(cls, category: str) -> str:
        """获取消息类别对应的 CSS 类名.

        Args:
            category: 消息类别字符串

        Returns:
            str: CSS 类名,未知类别回退为 INFO 样式

        """
        return cls.CSS_CLASSES.get(category, cls.CSS_CLASSES[cls.INFO])
