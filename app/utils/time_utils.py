"""统一时间处理工具模块.

暂存区记录的更新时间统一使用 UTC,并以 ISO 8601 字符串形式落盘.
"""

from __future__ import annotations

from datetime import UTC, datetime


class TimeUtils:
    """统一时间处理工具类."""

    @staticmethod
    def now() -> datetime:
        """获取当前 UTC 时间.

        Returns:
            带 UTC 时区信息的当前时间.

        """
        return datetime.now(UTC)

    @staticmethod
    def to_json_serializable(dt: datetime | None) -> str | None:
        """转换为 ISO 字符串,缺省值原样返回 None."""
        if dt is None:
            return None
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return dt.isoformat()

    @staticmethod
    def from_iso(value: str | None) -> datetime | None:
        """解析 ISO 字符串,无法解析时返回 None.

        Args:
            value: ISO 8601 时间字符串.

        Returns:
            带时区的 datetime 或 None.

        """
        if not value:
            return None
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return parsed


time_utils = TimeUtils()
