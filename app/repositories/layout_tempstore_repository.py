"""布局暂存区 Repository.

职责:
- 以实体标识为键,在 Flask-Caching 中保存实体布局的工作副本
- ``get`` 优先返回工作副本,没有时返回实体本身
- 后写覆盖先写,不做加锁;不负责把工作副本写回数据库
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, cast

from flask import current_app
from flask_login import current_user

from app.constants.layout_builder import DEFAULT_TEMPSTORE_EXPIRE_SECONDS, LAYOUT_FIELD_NAME, TEMPSTORE_KEY_PREFIX
from app.layouts.field import LayoutEntity
from app.utils.structlog_config import get_logger
from app.utils.time_utils import time_utils

if TYPE_CHECKING:
    from flask_caching import Cache

    from app.types import JsonDict

logger = get_logger("layout_tempstore")


@dataclass(frozen=True, slots=True)
class TempstoreMetadata:
    """工作副本的归属信息."""

    owner_id: str | None
    updated_at: datetime | None


class LayoutTempstoreRepository:
    """基于 Flask-Caching 的布局暂存区.

    Attributes:
        cache: Flask-Caching 实例,未提供时使用应用级缓存.
        expire_seconds: 工作副本过期时间,未提供时读取 ``LAYOUT_TEMPSTORE_EXPIRE``.

    """

    def __init__(self, cache: Cache | None = None, expire_seconds: int | None = None) -> None:
        self._cache = cache
        self._expire_seconds = expire_seconds

    @property
    def cache(self) -> Cache:
        if self._cache is None:
            from app import cache as app_cache

            self._cache = app_cache
        return self._cache

    @property
    def expire_seconds(self) -> int:
        if self._expire_seconds is not None:
            return self._expire_seconds
        return int(current_app.config.get("LAYOUT_TEMPSTORE_EXPIRE", DEFAULT_TEMPSTORE_EXPIRE_SECONDS))

    @staticmethod
    def build_key(entity: LayoutEntity) -> str:
        return f"{TEMPSTORE_KEY_PREFIX}:{entity.entity_type}:{entity.entity_id}"

    def get(self, entity: LayoutEntity) -> LayoutEntity:
        """返回实体的工作副本,没有工作副本时原样返回实体."""
        record = self._load(entity)
        if record is None:
            return entity
        sections = record.get("sections")
        return LayoutEntity.with_sections(
            entity_type=entity.entity_type,
            entity_id=entity.entity_id,
            label=entity.label,
            sections=cast("list", sections) if isinstance(sections, list) else [],
        )

    def has(self, entity: LayoutEntity) -> bool:
        return self._load(entity) is not None

    def set(self, entity: LayoutEntity) -> None:
        """保存实体当前布局为工作副本."""
        owner_id = self._resolve_owner_id()
        record: JsonDict = {
            "entity_type": entity.entity_type,
            "entity_id": entity.entity_id,
            "sections": entity.get_field(LAYOUT_FIELD_NAME).to_list(),
            "owner_id": owner_id,
            "updated_at": time_utils.to_json_serializable(time_utils.now()),
        }
        self.cache.set(self.build_key(entity), record, timeout=self.expire_seconds)
        logger.info(
            "布局工作副本已保存",
            entity=entity.identity,
            owner_id=owner_id,
            section_count=len(entity.get_field(LAYOUT_FIELD_NAME)),
        )

    def delete(self, entity: LayoutEntity) -> None:
        self.cache.delete(self.build_key(entity))
        logger.info("布局工作副本已删除", entity=entity.identity)

    def get_metadata(self, entity: LayoutEntity) -> TempstoreMetadata | None:
        record = self._load(entity)
        if record is None:
            return None
        owner_id = record.get("owner_id")
        updated_at = record.get("updated_at")
        return TempstoreMetadata(
            owner_id=str(owner_id) if owner_id is not None else None,
            updated_at=time_utils.from_iso(updated_at if isinstance(updated_at, str) else None),
        )

    def _load(self, entity: LayoutEntity) -> JsonDict | None:
        record = self.cache.get(self.build_key(entity))
        if not isinstance(record, dict):
            return None
        return cast("JsonDict", record)

    @staticmethod
    def _resolve_owner_id() -> str | None:
        try:
            if not getattr(current_user, "is_authenticated", False):
                return None
            user_id = current_user.get_id()
        except (RuntimeError, AttributeError):
            return None
        return str(user_id) if user_id is not None else None
