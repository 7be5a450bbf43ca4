"""布局字段: 实体上按顺序排列的区块字段项.

每个字段项以位置索引(delta)标识,持久化形态为
``{"layout": str, "layout_settings": dict, "section": dict}``.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from flask import url_for

from app.constants.layout_builder import LAYOUT_FIELD_NAME

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping

    from app.types import JsonValue, LayoutConfiguration, SectionItemPayload


@dataclass(slots=True)
class LayoutSectionItem:
    """单个区块字段项."""

    layout: str
    layout_settings: LayoutConfiguration = field(default_factory=dict)
    section: dict[str, JsonValue] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, payload: Mapping[str, JsonValue]) -> LayoutSectionItem:
        layout = payload.get("layout")
        if not isinstance(layout, str) or not layout:
            msg = "区块字段项缺少 layout"
            raise ValueError(msg)
        settings = payload.get("layout_settings") or {}
        section = payload.get("section") or {}
        return cls(
            layout=layout,
            layout_settings=deepcopy(dict(settings)) if isinstance(settings, dict) else {},
            section=deepcopy(dict(section)) if isinstance(section, dict) else {},
        )

    def to_dict(self) -> SectionItemPayload:
        return {
            "layout": self.layout,
            "layout_settings": deepcopy(self.layout_settings),
            "section": deepcopy(self.section),
        }


class LayoutSectionItemList:
    """有序的区块字段项列表."""

    def __init__(self, items: Iterable[LayoutSectionItem] = ()) -> None:
        self._items: list[LayoutSectionItem] = list(items)

    @classmethod
    def from_payload(cls, payload: Iterable[Mapping[str, JsonValue]] | None) -> LayoutSectionItemList:
        return cls(LayoutSectionItem.from_dict(item) for item in (payload or ()))

    def get(self, delta: int) -> LayoutSectionItem | None:
        """返回 delta 位置的字段项,不存在时返回 None(不支持负索引)."""
        if delta < 0 or delta >= len(self._items):
            return None
        return self._items[delta]

    def add_item(self, delta: int, values: Mapping[str, JsonValue]) -> LayoutSectionItem:
        """在 delta 位置插入新字段项,原位置及之后的字段项顺延.

        Raises:
            IndexError: delta 为负或大于当前长度时抛出.

        """
        if delta < 0 or delta > len(self._items):
            msg = f"插入位置越界: {delta}"
            raise IndexError(msg)
        item = LayoutSectionItem.from_dict(values)
        self._items.insert(delta, item)
        return item

    def to_list(self) -> list[SectionItemPayload]:
        return [item.to_dict() for item in self._items]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[LayoutSectionItem]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LayoutSectionItemList):
            return NotImplemented
        return self._items == other._items

    __hash__ = None  # type: ignore[assignment]


@dataclass(slots=True)
class LayoutEntity:
    """可编辑布局的实体.

    与 ORM 记录分离: 编辑过程只修改这里的副本,不会回写数据库.
    """

    entity_type: str
    entity_id: int
    label: str
    fields: dict[str, LayoutSectionItemList] = field(default_factory=dict)

    @classmethod
    def with_sections(
        cls,
        entity_type: str,
        entity_id: int,
        label: str,
        sections: Iterable[Mapping[str, JsonValue]] | None = None,
    ) -> LayoutEntity:
        return cls(
            entity_type=entity_type,
            entity_id=entity_id,
            label=label,
            fields={LAYOUT_FIELD_NAME: LayoutSectionItemList.from_payload(sections)},
        )

    @property
    def identity(self) -> str:
        return f"{self.entity_type}:{self.entity_id}"

    def get_field(self, field_name: str) -> LayoutSectionItemList:
        """按字段名返回字段项列表.

        Raises:
            KeyError: 实体没有该字段时抛出.

        """
        return self.fields[field_name]

    def get_sections(self) -> list[SectionItemPayload]:
        return self.get_field(LAYOUT_FIELD_NAME).to_list()

    def copy(self) -> LayoutEntity:
        return LayoutEntity(
            entity_type=self.entity_type,
            entity_id=self.entity_id,
            label=self.label,
            fields={name: LayoutSectionItemList(deepcopy(list(items))) for name, items in self.fields.items()},
        )

    def layout_builder_url(self) -> str:
        """返回该实体的布局编辑器地址(需要 Flask 应用上下文)."""
        return url_for("layout_builder.view", entity_type=self.entity_type, entity_id=self.entity_id)
