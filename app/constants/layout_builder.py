"""布局编辑器相关常量.

字段名、表单 ID、AJAX 包装格式等值被表单处理器、视图与路由共享.
"""

from __future__ import annotations

from typing import Final

# 实体上保存布局区块的字段名
LAYOUT_FIELD_NAME: Final[str] = "layout_builder__layout"

# 区块配置子表单在表单树中的保留键
LAYOUT_SETTINGS_KEY: Final[str] = "layout_settings"

CONFIGURE_SECTION_FORM_ID: Final[str] = "layout_builder_configure_section"
CONFIGURE_OPERATION: Final[str] = "configure"

SUBMIT_LABEL_UPDATE: Final[str] = "Update"
SUBMIT_LABEL_ADD: Final[str] = "Add section"
AJAX_SUBMIT_CALLBACK: Final[str] = "ajax_submit"

WRAPPER_FORMAT_PARAM: Final[str] = "_wrapper_format"
AJAX_WRAPPER_FORMATS: Final[frozenset[str]] = frozenset(
    {
        "ajax",
        "modal",
        "dialog",
        "dialog.off_canvas",
    },
)

LAYOUT_BUILDER_SELECTOR: Final[str] = "#layout-builder"
OFF_CANVAS_SELECTOR: Final[str] = "#layout-builder-off-canvas"

TEMPSTORE_KEY_PREFIX: Final[str] = "layout_builder.section_storage"
DEFAULT_TEMPSTORE_EXPIRE_SECONDS: Final[int] = 7 * 24 * 3600

LAYOUT_LABEL_MAX_LENGTH: Final[int] = 255
