"""
表单定义包

集中管理区块配置表单的字段、表单树与表单状态。
"""

from .definitions.base import (
    FieldComponent,
    FieldOption,
    FormField,
    SectionFormTree,
    SubmitAction,
)
from .form_state import FormState, SubformState

__all__ = [
    "FieldComponent",
    "FieldOption",
    "FormField",
    "FormState",
    "SectionFormTree",
    "SubformState",
    "SubmitAction",
]
