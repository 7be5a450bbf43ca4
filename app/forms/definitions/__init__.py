"""表单结构定义集合。"""

from .base import FieldComponent, FieldOption, FormElements, FormField, SectionFormTree, SubmitAction

__all__ = [
    "FieldComponent",
    "FieldOption",
    "FormElements",
    "FormField",
    "SectionFormTree",
    "SubmitAction",
]
