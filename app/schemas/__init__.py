"""Pydantic schemas.

集中维护布局配置子表单的 payload schema, 负责类型约束与中文错误文案.
"""
