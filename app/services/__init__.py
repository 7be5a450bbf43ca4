"""服务层模块..

提供布局编辑相关的业务服务.

主要模块:
- layout_builder: 布局渲染与 AJAX 命令构建
"""
