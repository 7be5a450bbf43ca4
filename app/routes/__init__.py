"""路由模块。

定义所有 HTTP 路由端点，处理客户端请求并返回响应。


主要路由：
- layout_builder: 布局编辑器路由（区块配置表单、布局视图、可用布局列表）
"""

# 该文件仅作为包标识，避免在导入阶段引入循环依赖。
