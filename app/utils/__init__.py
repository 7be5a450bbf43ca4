"""工具模块.

包含各种实用工具和辅助函数,提供通用的功能支持.

主要工具:
- request_payload: 请求 payload 解析
- response_utils: 统一响应封装
- route_safety: 路由安全执行与上下文日志
- structlog_config: 结构化日志配置
- time_utils: 时间处理工具
"""
