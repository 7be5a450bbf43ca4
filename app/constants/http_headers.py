"""HTTP 头常量."""

from __future__ import annotations


class HttpHeaders:
    """常用 HTTP 头名称,避免魔法字符串."""

    X_REQUESTED_WITH = "X-Requested-With"

    XML_HTTP_REQUEST = "XMLHttpRequest"
