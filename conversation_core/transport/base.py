"""Transport 抽象接口。

资源客户端与分页器不直接依赖 httpx，而是依赖此协议：

- request(method, path, params, body): 执行一次 HTTP 往返，成功时返回解析后的
  JSON（204 / 空响应体返回 None），失败时抛出 TransportError / ApiError。

测试或上层应用可以替换为任意实现（例如带连接池、带重试的版本）。
"""

from typing import Any, Dict, Optional, Protocol


class Transport(Protocol):
    """一次请求 = 一次往返，不做重试、不做分页。"""

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        ...
