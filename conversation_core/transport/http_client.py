"""基于 httpx 的 Transport 实现。

本模块负责：

1. 拼接 api_host 与资源路径，附加 Bearer 认证头。
2. 发送 HTTP 请求并把网络异常包装为 TransportError。
3. 把非 2xx 响应包装为 ApiError（429 为 RateLimitError），保留结构化错误体。
4. 成功时返回解析后的 JSON；204 或空响应体直接返回 None，不做解析。

token 的签发（JWT 签名等）不在这里完成：调用方要么在配置里提供 api_token，
要么传入 token_provider 回调，每次请求前取一次。
"""

from typing import Any, Callable, Dict, Optional

import httpx

from conversation_core.config.settings import settings
from conversation_core.domain.exceptions import ApiError, RateLimitError, TransportError, ValidationError
from conversation_core.infrastructure.logging.logger import logger


class HttpTransport:
    """同步 HTTP 传输层。

    - cfg: 配置对象，读取 api_host / api_token / http_timeout。
    - token_provider: 可选的 token 回调，优先级高于 cfg.api_token。
    """

    def __init__(self, cfg=settings, token_provider: Optional[Callable[[], str]] = None):
        self._settings = cfg
        self._token_provider = token_provider

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """执行一次 HTTP 往返。

        步骤：
        1. 取 token，缺失时抛 ValidationError（不发请求）。
        2. 发送请求并捕获网络错误。
        3. 按状态码区分限流 / 其他错误 / 成功。
        """

        headers = {
            "Authorization": f"Bearer {self._token()}",
            "Accept": "application/json",
        }
        if body is not None:
            headers["Content-Type"] = "application/json"
        url = f"{self._settings.api_host}{path}"
        try:
            with httpx.Client(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = client.request(method, url, params=params or None, json=body, headers=headers)
        except httpx.RequestError as e:
            logger.error(f"{method} {path} failed: {e}", extra={"extra": {"method": method, "path": path}})
            raise TransportError(code="TRANSPORT_ERROR", message=str(e), http_status=503)
        logger.info(
            f"{method} {path} -> {resp.status_code}",
            extra={"extra": {"method": method, "path": path, "status": resp.status_code}},
        )
        if resp.status_code == 429:
            raise RateLimitError(
                code="RATE_LIMIT",
                message="Conversation API rate limit",
                http_status=429,
                body=self._error_body(resp),
            )
        if resp.status_code >= 400:
            error_body = self._error_body(resp)
            raise ApiError(
                code="API_ERROR",
                message=self._error_message(error_body, resp.text),
                http_status=resp.status_code,
                body=error_body,
            )
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    def _token(self) -> str:
        if self._token_provider is not None:
            token = self._token_provider()
        else:
            token = getattr(self._settings, "api_token", None)
        if not token:
            # 配置缺失走 ValidationError，方便上层统一处理
            raise ValidationError(code="MISSING_API_TOKEN", message="API_TOKEN not set")
        return token

    @staticmethod
    def _error_body(resp) -> Optional[Dict[str, Any]]:
        """尝试把错误响应解析为结构化错误体（type/title/detail/instance）。"""

        if not resp.content:
            return None
        try:
            data = resp.json()
        except ValueError:
            return None
        return data if isinstance(data, dict) else None

    @staticmethod
    def _error_message(error_body: Optional[Dict[str, Any]], raw_text: str) -> str:
        if error_body:
            title = error_body.get("title")
            detail = error_body.get("detail")
            if title and detail:
                return f"{title}: {detail}"
            if title or detail:
                return str(title or detail)
        return raw_text
