"""统一业务异常模型。

所有跨模块抛出的错误都继承自 BusinessError，调用方可以只捕获这一层。
传输层负责抛出 TransportError / ApiError，分页与资源客户端不做任何重试或吞错，
原样向上传递。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "TRANSPORT_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如服务端返回的结构化错误体 body）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class TransportError(BusinessError):
    """传输层错误，例如 DNS 失败、连接被拒、超时等。"""


class ApiError(BusinessError):
    """服务端返回非 2xx 时抛出，extra["body"] 保存结构化错误体（若为 JSON）。"""

    @property
    def body(self):
        return self.extra.get("body")


class RateLimitError(ApiError):
    """HTTP 429，由上层负责重试/退避策略。"""


class ValidationError(BusinessError):
    """参数或配置校验失败（缺少 token、缺少资源 ID 等）。"""


class PaginationLimitError(BusinessError):
    """遍历的页数超过 max_pages 上限。"""
