"""会话资源访问层。

该包下的模块负责：
- 线上 JSON ⇄ 领域对象的转换 (transcoding)。
- 维护资源路径与转换函数的配置 (registry)。
- 游标分页与惰性遍历 (pagination)。
- 对外的资源客户端 (conversations)。
"""

from typing import Callable, Optional

from conversation_core.config.settings import settings
from conversation_core.resources.conversations import ConversationsClient
from conversation_core.transport.http_client import HttpTransport


def create_client(token_provider: Optional[Callable[[], str]] = None) -> ConversationsClient:
    """根据全局配置创建 ConversationsClient，可选传入 token 回调。"""

    return ConversationsClient(HttpTransport(settings, token_provider=token_provider), settings)
