"""对外 API 服务模块。

提供简化的函数接口供上层应用调用，返回值均为普通字典，便于直接序列化。
"""

from dataclasses import asdict
from itertools import islice
from typing import Any, Dict, Optional

from conversation_core.config.settings import settings
from conversation_core.infrastructure.logging.logger import logger
from conversation_core.resources.conversations import ConversationsClient
from conversation_core.transport.http_client import HttpTransport


_client: Optional[ConversationsClient] = None


def get_default_client() -> ConversationsClient:
    """获取默认的 ConversationsClient 实例（单例）。"""
    global _client
    if _client is None:
        _client = ConversationsClient(HttpTransport(settings), settings)
    return _client


def list_conversations(limit: Optional[int] = None) -> list[Dict[str, Any]]:
    """列出会话。

    Args:
        limit: 最多返回的条数（可选，不提供则遍历全部分页）

    Returns:
        会话列表，每项为 Conversation 的字典形式

    Raises:
        各种 domain.exceptions 中定义的异常
    """
    try:
        items = islice(get_default_client().list_all_conversations(), limit)
        return [asdict(c) for c in items]
    except Exception as e:
        logger.error(f"List conversations failed: {e}", extra={"extra": {"error": str(e)}})
        raise


def list_conversation_members(conversation_id: str, limit: Optional[int] = None) -> list[Dict[str, Any]]:
    """列出会话成员。

    Args:
        conversation_id: 会话ID
        limit: 最多返回的条数（可选）

    Returns:
        成员列表，每项为 Member 的字典形式
    """
    try:
        items = islice(get_default_client().list_all_members(conversation_id), limit)
        return [asdict(m) for m in items]
    except Exception as e:
        logger.error(f"List members failed: {e}", extra={"extra": {
            "conversation_id": conversation_id,
            "error": str(e),
        }})
        raise
