"""Conversation Core 顶层包。

该包提供消息平台“会话 / 成员”两类集合资源的客户端实现，
包括配置加载、领域模型、线上 JSON 转换、游标分页与 HTTP 传输。
"""

from conversation_core.resources import ConversationsClient, create_client

__all__ = ["ConversationsClient", "create_client"]
