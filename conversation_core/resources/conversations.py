"""会话 / 成员资源客户端。

对外提供会话的增删改查、成员的增查改以及两类资源的分页遍历。
每个单条操作恰好一次 HTTP 往返；列表遍历全部委托给 PageIterator。

示例::

    client = ConversationsClient()
    for conversation in client.list_all_conversations():
        print(conversation.name)
"""

from typing import Optional

from conversation_core.config.settings import settings
from conversation_core.domain.exceptions import ValidationError
from conversation_core.domain.models import (
    Conversation,
    ListConversationsParameters,
    ListMembersParameters,
    Member,
    Page,
    UpdateMemberParameters,
)
from conversation_core.resources.pagination import PageFetcher, PageIterator
from conversation_core.resources.registry import CONVERSATIONS, MEMBERS
from conversation_core.resources.transcoding import (
    conversation_to_wire_request,
    member_to_wire_request,
    update_member_to_wire,
    wire_to_conversation,
    wire_to_member,
)
from conversation_core.transport.base import Transport
from conversation_core.transport.http_client import HttpTransport


class ConversationsClient:
    """会话 API 客户端。

    - transport: 可替换的传输层，默认使用 HttpTransport(cfg)。
    - cfg: 配置对象，读取 max_pages 等分页参数。

    成员没有删除操作：成员离开会话通过 update_member 把 state 设为 "LEFT"。
    """

    name = "conversations"

    def __init__(self, transport: Optional[Transport] = None, cfg=settings):
        self._settings = cfg
        self._transport = transport or HttpTransport(cfg)

    # ---- 会话 ----

    def list_all_conversations(
        self, filters: Optional[ListConversationsParameters] = None
    ) -> PageIterator[Conversation]:
        """遍历所有会话，按需逐页请求。"""

        fetcher: PageFetcher[Conversation] = PageFetcher(
            self._transport, CONVERSATIONS, CONVERSATIONS.path()
        )
        return PageIterator(fetcher, filters or ListConversationsParameters(), self._max_pages())

    def get_conversation_page(
        self, filters: Optional[ListConversationsParameters] = None
    ) -> Page[Conversation]:
        fetcher: PageFetcher[Conversation] = PageFetcher(
            self._transport, CONVERSATIONS, CONVERSATIONS.path()
        )
        return fetcher.fetch(filters)

    def create_conversation(self, conversation: Conversation) -> Conversation:
        data = self._transport.request(
            "POST", CONVERSATIONS.path(), body=conversation_to_wire_request(conversation)
        )
        return wire_to_conversation(data)

    def get_conversation(self, conversation_id: str) -> Conversation:
        data = self._transport.request("GET", CONVERSATIONS.item_path(conversation_id))
        return wire_to_conversation(data)

    def update_conversation(self, conversation: Conversation) -> Conversation:
        """用 PUT 更新会话，路径中的 ID 取自 conversation.id。"""

        if not conversation.id:
            raise ValidationError(code="MISSING_CONVERSATION_ID", message="conversation.id is required")
        data = self._transport.request(
            "PUT",
            CONVERSATIONS.item_path(conversation.id),
            body=conversation_to_wire_request(conversation),
        )
        return wire_to_conversation(data)

    def delete_conversation(self, conversation_id: str) -> None:
        # 204 无响应体，结果直接丢弃
        self._transport.request("DELETE", CONVERSATIONS.item_path(conversation_id))

    # ---- 成员 ----

    def list_all_members(
        self, conversation_id: str, filters: Optional[ListMembersParameters] = None
    ) -> PageIterator[Member]:
        """遍历会话内所有成员，按需逐页请求。"""

        fetcher: PageFetcher[Member] = PageFetcher(
            self._transport, MEMBERS, MEMBERS.path(conversation_id=conversation_id)
        )
        return PageIterator(fetcher, filters or ListMembersParameters(), self._max_pages())

    def get_member_page(
        self, conversation_id: str, filters: Optional[ListMembersParameters] = None
    ) -> Page[Member]:
        fetcher: PageFetcher[Member] = PageFetcher(
            self._transport, MEMBERS, MEMBERS.path(conversation_id=conversation_id)
        )
        return fetcher.fetch(filters)

    def create_member(self, conversation_id: str, member: Member) -> Member:
        data = self._transport.request(
            "POST",
            MEMBERS.path(conversation_id=conversation_id),
            body=member_to_wire_request(member),
        )
        return wire_to_member(data)

    def get_member(self, conversation_id: str, member_id: str) -> Member:
        data = self._transport.request(
            "GET", MEMBERS.item_path(member_id, conversation_id=conversation_id)
        )
        return wire_to_member(data)

    def get_me(self, conversation_id: str) -> Member:
        """获取当前 token 对应用户在会话中的成员信息。"""

        return self.get_member(conversation_id, "me")

    def update_member(
        self, conversation_id: str, member_id: str, params: UpdateMemberParameters
    ) -> Member:
        """用 PATCH 更新成员；状态迁移是否合法由服务端判断。"""

        data = self._transport.request(
            "PATCH",
            MEMBERS.item_path(member_id, conversation_id=conversation_id),
            body=update_member_to_wire(params),
        )
        return wire_to_member(data)

    def _max_pages(self) -> Optional[int]:
        return getattr(self._settings, "max_pages", None)
