"""线上 JSON ⇄ 领域对象的转换层。

本模块是“服务端 JSON ⇄ SDK 内部模型”的核心转换层，全部为纯函数：
不做 I/O，不修改入参，遇到缺失或多余字段时降级处理而不是抛异常。

转换规则用静态字段表（FieldSpec）逐个声明，而不是在运行时对整个字典做
大小写转换：

- 表中没有的线上字段直接丢弃（包括 `_links` 之类的信封字段）。
- 线上值缺失或为 null 时，领域字段保持 None；写回请求时 None 字段直接省略。
- 调用方自定义的数据（见下方列表，读写均用 _verbatim）不经过字段表，
  整体深拷贝，内部键名一个字都不改。
"""

import copy
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple, Type

from conversation_core.domain.models import (
    AppChannel,
    AudioSettings,
    Channel,
    Conversation,
    ConversationCallback,
    ConversationProperties,
    ConversationTimestamps,
    InitiatorDetail,
    Link,
    Member,
    MemberInitiator,
    MemberMedia,
    MemberTimestamps,
    MemberUser,
    MessengerChannel,
    MmsChannel,
    Page,
    PageLinks,
    PhoneChannel,
    SipChannel,
    SmsChannel,
    UpdateMemberParameters,
    VbcChannel,
    ViberChannel,
    WebSocketChannel,
    WhatsAppChannel,
)


# 不参与字段表转换、原样深拷贝的字段（均为调用方自定义内容）：
# - properties.custom_data
# - callback.params
# - websocket channel 的 headers


@dataclass(frozen=True)
class FieldSpec:
    """单个字段的映射声明。

    - attr: 领域对象上的属性名。
    - wire: 线上 JSON 中的键名。
    - read: 线上值 -> 领域值的嵌套转换（None 表示标量直接复制）。
    - write: 领域值 -> 线上值的嵌套转换。
    """

    attr: str
    wire: str
    read: Optional[Callable[[Any], Any]] = None
    write: Optional[Callable[[Any], Any]] = None


def _verbatim(value: Any) -> Any:
    return copy.deepcopy(value)


def _decode(cls: Type, table: Sequence[FieldSpec], wire: Any):
    """按字段表把线上字典解析为 cls 实例；wire 不是字典时返回 None。"""

    if not isinstance(wire, Mapping):
        return None
    kwargs: Dict[str, Any] = {}
    for spec in table:
        value = wire.get(spec.wire)
        if value is None:
            continue
        kwargs[spec.attr] = spec.read(value) if spec.read else value
    return cls(**kwargs)


def _encode(obj: Any, table: Sequence[FieldSpec], omit: FrozenSet[str] = frozenset()) -> Dict[str, Any]:
    """按字段表把领域对象写成线上字典，None 字段省略。"""

    payload: Dict[str, Any] = {}
    for spec in table:
        if spec.attr in omit:
            continue
        value = getattr(obj, spec.attr, None)
        if value is None:
            continue
        payload[spec.wire] = spec.write(value) if spec.write else value
    return payload


def _nested(cls: Type, table: Sequence[FieldSpec]) -> Tuple[Callable[[Any], Any], Callable[[Any], Any]]:
    """为嵌套子结构生成 (read, write) 一对转换函数。"""

    return (lambda wire: _decode(cls, table, wire)), (lambda obj: _encode(obj, table))


# ---- Channel ----

_NUMBER_FIELDS = (FieldSpec("number", "number"),)

CHANNEL_TABLES: Dict[str, Tuple[Type[Channel], Tuple[FieldSpec, ...]]] = {
    "phone": (PhoneChannel, _NUMBER_FIELDS),
    "sms": (SmsChannel, _NUMBER_FIELDS),
    "mms": (MmsChannel, _NUMBER_FIELDS),
    "whatsapp": (WhatsAppChannel, _NUMBER_FIELDS),
    "viber": (ViberChannel, (FieldSpec("id", "id"),)),
    "messenger": (MessengerChannel, (FieldSpec("id", "id"),)),
    "app": (AppChannel, (FieldSpec("user", "user"),)),
    "sip": (
        SipChannel,
        (
            FieldSpec("uri", "uri"),
            FieldSpec("username", "username"),
            FieldSpec("password", "password"),
        ),
    ),
    "websocket": (
        WebSocketChannel,
        (
            FieldSpec("uri", "uri"),
            FieldSpec("content_type", "content-type"),
            FieldSpec("headers", "headers", _verbatim, _verbatim),
        ),
    ),
    "vbc": (VbcChannel, (FieldSpec("extension", "extension"),)),
}


def wire_to_channel(wire: Any) -> Optional[Channel]:
    """按 type 标签选择渠道变体；未知 type 只保留标签本身。"""

    if not isinstance(wire, Mapping) or not wire.get("type"):
        return None
    channel_type = wire["type"]
    entry = CHANNEL_TABLES.get(channel_type)
    if entry is None:
        return Channel(type=channel_type)
    cls, table = entry
    return _decode(cls, table, wire)


def channel_to_wire(channel: Channel) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"type": channel.type}
    entry = CHANNEL_TABLES.get(channel.type)
    if entry is not None:
        payload.update(_encode(channel, entry[1]))
    return payload


def _read_channels(wire: Any) -> Optional[List[Channel]]:
    if not isinstance(wire, list):
        return None
    channels = [wire_to_channel(item) for item in wire]
    return [c for c in channels if c is not None]


def _write_channels(channels: List[Channel]) -> List[Dict[str, Any]]:
    return [channel_to_wire(c) for c in channels]


# ---- Conversation ----

PROPERTIES_FIELDS = (
    FieldSpec("ttl", "ttl"),
    FieldSpec("type", "type"),
    FieldSpec("custom_sort_key", "custom_sort_key"),
    FieldSpec("custom_data", "custom_data", _verbatim, _verbatim),
)

CONVERSATION_TIMESTAMP_FIELDS = (
    FieldSpec("created", "created"),
    FieldSpec("updated", "updated"),
    FieldSpec("destroyed", "destroyed"),
)

CALLBACK_FIELDS = (
    FieldSpec("url", "url"),
    FieldSpec("event_mask", "event_mask"),
    FieldSpec("params", "params", _verbatim, _verbatim),
    FieldSpec("method", "method"),
)

CONVERSATION_FIELDS = (
    FieldSpec("id", "id"),
    FieldSpec("name", "name"),
    FieldSpec("display_name", "display_name"),
    FieldSpec("image_url", "image_url"),
    FieldSpec("state", "state"),
    FieldSpec("sequence_number", "sequence_number"),
    FieldSpec("properties", "properties", *_nested(ConversationProperties, PROPERTIES_FIELDS)),
    FieldSpec("timestamps", "timestamp", *_nested(ConversationTimestamps, CONVERSATION_TIMESTAMP_FIELDS)),
    FieldSpec("numbers", "numbers", _read_channels, _write_channels),
    FieldSpec("callback", "callback", *_nested(ConversationCallback, CALLBACK_FIELDS)),
)

# 服务端维护的字段，创建/更新请求中一律剔除
CONVERSATION_SERVER_OWNED: FrozenSet[str] = frozenset({"id", "sequence_number", "timestamps", "state"})


def wire_to_conversation(wire: Any) -> Conversation:
    """把会话的线上 JSON 解析为 Conversation。

    `_links` 等未在字段表中声明的键全部丢弃；properties.custom_data 原样复制。
    """

    return _decode(Conversation, CONVERSATION_FIELDS, wire) or Conversation()


def conversation_to_wire_request(conversation: Conversation) -> Dict[str, Any]:
    """把 Conversation 写成创建/更新请求体，剔除服务端维护的字段。"""

    return _encode(conversation, CONVERSATION_FIELDS, omit=CONVERSATION_SERVER_OWNED)


# ---- Member ----

USER_FIELDS = (
    FieldSpec("id", "id"),
    FieldSpec("name", "name"),
    FieldSpec("display_name", "display_name"),
)

# 创建成员时 user 只接受 id / name
USER_REQUEST_FIELDS = (
    FieldSpec("id", "id"),
    FieldSpec("name", "name"),
)

AUDIO_SETTINGS_FIELDS = (
    FieldSpec("enabled", "enabled"),
    FieldSpec("earmuffed", "earmuffed"),
    FieldSpec("muted", "muted"),
)

MEDIA_FIELDS = (
    FieldSpec("audio_settings", "audio_settings", *_nested(AudioSettings, AUDIO_SETTINGS_FIELDS)),
    FieldSpec("audio", "audio"),
)

INITIATOR_DETAIL_FIELDS = (
    FieldSpec("is_system", "is_system"),
    FieldSpec("user_id", "user_id"),
    FieldSpec("member_id", "member_id"),
)

INITIATOR_FIELDS = (
    FieldSpec("joined", "joined", *_nested(InitiatorDetail, INITIATOR_DETAIL_FIELDS)),
)

MEMBER_TIMESTAMP_FIELDS = (
    FieldSpec("invited", "invited"),
    FieldSpec("joined", "joined"),
    FieldSpec("left", "left"),
)

# 读取方向：user 不在顶层，而在 _embedded.user 中，单独处理
MEMBER_READ_FIELDS = (
    FieldSpec("id", "id"),
    FieldSpec("conversation_id", "conversation_id"),
    FieldSpec("state", "state"),
    FieldSpec("channel", "channel", wire_to_channel),
    FieldSpec("media", "media", _nested(MemberMedia, MEDIA_FIELDS)[0]),
    FieldSpec("knocking_id", "knocking_id"),
    FieldSpec("invited_by", "invited_by"),
    FieldSpec("initiator", "initiator", _nested(MemberInitiator, INITIATOR_FIELDS)[0]),
    FieldSpec("timestamps", "timestamp", _nested(MemberTimestamps, MEMBER_TIMESTAMP_FIELDS)[0]),
)

# 创建方向：同一个“邀请人”关系，线上字段名为 member_id_inviting
MEMBER_CREATE_FIELDS = (
    FieldSpec("state", "state"),
    FieldSpec("user", "user", write=lambda user: _encode(user, USER_REQUEST_FIELDS)),
    FieldSpec("channel", "channel", write=channel_to_wire),
    FieldSpec("media", "media", write=_nested(MemberMedia, MEDIA_FIELDS)[1]),
    FieldSpec("knocking_id", "knocking_id"),
    FieldSpec("invited_by", "member_id_inviting"),
)

UPDATE_MEMBER_FIELDS = (
    FieldSpec("state", "state"),
    FieldSpec("from_", "from"),
    FieldSpec(
        "reason",
        "reason",
        write=lambda reason: _encode(reason, (FieldSpec("code", "code"), FieldSpec("text", "text"))),
    ),
)


def wire_to_member(wire: Any) -> Member:
    """把成员的线上 JSON 解析为 Member。

    `_embedded.user`（去掉其 `_links`）被提升为顶层 user 字段；
    `_embedded` 与 `_links` 本身不会出现在领域对象中。
    """

    member = _decode(Member, MEMBER_READ_FIELDS, wire)
    if member is None:
        return Member()
    embedded = wire.get("_embedded")
    if isinstance(embedded, Mapping):
        member.user = _decode(MemberUser, USER_FIELDS, embedded.get("user"))
    return member


def member_to_wire_request(member: Member) -> Dict[str, Any]:
    """把 Member 写成创建请求体。

    id / timestamps / conversation_id / initiator 不会发送；
    invited_by 以 member_id_inviting 的名字发送。
    """

    return _encode(member, MEMBER_CREATE_FIELDS)


def update_member_to_wire(params: UpdateMemberParameters) -> Dict[str, Any]:
    return _encode(params, UPDATE_MEMBER_FIELDS)


# ---- 过滤参数 / 分页信封 ----

FILTER_FIELDS = (
    FieldSpec("page_size", "page_size"),
    FieldSpec("order", "order"),
    FieldSpec("date_end", "date_end"),
    FieldSpec("date_start", "date_start"),
    FieldSpec("cursor", "cursor"),
)


def filters_to_wire(filters: Any) -> Dict[str, Any]:
    """把过滤参数对象转换为查询参数，顺序与 FILTER_FIELDS 一致。

    cursor 是服务端给的不透明字符串，原样回传。
    """

    if filters is None:
        return {}
    return _encode(filters, FILTER_FIELDS)


def _read_link(wire: Any) -> Optional[Link]:
    if isinstance(wire, Mapping) and wire.get("href"):
        return Link(href=wire["href"])
    return None


def wire_to_page(data: Any, embedded_key: str, read_item: Callable[[Any], Any]) -> Page:
    """解析列表响应信封 `{page_size, _embedded: {<key>: [...]}, _links}`。

    信封残缺（没有 item 数组、类型不对）时按空页处理，不视为错误。
    """

    if not isinstance(data, Mapping):
        return Page()
    embedded = data.get("_embedded")
    raw_items = embedded.get(embedded_key) if isinstance(embedded, Mapping) else None
    if not isinstance(raw_items, list):
        raw_items = []
    links_raw = data.get("_links")
    links = PageLinks()
    if isinstance(links_raw, Mapping):
        links = PageLinks(
            self_link=_read_link(links_raw.get("self")),
            next_link=_read_link(links_raw.get("next")),
        )
    return Page(
        items=[read_item(item) for item in raw_items],
        page_size=data.get("page_size"),
        links=links,
    )
