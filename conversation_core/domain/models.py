"""会话与成员的领域数据模型。

本模块定义了 SDK 对调用方暴露的标准数据结构：

- Conversation: 一个会话（含 properties / timestamps / callback 等子结构）。
- Member: 会话中的一个成员（含 user / channel / media / initiator 等子结构）。
- Page: 一页列表结果，附带分页链接。
- ListConversationsParameters / ListMembersParameters: 列表过滤参数（不可变）。

这里只描述“领域形状”：字段全部使用 Python 命名，不包含任何 `_embedded`、
`_links` 之类的线上信封字段。线上 JSON ⇄ 领域对象的转换统一放在
resources.transcoding 中完成。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Literal, Optional, TypeVar


# 会话状态，由服务端维护
ConversationState = Literal["ACTIVE", "INACTIVE", "DELETED"]

# 成员状态；状态迁移是否合法由服务端判断，本层不做校验
MemberState = Literal["INVITED", "JOINED", "LEFT", "UNKNOWN"]

ChannelType = Literal[
    "app",
    "phone",
    "sms",
    "mms",
    "whatsapp",
    "viber",
    "messenger",
    "sip",
    "websocket",
    "vbc",
]

SortOrder = Literal["asc", "desc", "ASC", "DESC"]

T = TypeVar("T")


# ---- Channel（按 type 区分的变体） ----


@dataclass
class Channel:
    """渠道基类，type 为变体标签。未识别的 type 直接解析为本类。"""

    type: str


@dataclass
class PhoneChannel(Channel):
    number: Optional[str] = None
    type: str = "phone"


@dataclass
class SmsChannel(Channel):
    number: Optional[str] = None
    type: str = "sms"


@dataclass
class MmsChannel(Channel):
    number: Optional[str] = None
    type: str = "mms"


@dataclass
class WhatsAppChannel(Channel):
    number: Optional[str] = None
    type: str = "whatsapp"


@dataclass
class ViberChannel(Channel):
    id: Optional[str] = None
    type: str = "viber"


@dataclass
class MessengerChannel(Channel):
    id: Optional[str] = None
    type: str = "messenger"


@dataclass
class AppChannel(Channel):
    user: Optional[str] = None
    type: str = "app"


@dataclass
class SipChannel(Channel):
    uri: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    type: str = "sip"


@dataclass
class WebSocketChannel(Channel):
    """WebSocket 渠道。headers 由调用方自定义，原样透传。"""

    uri: Optional[str] = None
    content_type: Optional[str] = None
    headers: Optional[Dict[str, Any]] = None
    type: str = "websocket"


@dataclass
class VbcChannel(Channel):
    extension: Optional[str] = None
    type: str = "vbc"


# ---- Conversation ----


@dataclass
class ConversationProperties:
    """会话属性。

    - custom_data: 调用方自定义的任意嵌套字典，读写两个方向都原样复制，
      不做任何键名转换。
    """

    ttl: Optional[int] = None
    type: Optional[str] = None
    custom_sort_key: Optional[str] = None
    custom_data: Optional[Dict[str, Any]] = None


@dataclass
class ConversationTimestamps:
    created: Optional[str] = None
    updated: Optional[str] = None
    destroyed: Optional[str] = None


@dataclass
class ConversationCallback:
    """事件回调配置。params 为调用方自定义参数，原样透传。"""

    url: Optional[str] = None
    event_mask: Optional[str] = None
    params: Optional[Dict[str, Any]] = None
    method: Optional[str] = None


@dataclass
class Conversation:
    """一个会话。

    id / state / sequence_number / timestamps 由服务端维护，
    创建和更新请求中会被剔除。
    """

    id: Optional[str] = None
    name: Optional[str] = None
    display_name: Optional[str] = None
    image_url: Optional[str] = None
    state: Optional[ConversationState] = None
    sequence_number: Optional[int] = None
    properties: Optional[ConversationProperties] = None
    timestamps: Optional[ConversationTimestamps] = None
    numbers: Optional[List[Channel]] = None
    callback: Optional[ConversationCallback] = None


# ---- Member ----


@dataclass
class MemberUser:
    id: Optional[str] = None
    name: Optional[str] = None
    display_name: Optional[str] = None


@dataclass
class AudioSettings:
    enabled: Optional[bool] = None
    earmuffed: Optional[bool] = None
    muted: Optional[bool] = None


@dataclass
class MemberMedia:
    audio_settings: Optional[AudioSettings] = None
    audio: Optional[bool] = None


@dataclass
class InitiatorDetail:
    is_system: Optional[bool] = None
    user_id: Optional[str] = None
    member_id: Optional[str] = None


@dataclass
class MemberInitiator:
    joined: Optional[InitiatorDetail] = None


@dataclass
class MemberTimestamps:
    invited: Optional[str] = None
    joined: Optional[str] = None
    left: Optional[str] = None


@dataclass
class Member:
    """会话中的一个成员。

    - knocking_id: “敲门者”ID，即尚未被接纳进会话的预备成员。
    - invited_by: 发出邀请的成员 ID（读取与创建时线上字段名不同，由转换层处理）。
    """

    id: Optional[str] = None
    conversation_id: Optional[str] = None
    state: Optional[MemberState] = None
    user: Optional[MemberUser] = None
    channel: Optional[Channel] = None
    media: Optional[MemberMedia] = None
    knocking_id: Optional[str] = None
    invited_by: Optional[str] = None
    initiator: Optional[MemberInitiator] = None
    timestamps: Optional[MemberTimestamps] = None


@dataclass
class MemberLeaveReason:
    code: Optional[str] = None
    text: Optional[str] = None


@dataclass
class UpdateMemberParameters:
    """成员更新参数。将 state 设为 "LEFT" 即表示成员离开会话。"""

    state: Optional[MemberState] = None
    from_: Optional[str] = None  # 线上字段名为 "from"
    reason: Optional[MemberLeaveReason] = None


# ---- 分页 ----


@dataclass
class Link:
    href: str


@dataclass
class PageLinks:
    self_link: Optional[Link] = None
    next_link: Optional[Link] = None


@dataclass
class Page(Generic[T]):
    """一页列表结果，items 保持服务端返回顺序。"""

    items: List[T] = field(default_factory=list)
    page_size: Optional[int] = None
    links: PageLinks = field(default_factory=PageLinks)


@dataclass(frozen=True)
class ListConversationsParameters:
    """会话列表过滤参数。

    对象不可变；分页游标由迭代器自己维护，不会回写到调用方的实例上。
    date_start / date_end 原样发送，不做格式化。
    """

    page_size: Optional[int] = None
    order: Optional[SortOrder] = None
    date_end: Optional[str] = None
    date_start: Optional[str] = None
    cursor: Optional[str] = None


@dataclass(frozen=True)
class ListMembersParameters:
    """成员列表过滤参数（不可变）。"""

    page_size: Optional[int] = None
    order: Optional[SortOrder] = None
    cursor: Optional[str] = None
