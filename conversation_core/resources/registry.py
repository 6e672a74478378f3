"""资源配置。

每种集合资源在这里集中声明：

- collection_path: 集合路径模板，例如 "/v1/conversations/{conversation_id}/members"。
- embedded_key: 列表响应中 `_embedded` 下的 item 数组键名。
- read_item: 单个 item 的线上 JSON -> 领域对象转换函数。

资源客户端与分页器只依赖这里的声明，新增同类资源时只需补一条配置。"""

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from conversation_core.resources.transcoding import wire_to_conversation, wire_to_member


@dataclass
class ResourceConfig:
    """单个集合资源的配置。"""

    name: str
    collection_path: str
    embedded_key: str
    read_item: Callable[[Any], Any]

    def path(self, **ids: str) -> str:
        return self.collection_path.format(**ids)

    def item_path(self, item_id: str, **ids: str) -> str:
        return f"{self.path(**ids)}/{item_id}"


CONVERSATIONS = ResourceConfig(
    name="conversations",
    collection_path="/v1/conversations",
    embedded_key="conversations",
    read_item=wire_to_conversation,
)

MEMBERS = ResourceConfig(
    name="members",
    collection_path="/v1/conversations/{conversation_id}/members",
    embedded_key="members",
    read_item=wire_to_member,
)


RESOURCE_REGISTRY: Mapping[str, ResourceConfig] = {
    "conversations": CONVERSATIONS,
    "members": MEMBERS,
}


def get_resource_config(name: str) -> ResourceConfig:
    """根据名称获取 ResourceConfig，名称不区分大小写。"""

    key = name.lower()
    for k, cfg in RESOURCE_REGISTRY.items():
        if k.lower() == key:
            return cfg
    raise KeyError(f"Unknown resource: {name!r}")
