import copy
import json

import pytest

from conversation_core.resources.conversations import ConversationsClient
from conversation_core.transport.http_client import HttpTransport


BASE_URL = "https://api.nexmo.com"
CONVERSATION_ID = "CON-00000000-0000-0000-0000-000000000001"
MEMBER_ID = "MEM-00000000-0000-0000-0000-000000000001"

CONVERSATION_RESPONSE = {
    "id": CONVERSATION_ID,
    "name": "New Conversation",
    "display_name": "New Conversation",
    "image_url": "https://example.com/image.png",
    "state": "ACTIVE",
    "sequence_number": 0,
    "timestamp": {
        "created": "2024-01-17T13:45:56.000Z",
        "updated": "2024-01-17T13:45:56.000Z",
    },
    "properties": {
        "ttl": 86400,
        "type": "public",
        "custom_sort_key": "foo",
        "custom_data": {"foo": "bar", "fizzBuzz": 123, "baz_bat": True},
    },
    "_links": {"self": {"href": f"{BASE_URL}/v1/conversations/{CONVERSATION_ID}"}},
}

MEMBER_RESPONSE = {
    "id": MEMBER_ID,
    "state": "JOINED",
    "_embedded": {
        "user": {
            "id": "USR-00000000-0000-0000-0000-000000000001",
            "name": "Alice Smith",
            "display_name": "Alice",
            "_links": {"self": {"href": f"{BASE_URL}/v1/users/USR-00000000-0000-0000-0000-000000000001"}},
        },
    },
    "timestamp": {
        "invited": "2024-01-17T13:45:56.000Z",
        "joined": "2024-01-17T13:45:56.000Z",
    },
    "initiator": {
        "joined": {
            "is_system": True,
            "user_id": "USR-00000000-0000-0000-0000-000000000002",
            "member_id": "MEM-00000000-0000-0000-0000-000000000002",
        }
    },
    "channel": {"type": "phone", "number": "447700900000"},
    "media": {
        "audio_settings": {"enabled": True, "earmuffed": False, "muted": False},
        "audio": True,
    },
    "knocking_id": "MEM-00000000-0000-0000-0000-000000000003",
    "invited_by": "USR-00000000-0000-0000-0000-000000000003",
    "_links": {"self": {"href": f"{BASE_URL}/v1/conversations/{CONVERSATION_ID}/members/{MEMBER_ID}"}},
}


class SettingsStub:
    api_host = BASE_URL
    api_token = "token-123"
    http_timeout = 1.0
    max_pages = None


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self.content = json.dumps(payload).encode("utf-8") if payload is not None else text.encode("utf-8")
        self.text = self.content.decode("utf-8")
        self.json_calls = 0

    def json(self):
        self.json_calls += 1
        return json.loads(self.content)


class FakeHttp:
    """httpx.Client 的替身：记录每次请求，并按顺序返回预置的响应。"""

    def __init__(self):
        self.requests = []
        self.responses = []

    def queue(self, status_code=200, payload=None, text=""):
        resp = FakeResponse(status_code, payload, text)
        self.responses.append(resp)
        return resp

    def client_class(self):
        fake = self

        class Client:
            def __init__(self, *a, **kw):
                self.kwargs = kw

            def __enter__(self):
                return self

            def __exit__(self, *a):
                return False

            def request(self, method, url, params=None, json=None, headers=None):
                fake.requests.append(
                    {"method": method, "url": url, "params": params, "json": json, "headers": headers}
                )
                if not fake.responses:
                    raise AssertionError(f"unexpected request: {method} {url}")
                return fake.responses.pop(0)

        return Client


@pytest.fixture
def fake_http(monkeypatch):
    fake = FakeHttp()
    monkeypatch.setattr("httpx.Client", fake.client_class())
    return fake


@pytest.fixture
def settings_stub():
    return SettingsStub()


@pytest.fixture
def client(fake_http, settings_stub):
    return ConversationsClient(HttpTransport(settings_stub), settings_stub)


@pytest.fixture
def conversation_response():
    return copy.deepcopy(CONVERSATION_RESPONSE)


@pytest.fixture
def member_response():
    return copy.deepcopy(MEMBER_RESPONSE)


def page_of(key, items, next_href=None, page_size=10):
    links = {"self": {"href": f"/v1/{key}"}}
    if next_href:
        links["next"] = {"href": next_href}
    return {"page_size": page_size, "_embedded": {key: items}, "_links": links}


@pytest.fixture
def make_page():
    return page_of
