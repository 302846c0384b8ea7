import httpx
import pytest
from fastapi.testclient import TestClient

from config import Config
from app.dependencies import get_config, get_http_client
from app.main import app

BASE_URL = "https://api.example.test/v1.3"
BRAND_INDEX = "brand-idx"
CREATOR_INDEX = "creator-idx"

ENV = {
    "TWELVELABS_API_KEY": "test-key",
    "TWELVELABS_API_BASE_URL": BASE_URL,
    "BRAND_INDEX_ID": BRAND_INDEX,
    "CREATOR_INDEX_ID": CREATOR_INDEX,
    "SEARCH_RETRY_DELAY": "0",
}


def form_fields(request: httpx.Request):
    """Decode a multipart request body into (name, value) pairs."""
    boundary = request.headers["content-type"].split("boundary=")[1].encode()
    fields = []
    for part in request.content.split(b"--" + boundary):
        if b'name="' not in part:
            continue
        head, _, value = part.partition(b"\r\n\r\n")
        name = head.split(b'name="')[1].split(b'"')[0].decode()
        fields.append((name, value.rstrip(b"\r\n").decode()))
    return fields


class FakeUpstream:
    """Records every upstream request and answers with ``handler``."""

    def __init__(self):
        self.requests = []
        self.handler = lambda request: httpx.Response(200, json={"data": [], "page_info": {}})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def search_calls(self, index_id=None):
        calls = [r for r in self.requests if r.method == "POST" and r.url.path.endswith("/search")]
        if index_id is None:
            return calls
        return [r for r in calls if dict(form_fields(r)).get("index_id") == index_id]


@pytest.fixture
def test_config(monkeypatch):
    for key in ("NEXT_PUBLIC_BRAND_INDEX_ID", "NEXT_PUBLIC_CREATOR_INDEX_ID"):
        monkeypatch.delenv(key, raising=False)
    for key, value in ENV.items():
        monkeypatch.setenv(key, value)
    return Config()


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def client(test_config, upstream):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    app.dependency_overrides[get_config] = lambda: test_config
    app.dependency_overrides[get_http_client] = lambda: http_client
    yield TestClient(app)
    app.dependency_overrides.clear()
