"""Tests for API functionality."""

import pytest

try:
    from fastapi.testclient import TestClient

    from mdbridge.api.app import create_app, generate_token
    FASTAPI_AVAILABLE = True
except ImportError:
    FASTAPI_AVAILABLE = False
    TestClient = None  # type: ignore

from mdbridge.config import BridgeConfig
from mdbridge.runtime import build_runtime

pytestmark = pytest.mark.skipif(not FASTAPI_AVAILABLE, reason="FastAPI not installed")


@pytest.fixture
def runtime():
    """Runtime wired from default settings, independent of any mdbridge.toml."""
    return build_runtime(config=BridgeConfig())


@pytest.fixture
def client(runtime):
    return TestClient(create_app(runtime, token=None))


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_token_required(runtime):
    token = generate_token()
    client = TestClient(create_app(runtime, token=token))

    assert client.get("/health").status_code == 401
    assert client.get("/health", headers={"Authorization": "Bearer wrong"}).status_code == 401
    ok = client.get("/health", headers={"Authorization": f"Bearer {token}"})
    assert ok.status_code == 200


def test_convert_and_serialize(client):
    text = "# Title\n\n```mermaid\ngitGraph\n  commit\n```\n"

    nodes = client.post("/convert", json={"text": text}).json()["nodes"]
    assert nodes[0]["id"] == "title"
    assert nodes[1]["type"] == "diagram"
    assert nodes[1]["kind"] == "git"

    markdown = client.post("/serialize", json={"nodes": nodes}).json()["markdown"]
    assert markdown == "# Title\n\n```mermaid\ngitGraph\n  commit\n```\n"


def test_serialize_rejects_bad_tree(client):
    response = client.post("/serialize", json={"nodes": [{"type": "diagram", "kind": "venn"}]})
    assert response.status_code == 422


def test_scan_and_sniff(client):
    segments = client.post("/scan", json={"text": "```mermaid\npie\n```"}).json()["segments"]
    assert segments == [{"start": 0, "end": 18, "kind": "pie", "content": "pie"}]

    assert client.post("/sniff", json={"text": "**x**"}).json() == {"markdown": True}
    assert client.post("/sniff", json={"text": "x"}).json() == {"markdown": False}


def test_html(client):
    nodes = [{"type": "paragraph", "children": [{"type": "text", "text": "a & b"}]}]
    assert client.post("/html", json={"nodes": nodes}).json() == {"html": "<p>a &amp; b</p>"}


def test_paste(client):
    nodes = [{"type": "paragraph", "children": [{"type": "text", "text": "keep"}]}]
    response = client.post("/paste", json={
        "text": "## New\n\n```mermaid\njourney\n  title J\n```",
        "nodes": nodes,
        "selection": [1, 1],
    })
    body = response.json()

    assert body["handled"] is True
    assert [n["type"] for n in body["nodes"]] == ["paragraph", "heading", "diagram"]
    assert body["nodes"][2]["kind"] == "journey"
    assert body["selection"] == [3, 3]


def test_paste_plain_text_not_handled(client):
    body = client.post("/paste", json={"text": "hello"}).json()
    assert body == {"handled": False, "nodes": [], "selection": [0, 0]}


def test_paste_bad_selection(client):
    response = client.post("/paste", json={"text": "# x", "nodes": [], "selection": [0, 4]})
    assert response.status_code == 422


def test_copy(client):
    nodes = [
        {"type": "heading", "level": 2, "id": "t", "children": [{"type": "text", "text": "T"}]},
        {"type": "diagram", "source": "graph TD"},
    ]
    body = client.post("/copy", json={"nodes": nodes, "selection": [1, 2]}).json()

    assert body["handled"] is True
    assert body["clipboard"]["text/plain"] == "```mermaid\ngraph TD\n```"
    assert body["clipboard"]["text/html"].startswith('<div data-type="mermaid-block"')


def test_copy_empty_selection(client):
    body = client.post("/copy", json={"nodes": [], "selection": None}).json()
    assert body == {"handled": False, "clipboard": {}}
