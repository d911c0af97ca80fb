from fastapi.testclient import TestClient

from hello_api.main import app, create_app


def test_root_greets():
    client = TestClient(app)
    r = client.get("/")
    assert r.status_code == 200
    assert r.text == "Hello, World!"
    assert r.headers["content-type"].startswith("text/html")


def test_unknown_path_is_not_found():
    client = TestClient(app)
    assert client.get("/anything-else").status_code == 404


def test_post_root_falls_through_to_framework_default():
    client = TestClient(app)
    r = client.post("/", json={"name": "pigeon"})
    assert r.status_code == 405
    assert client.get("/").text == "Hello, World!"


def test_malformed_json_does_not_break_the_app():
    client = TestClient(app)
    r = client.post("/", content=b'{"broken": ', headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "invalid_json"
    assert client.get("/").status_code == 200


def test_json_limit_from_environment_reaches_middleware(monkeypatch):
    monkeypatch.setenv("JSON_LIMIT", "16")
    client = TestClient(create_app())
    r = client.post("/", json={"payload": "x" * 64})
    assert r.status_code == 413
    assert r.json()["error"]["details"]["limit"] == 16
